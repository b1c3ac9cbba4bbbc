"""Constants shared across the dashboard modules."""

from typing import Final


# Status service
SERVICE_NAME: Final = "pollbot"
DEFAULT_POLLBOT_URL: Final = "https://pollbot.services.mozilla.com/v1"
DEFAULT_REQUEST_TIMEOUT_SECONDS: Final = 30.0

# Products the router accepts in a deep link
PRODUCTS: Final[tuple[str, ...]] = ("thunderbird",)

# Release channels, in menu order
CHANNELS: Final[tuple[str, ...]] = ("nightly", "beta", "release")

# Auto-refresh interval (seconds)
DEFAULT_REFRESH_INTERVAL_SECONDS: Final = 60.0

# Log component names
COMPONENT_STORE = "store"
COMPONENT_ROUTER = "router"
COMPONENT_FETCH = "fetch"
COMPONENT_ORCHESTRATION = "orchestration"
COMPONENT_SCHEDULER = "scheduler"
COMPONENT_VIEW = "view"
COMPONENT_CLI = "cli"
