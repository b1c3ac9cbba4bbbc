"""URL fragment parsing for deep links."""

import re
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

from delivery_dashboard.config.constants import PRODUCTS, SERVICE_NAME


# Eg: #pollbot/thunderbird/60.0
FRAGMENT_PATTERN = re.compile(r"^#(\w+)/(\w+)/([^/]+)/?", re.ASCII)


class ParsedFragment(BaseModel):
    """A (product, version) selection decoded from a deep link."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    service: str
    product: str
    version: str


def parse_fragment(
    fragment: str,
    products: Iterable[str] = PRODUCTS,
) -> ParsedFragment | None:
    """Parse a ``#<service>/<product>/<version>[/]`` fragment.

    Args:
        fragment: Address-bar fragment, including the leading ``#``.
        products: Supported products.

    Returns:
        ParsedFragment, or None if malformed or the product is unsupported.
    """
    match = FRAGMENT_PATTERN.match(fragment)
    if match is None:
        return None

    service, product, version = match.groups()
    if product not in set(products):
        return None

    return ParsedFragment(service=service, product=product, version=version)


def fragment_for_version(product: str, version: str) -> str:
    """Build the deep link fragment for a version.

    Args:
        product: Product name.
        version: Version string.

    Returns:
        Fragment such as ``#pollbot/thunderbird/60.0``.
    """
    return f"#{SERVICE_NAME}/{product}/{version}"
