"""Dashboard view, lifecycle and presentation."""

from delivery_dashboard.dashboard.presenter import (
    ChannelEntry,
    CheckRow,
    DashboardSnapshot,
    build_snapshot,
    render_text,
)
from delivery_dashboard.dashboard.state_machine import (
    ViewState,
    ViewStateError,
    ViewStateMachine,
)
from delivery_dashboard.dashboard.view import DashboardView


__all__ = [
    "ChannelEntry",
    "CheckRow",
    "DashboardSnapshot",
    "DashboardView",
    "ViewState",
    "ViewStateError",
    "ViewStateMachine",
    "build_snapshot",
    "render_text",
]
