"""Observability helpers (structured logging)."""

from delivery_dashboard.observability.logging import (
    bind_view_context,
    clear_view_context,
    configure_logging,
)


__all__ = [
    "bind_view_context",
    "clear_view_context",
    "configure_logging",
]
