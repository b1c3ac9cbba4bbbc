"""Application settings loading."""

from .app import DashboardSettings, get_settings


__all__ = ["DashboardSettings", "get_settings"]
