"""Auto-refresh scheduling."""

from delivery_dashboard.scheduler.refresh import AutoRefreshScheduler


__all__ = ["AutoRefreshScheduler"]
