"""Check probe orchestration."""

from delivery_dashboard.orchestration.metrics import ProbeMetrics
from delivery_dashboard.orchestration.orchestrator import CheckOrchestrator


__all__ = ["CheckOrchestrator", "ProbeMetrics"]
