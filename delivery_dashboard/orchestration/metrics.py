"""Metrics collection for check probing."""

from dataclasses import dataclass, field
from typing import ClassVar

from delivery_dashboard.fetch.errors import ServiceErrorClass


@dataclass
class ProbeMetrics:
    """Metrics for check probes.

    Singleton class that tracks how many probes were started, how they
    resolved, and how many refresh cycles ran.
    """

    probes_started_total: int = 0
    probes_succeeded_total: int = 0
    probes_failed_total: dict[str, int] = field(default_factory=dict)
    probes_discarded_total: int = 0
    refresh_cycles_total: int = 0

    _instance: ClassVar["ProbeMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "ProbeMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_started(self) -> None:
        """Record a probe being issued."""
        self.probes_started_total += 1

    def record_success(self) -> None:
        """Record a probe that produced a check result."""
        self.probes_succeeded_total += 1

    def record_failure(self, error_class: ServiceErrorClass) -> None:
        """Record a failed probe.

        Args:
            error_class: Classification of the failure.
        """
        key = error_class.value
        self.probes_failed_total[key] = self.probes_failed_total.get(key, 0) + 1

    def record_discarded(self) -> None:
        """Record a probe result dropped because its version is no longer shown."""
        self.probes_discarded_total += 1

    def record_refresh_cycle(self) -> None:
        """Record an auto-refresh cycle."""
        self.refresh_cycles_total += 1

    @property
    def failures_total(self) -> int:
        """Total failed probes across all error classes."""
        return sum(self.probes_failed_total.values())

    def to_dict(self) -> dict[str, int | dict[str, int]]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "probes_started_total": self.probes_started_total,
            "probes_succeeded_total": self.probes_succeeded_total,
            "probes_failed_total": dict(self.probes_failed_total),
            "probes_discarded_total": self.probes_discarded_total,
            "refresh_cycles_total": self.refresh_cycles_total,
        }
