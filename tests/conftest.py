"""Shared pytest fixtures."""

from collections.abc import Iterator

import pytest

from delivery_dashboard.orchestration.metrics import ProbeMetrics


@pytest.fixture(autouse=True)
def reset_probe_metrics() -> Iterator[None]:
    """Reset the metrics singleton before and after each test."""
    ProbeMetrics.reset()
    yield
    ProbeMetrics.reset()
