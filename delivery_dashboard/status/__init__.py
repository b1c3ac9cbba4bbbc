"""Release verdict aggregation."""

from delivery_dashboard.status.aggregator import (
    compute_verdict,
    label_for_check,
    summarize_checks,
    verdict_for_state,
)
from delivery_dashboard.status.models import (
    VERDICT_LABEL_MAP,
    VERDICT_MESSAGE_MAP,
    CheckSummary,
    LabelClass,
    Verdict,
)


__all__ = [
    "VERDICT_LABEL_MAP",
    "VERDICT_MESSAGE_MAP",
    "CheckSummary",
    "LabelClass",
    "Verdict",
    "compute_verdict",
    "label_for_check",
    "summarize_checks",
    "verdict_for_state",
]
