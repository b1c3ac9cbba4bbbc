"""Models for release verdicts and check labels."""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class Verdict(str, Enum):
    """Aggregated judgement over all checks of a release.

    - PENDING: at least one check has no result yet
    - SUCCESS: every actionable check passed
    - FAILURE: at least one actionable check did not pass
    """

    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"


class LabelClass(str, Enum):
    """Display class of a single check."""

    SUCCESS = "success"
    DANGER = "danger"
    WARNING = "warning"
    INFO = "info"


# Mapping from verdict to the banner text shown next to the release
VERDICT_MESSAGE_MAP: dict[Verdict, str] = {
    Verdict.PENDING: "Checks in progress",
    Verdict.SUCCESS: "All checks are successful",
    Verdict.FAILURE: "Some checks failed",
}

# Mapping from verdict to the banner display class
VERDICT_LABEL_MAP: dict[Verdict, LabelClass] = {
    Verdict.PENDING: LabelClass.INFO,
    Verdict.SUCCESS: LabelClass.SUCCESS,
    Verdict.FAILURE: LabelClass.DANGER,
}


class CheckSummary(BaseModel):
    """Pre-computed counts over the checks of one release."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    verdict: Verdict
    total: Annotated[int, Field(ge=0)]
    resolved: Annotated[int, Field(ge=0)]
    passing: Annotated[int, Field(ge=0)]
    failing_actionable: Annotated[int, Field(ge=0)]
    failing_informational: Annotated[int, Field(ge=0)]

    @property
    def pending(self) -> int:
        """Number of checks still waiting for a result."""
        return self.total - self.resolved

    @property
    def message(self) -> str:
        """Banner text for the verdict."""
        return VERDICT_MESSAGE_MAP[self.verdict]
