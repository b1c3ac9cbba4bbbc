"""Data models for the dashboard state."""

import re
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CheckStatus(str, Enum):
    """Outcome reported by the status service for a single check.

    - EXISTS: the artifact is published (the only passing status)
    - MISSING: the artifact is not there yet
    - INCOMPLETE: the artifact is partially published
    - ERROR: the status service could not evaluate the check
    """

    EXISTS = "exists"
    MISSING = "missing"
    INCOMPLETE = "incomplete"
    ERROR = "error"


class CheckResult(BaseModel):
    """Result of one probe against one release artifact."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    status: CheckStatus
    message: str = ""
    link: str = ""

    @property
    def is_passing(self) -> bool:
        """Check if the result counts as a pass."""
        return self.status == CheckStatus.EXISTS


class CheckDescriptor(BaseModel):
    """Describes what to check for a release.

    A non-actionable check is informational: its failure is shown but
    never blocks the overall verdict.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    title: Annotated[str, Field(min_length=1)]
    url: Annotated[str, Field(min_length=1)]
    actionable: bool = True


class ReleaseInfo(BaseModel):
    """Release information and the ordered list of checks to run."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    product: Annotated[str, Field(min_length=1)]
    version: Annotated[str, Field(min_length=1)]
    channel: str
    checks: tuple[CheckDescriptor, ...] = ()

    @field_validator("checks")
    @classmethod
    def validate_unique_titles(
        cls, v: tuple[CheckDescriptor, ...]
    ) -> tuple[CheckDescriptor, ...]:
        """Ensure check titles are unique, since they key the results."""
        seen: set[str] = set()
        for check in v:
            if check.title in seen:
                msg = f"Duplicate check title: {check.title}"
                raise ValueError(msg)
            seen.add(check.title)
        return v

    @property
    def titles(self) -> tuple[str, ...]:
        """Titles of all checks, in order."""
        return tuple(check.title for check in self.checks)


class ReleaseInfoError(BaseModel):
    """Error reported by the status service instead of release info."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    message: str


class ServiceVersion(BaseModel):
    """Build metadata of the status service."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    version: str
    commit: str = ""
    source: str = ""
    build: str = ""

    @property
    def commit_url(self) -> str | None:
        """Link to the deployed commit in the source repository."""
        if not self.source or not self.commit:
            return None
        source_url = re.sub(r"\.git", "", self.source, count=1)
        return f"{source_url}/commit/{self.commit}"


class ServerError(BaseModel):
    """A failed check fetch."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    title: str
    message: str


class SelectedVersion(BaseModel):
    """The (product, version) pair the dashboard is showing.

    An empty version means nothing is selected.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    product: str | None = None
    version: str = ""

    @property
    def is_selected(self) -> bool:
        """Check if a version has been selected."""
        return self.version != ""


class ApplicationState(BaseModel):
    """The single root of dashboard state.

    Never mutated: every transition produces a new instance. An absent key
    in ``check_results`` means the check is pending.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    check_results: dict[str, CheckResult] = Field(default_factory=dict)
    release_info: ReleaseInfo | ReleaseInfoError | None = None
    product_versions: dict[str, dict[str, str]] = Field(default_factory=dict)
    selected_version: SelectedVersion = Field(default_factory=SelectedVersion)
    service_version: ServiceVersion | None = None
    errors: tuple[ServerError, ...] = ()
    should_refresh: bool = False

    @property
    def current_release(self) -> ReleaseInfo | None:
        """Release info, unless missing or the error variant."""
        if isinstance(self.release_info, ReleaseInfo):
            return self.release_info
        return None
