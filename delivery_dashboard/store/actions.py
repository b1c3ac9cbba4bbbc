"""Actions: the events that can change dashboard state."""

from collections.abc import Mapping
from dataclasses import dataclass

from delivery_dashboard.store.models import (
    CheckResult,
    ReleaseInfo,
    ReleaseInfoError,
    ServiceVersion,
)


@dataclass(frozen=True)
class SetVersion:
    """A (product, version) pair was selected."""

    product: str
    version: str


@dataclass(frozen=True)
class UpdateProductVersions:
    """Ongoing channel versions for one product were received."""

    product: str
    versions: Mapping[str, str]


@dataclass(frozen=True)
class UpdateReleaseInfo:
    """Release info (or the service error instead) was received."""

    info: ReleaseInfo | ReleaseInfoError


@dataclass(frozen=True)
class UpdateServiceVersion:
    """Status service build metadata was received."""

    info: ServiceVersion


@dataclass(frozen=True)
class AddCheckResult:
    """A single check's result arrived."""

    title: str
    result: CheckResult


@dataclass(frozen=True)
class RefreshCheckResult:
    """A single check needs to be fetched again."""

    title: str


@dataclass(frozen=True)
class AddServerError:
    """Fetching a single check failed."""

    title: str
    message: str


Action = (
    SetVersion
    | UpdateProductVersions
    | UpdateReleaseInfo
    | UpdateServiceVersion
    | AddCheckResult
    | RefreshCheckResult
    | AddServerError
)
