"""Dashboard state: models, actions, transition rules and the store."""

from delivery_dashboard.store.actions import (
    Action,
    AddCheckResult,
    AddServerError,
    RefreshCheckResult,
    SetVersion,
    UpdateProductVersions,
    UpdateReleaseInfo,
    UpdateServiceVersion,
)
from delivery_dashboard.store.models import (
    ApplicationState,
    CheckDescriptor,
    CheckResult,
    CheckStatus,
    ReleaseInfo,
    ReleaseInfoError,
    SelectedVersion,
    ServerError,
    ServiceVersion,
)
from delivery_dashboard.store.reducer import INITIAL_STATE, reduce
from delivery_dashboard.store.store import StateStore


__all__ = [
    "INITIAL_STATE",
    "Action",
    "AddCheckResult",
    "AddServerError",
    "ApplicationState",
    "CheckDescriptor",
    "CheckResult",
    "CheckStatus",
    "RefreshCheckResult",
    "ReleaseInfo",
    "ReleaseInfoError",
    "SelectedVersion",
    "ServerError",
    "ServiceVersion",
    "SetVersion",
    "StateStore",
    "UpdateProductVersions",
    "UpdateReleaseInfo",
    "UpdateServiceVersion",
    "reduce",
]
