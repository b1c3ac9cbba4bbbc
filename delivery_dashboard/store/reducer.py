"""Pure transition rules for the dashboard state."""

from collections.abc import Callable, Mapping
from typing import Any

from delivery_dashboard.store.actions import (
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
    CheckResult,
    SelectedVersion,
    ServerError,
)


INITIAL_STATE = ApplicationState()


def compute_should_refresh(check_results: Mapping[str, CheckResult]) -> bool:
    """Check if any known result is not passing.

    Args:
        check_results: Map of check title to result.

    Returns:
        True if at least one result has a status other than ``exists``.
    """
    return any(not result.is_passing for result in check_results.values())


def _set_version(state: ApplicationState, action: SetVersion) -> ApplicationState:
    # Results and release info belong to the previous selection.
    return state.model_copy(
        update={
            "selected_version": SelectedVersion(
                product=action.product, version=action.version
            ),
            "check_results": {},
            "release_info": None,
            "should_refresh": False,
        }
    )


def _update_product_versions(
    state: ApplicationState, action: UpdateProductVersions
) -> ApplicationState:
    product_versions = dict(state.product_versions)
    product_versions[action.product] = {
        **state.product_versions.get(action.product, {}),
        **action.versions,
    }
    return state.model_copy(update={"product_versions": product_versions})


def _update_release_info(
    state: ApplicationState, action: UpdateReleaseInfo
) -> ApplicationState:
    return state.model_copy(update={"release_info": action.info})


def _update_service_version(
    state: ApplicationState, action: UpdateServiceVersion
) -> ApplicationState:
    return state.model_copy(update={"service_version": action.info})


def _add_check_result(
    state: ApplicationState, action: AddCheckResult
) -> ApplicationState:
    check_results = {**state.check_results, action.title: action.result}
    return state.model_copy(
        update={
            "check_results": check_results,
            "should_refresh": compute_should_refresh(check_results),
        }
    )


def _refresh_check_result(
    state: ApplicationState, action: RefreshCheckResult
) -> ApplicationState:
    check_results = {
        title: result
        for title, result in state.check_results.items()
        if title != action.title
    }
    return state.model_copy(update={"check_results": check_results})


def _add_server_error(
    state: ApplicationState, action: AddServerError
) -> ApplicationState:
    errors = (*state.errors, ServerError(title=action.title, message=action.message))
    return state.model_copy(update={"errors": errors, "should_refresh": True})


_TRANSITIONS: dict[type, Callable[[ApplicationState, Any], ApplicationState]] = {
    SetVersion: _set_version,
    UpdateProductVersions: _update_product_versions,
    UpdateReleaseInfo: _update_release_info,
    UpdateServiceVersion: _update_service_version,
    AddCheckResult: _add_check_result,
    RefreshCheckResult: _refresh_check_result,
    AddServerError: _add_server_error,
}


def reduce(state: ApplicationState | None, action: object) -> ApplicationState:
    """Apply an action to the state.

    Pure: never mutates ``state`` and performs no I/O. Unknown actions
    return the input state unchanged.

    Args:
        state: Current state, or None for the initial state.
        action: Action to apply.

    Returns:
        The resulting state.
    """
    if state is None:
        state = INITIAL_STATE

    transition = _TRANSITIONS.get(type(action))
    if transition is None:
        return state
    return transition(state, action)
