"""Release verdict aggregation over check results."""

from collections.abc import Mapping

from delivery_dashboard.status.models import CheckSummary, LabelClass, Verdict
from delivery_dashboard.store.models import (
    ApplicationState,
    CheckResult,
    CheckStatus,
    ReleaseInfo,
)


def compute_verdict(
    release_info: ReleaseInfo,
    check_results: Mapping[str, CheckResult],
) -> Verdict:
    """Compute the overall verdict for a release.

    Rules, in order:
    - PENDING if any check of the release has no result
    - FAILURE if any actionable check is not ``exists``
    - SUCCESS otherwise; non-actionable checks never block it

    Args:
        release_info: Release whose checks are aggregated.
        check_results: Map of check title to result.

    Returns:
        The verdict.
    """
    resolved: list[tuple[bool, CheckResult]] = []
    for check in release_info.checks:
        result = check_results.get(check.title)
        if result is None:
            return Verdict.PENDING
        resolved.append((check.actionable, result))

    actionable_statuses = [
        result.status for actionable, result in resolved if actionable
    ]
    if any(status != CheckStatus.EXISTS for status in actionable_statuses):
        return Verdict.FAILURE
    return Verdict.SUCCESS


def verdict_for_state(state: ApplicationState) -> Verdict | None:
    """Compute the verdict for the current state.

    Args:
        state: Dashboard state.

    Returns:
        The verdict, or None when there is no usable release info.
    """
    release = state.current_release
    if release is None:
        return None
    return compute_verdict(release, state.check_results)


def label_for_check(result: CheckResult | None, actionable: bool) -> LabelClass:
    """Classify a check for display.

    Args:
        result: Check result, or None while pending.
        actionable: Whether the check gates the verdict.

    Returns:
        The label class.
    """
    if result is None:
        return LabelClass.INFO
    if result.status == CheckStatus.ERROR:
        return LabelClass.DANGER
    if result.status == CheckStatus.EXISTS:
        return LabelClass.SUCCESS
    if actionable:
        return LabelClass.WARNING
    return LabelClass.INFO


def summarize_checks(
    release_info: ReleaseInfo,
    check_results: Mapping[str, CheckResult],
) -> CheckSummary:
    """Count resolved, passing and failing checks of a release.

    Args:
        release_info: Release whose checks are counted.
        check_results: Map of check title to result.

    Returns:
        CheckSummary including the verdict.
    """
    resolved = passing = failing_actionable = failing_informational = 0
    for check in release_info.checks:
        result = check_results.get(check.title)
        if result is None:
            continue
        resolved += 1
        if result.is_passing:
            passing += 1
        elif check.actionable:
            failing_actionable += 1
        else:
            failing_informational += 1

    return CheckSummary(
        verdict=compute_verdict(release_info, check_results),
        total=len(release_info.checks),
        resolved=resolved,
        passing=passing,
        failing_actionable=failing_actionable,
        failing_informational=failing_informational,
    )
