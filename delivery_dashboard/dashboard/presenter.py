"""Plain-text presentation of the dashboard state."""

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

from delivery_dashboard import __version__
from delivery_dashboard.config.constants import CHANNELS, PRODUCTS
from delivery_dashboard.router.fragment import fragment_for_version
from delivery_dashboard.status.aggregator import label_for_check, summarize_checks
from delivery_dashboard.status.models import VERDICT_LABEL_MAP, LabelClass, Verdict
from delivery_dashboard.store.models import (
    ApplicationState,
    CheckStatus,
    ReleaseInfoError,
)


SELECT_VERSION_NOTICE = (
    "Learn more about a specific version. "
    "Select a version number from the left menu."
)
LOADING_NOTICE = "Loading release information..."
PENDING_TEXT = "pending"


class CheckRow(BaseModel):
    """One check as displayed."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    title: str
    actionable: bool
    label: LabelClass
    status: CheckStatus | None = None
    message: str = ""
    link: str = ""


class ChannelEntry(BaseModel):
    """One entry of the channel menu."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    product: str
    channel: str
    version: str | None = None

    @property
    def fragment(self) -> str | None:
        """Deep link to this channel's version."""
        if self.version is None:
            return None
        return fragment_for_version(self.product, self.version)


class DashboardSnapshot(BaseModel):
    """Everything the dashboard shows for one state."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    heading: str | None = None
    notice: str | None = None
    verdict: Verdict | None = None
    verdict_message: str | None = None
    rows: tuple[CheckRow, ...] = ()
    error_banners: tuple[str, ...] = ()
    channels: tuple[ChannelEntry, ...] = ()
    footer: str = ""


def build_snapshot(
    state: ApplicationState,
    products: Iterable[str] = PRODUCTS,
    channels: Iterable[str] = CHANNELS,
) -> DashboardSnapshot:
    """Derive the displayed content from a state.

    Args:
        state: Dashboard state.
        products: Products listed in the channel menu.
        channels: Channels listed per product.

    Returns:
        DashboardSnapshot.
    """
    channel_list = tuple(channels)
    menu = tuple(
        ChannelEntry(
            product=product,
            channel=channel,
            version=state.product_versions.get(product, {}).get(channel),
        )
        for product in products
        for channel in channel_list
    )
    banners = tuple(
        f"Failed getting check result for '{error.title}': {error.message}"
        for error in state.errors
    )
    base = {
        "error_banners": banners,
        "channels": menu,
        "footer": _footer(state),
    }

    selected = state.selected_version
    if not selected.is_selected:
        return DashboardSnapshot(notice=SELECT_VERSION_NOTICE, **base)

    heading = f"{(selected.product or '').capitalize()} {selected.version}".strip()
    if state.release_info is None:
        return DashboardSnapshot(heading=heading, notice=LOADING_NOTICE, **base)
    if isinstance(state.release_info, ReleaseInfoError):
        return DashboardSnapshot(
            heading=heading,
            notice=f"Pollbot error: {state.release_info.message}",
            **base,
        )

    release = state.release_info
    rows = []
    for check in release.checks:
        result = state.check_results.get(check.title)
        rows.append(
            CheckRow(
                title=check.title,
                actionable=check.actionable,
                label=label_for_check(result, check.actionable),
                status=result.status if result else None,
                message=result.message if result else "",
                link=result.link if result else "",
            )
        )
    summary = summarize_checks(release, state.check_results)
    return DashboardSnapshot(
        heading=f"{heading} ({release.channel})" if release.channel else heading,
        verdict=summary.verdict,
        verdict_message=summary.message,
        rows=tuple(rows),
        **base,
    )


def render_text(snapshot: DashboardSnapshot) -> str:
    """Render a snapshot as plain text.

    Args:
        snapshot: Snapshot to render.

    Returns:
        Multi-line text.
    """
    lines: list[str] = list(snapshot.error_banners)
    if snapshot.heading:
        lines.append(snapshot.heading)
    if snapshot.notice:
        lines.append(snapshot.notice)
    if snapshot.verdict is not None:
        label = VERDICT_LABEL_MAP[snapshot.verdict].value
        lines.append(f"[{label}] {snapshot.verdict_message}")

    for row in snapshot.rows:
        title = row.title if row.actionable else f"{row.title} (informational)"
        if row.status is None:
            lines.append(f"  [{row.label.value}] {title}: {PENDING_TEXT}")
            continue
        detail = f"{row.message} <{row.link}>" if row.link else row.message
        lines.append(f"  [{row.label.value}] {title}: {detail}")

    if snapshot.channels:
        lines.append("Channels")
        for entry in snapshot.channels:
            name = entry.channel.capitalize()
            if entry.version is None:
                lines.append(f"  {name}: ...")
            else:
                lines.append(f"  {name}: {entry.version} ({entry.fragment})")

    if snapshot.footer:
        lines.append(snapshot.footer)
    return "\n".join(lines)


def _footer(state: ApplicationState) -> str:
    own = f"Release Dashboard version: {__version__}"
    info = state.service_version
    if info is None:
        return f"{own} -- Pollbot version: unknown"
    commit_url = info.commit_url
    if commit_url is None:
        return f"{own} -- Pollbot version: {info.version}"
    return f"{own} -- Pollbot version: {info.version} ({commit_url})"
