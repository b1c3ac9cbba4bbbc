"""Unit tests for the dashboard view."""

import asyncio
from collections.abc import Callable

import pytest

from delivery_dashboard.dashboard.state_machine import ViewState, ViewStateError
from delivery_dashboard.dashboard.view import DashboardView
from delivery_dashboard.fetch.errors import ServiceErrorClass, StatusServiceError
from delivery_dashboard.status.models import Verdict
from delivery_dashboard.store.models import CheckStatus, ServiceVersion
from tests.helpers.fakes import (
    FakeStatusClient,
    check_url,
    make_release,
    result,
    settle,
)


ARCHIVE_60 = check_url("60.0", "Archive Release")
BOUNCER_60 = check_url("60.0", "Bouncer")


def _client(gated: bool = False) -> FakeStatusClient:
    return FakeStatusClient(
        release_infos={
            ("thunderbird", "60.0"): make_release("60.0"),
            ("thunderbird", "61.0"): make_release("61.0"),
        },
        check_outcomes={
            ARCHIVE_60: result(),
            BOUNCER_60: result(),
            check_url("61.0", "Archive Release"): result(),
            check_url("61.0", "Bouncer"): result(),
        },
        ongoing_versions={
            "thunderbird": {"nightly": "63.0a1", "beta": "61.0", "release": "60.0"}
        },
        service_version=ServiceVersion(version="1.4.3", commit="abc"),
        gated=gated,
    )


async def _wait_for(predicate: Callable[[], bool], attempts: int = 200) -> None:
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0.005)
    raise AssertionError("condition not reached")


class TestMount:
    """Tests for mounting the view."""

    @pytest.mark.asyncio
    async def test_mount_without_fragment(self) -> None:
        """Mounting loads ambient data but selects nothing."""
        client = _client()
        async with DashboardView(client, view_id="v1") as view:
            view.mount()
            await view.orchestrator.wait_idle()

            state = view.state
            assert view.lifecycle_state == ViewState.VIEW_MOUNTED
            assert state.service_version == ServiceVersion(
                version="1.4.3", commit="abc"
            )
            assert state.product_versions["thunderbird"]["release"] == "60.0"
            assert not state.selected_version.is_selected
            assert client.release_calls == []
            assert view.verdict is None

    @pytest.mark.asyncio
    async def test_mount_with_deep_link(self) -> None:
        """A deep link at startup selects the version and probes its checks."""
        client = _client()
        async with DashboardView(client) as view:
            view.mount("#pollbot/thunderbird/60.0")
            await view.orchestrator.wait_idle()

            assert client.release_calls == [("thunderbird", "60.0")]
            assert set(view.state.check_results) == {"Archive Release", "Bouncer"}
            assert view.verdict == Verdict.SUCCESS
            assert not view.scheduler.is_running

    @pytest.mark.asyncio
    async def test_unknown_product_link_is_ignored(self) -> None:
        """A deep link to an unsupported product selects nothing."""
        client = _client()
        async with DashboardView(client) as view:
            view.mount("#pollbot/foobar/50.0")
            await view.orchestrator.wait_idle()
            assert client.release_calls == []
            assert not view.state.selected_version.is_selected

    @pytest.mark.asyncio
    async def test_mount_twice_rejected(self) -> None:
        """A view mounts once."""
        async with DashboardView(_client()) as view:
            view.mount()
            with pytest.raises(ViewStateError):
                view.mount()


class TestFragmentChange:
    """Tests for later fragment changes."""

    @pytest.mark.asyncio
    async def test_ignored_before_mount(self) -> None:
        """Fragment changes before mounting are dropped."""
        client = _client()
        view = DashboardView(client)
        assert view.on_fragment_change("#pollbot/thunderbird/60.0") is None
        await settle()
        assert client.release_calls == []
        await view.unmount()

    @pytest.mark.asyncio
    async def test_navigation_switches_version(self) -> None:
        """Back/forward navigation routes through the same pipeline."""
        client = _client()
        async with DashboardView(client) as view:
            view.mount("#pollbot/thunderbird/60.0")
            await view.orchestrator.wait_idle()

            parsed = view.on_fragment_change("#pollbot/thunderbird/61.0")
            await view.orchestrator.wait_idle()

            assert parsed is not None
            assert view.state.selected_version.version == "61.0"
            assert view.state.current_release == make_release("61.0")
            assert client.release_calls == [
                ("thunderbird", "60.0"),
                ("thunderbird", "61.0"),
            ]


class TestAutoRefresh:
    """Tests for the refresh flag driving the timer."""

    @pytest.mark.asyncio
    async def test_timer_runs_until_checks_pass(self) -> None:
        """A failing check starts the timer; passing checks stop it."""
        client = _client()
        client.check_outcomes[ARCHIVE_60] = result(CheckStatus.MISSING, "missing")
        async with DashboardView(client, refresh_interval_seconds=0.01) as view:
            view.mount("#pollbot/thunderbird/60.0")
            await view.orchestrator.wait_idle()
            assert view.state.should_refresh is True
            assert view.scheduler.is_running
            assert view.verdict == Verdict.FAILURE

            client.check_outcomes[ARCHIVE_60] = result()
            await _wait_for(lambda: not view.state.should_refresh)
            await view.orchestrator.wait_idle()

            assert view.verdict == Verdict.SUCCESS
            assert not view.scheduler.is_running
            assert client.check_calls.count(ARCHIVE_60) >= 2

    @pytest.mark.asyncio
    async def test_probe_failure_starts_timer(self) -> None:
        """A failed probe keeps the check pending and schedules refreshes."""
        client = _client()
        client.check_outcomes[BOUNCER_60] = StatusServiceError(
            ServiceErrorClass.TIMEOUT, "timed out", BOUNCER_60
        )
        async with DashboardView(client, refresh_interval_seconds=60) as view:
            view.mount("#pollbot/thunderbird/60.0")
            await view.orchestrator.wait_idle()

            assert "Bouncer" not in view.state.check_results
            assert view.verdict == Verdict.PENDING
            assert view.scheduler.is_running


class TestUnmount:
    """Tests for tearing the view down."""

    @pytest.mark.asyncio
    async def test_unmount_releases_timer_and_requests(self) -> None:
        """Unmount stops the timer and cancels in-flight probes."""
        client = _client(gated=True)
        view = DashboardView(client, refresh_interval_seconds=0.01)
        view.mount("#pollbot/thunderbird/60.0")
        await settle()
        client.resolve(ARCHIVE_60, result(CheckStatus.MISSING, "missing"))
        await settle()
        assert view.scheduler.is_running
        assert view.orchestrator.pending_tasks > 0

        await view.unmount()

        assert view.lifecycle_state == ViewState.VIEW_UNMOUNTED
        assert not view.scheduler.is_running
        assert view.orchestrator.pending_tasks == 0
        timers = [t for t in asyncio.all_tasks() if t.get_name() == "auto-refresh"]
        assert timers == []

    @pytest.mark.asyncio
    async def test_unmount_is_idempotent(self) -> None:
        """A second unmount does nothing."""
        view = DashboardView(_client())
        view.mount()
        await view.unmount()
        await view.unmount()
        assert view.lifecycle_state == ViewState.VIEW_UNMOUNTED
        with pytest.raises(ViewStateError):
            view.mount()

    @pytest.mark.asyncio
    async def test_context_manager_unmounts_on_error(self) -> None:
        """Leaving the context through an exception still tears down."""
        client = _client()
        client.check_outcomes[ARCHIVE_60] = result(CheckStatus.MISSING, "missing")
        view = DashboardView(client, refresh_interval_seconds=0.01)
        with pytest.raises(RuntimeError, match="interrupted"):
            async with view:
                view.mount("#pollbot/thunderbird/60.0")
                await view.orchestrator.wait_idle()
                assert view.scheduler.is_running
                raise RuntimeError("interrupted")
        assert not view.scheduler.is_running
        assert view.lifecycle_state == ViewState.VIEW_UNMOUNTED
