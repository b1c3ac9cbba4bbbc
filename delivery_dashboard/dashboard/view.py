"""Dashboard view: owns the store subscription, router, timer and requests."""

import uuid
from collections.abc import Callable, Iterable

import structlog

from delivery_dashboard.config.constants import (
    COMPONENT_VIEW,
    DEFAULT_REFRESH_INTERVAL_SECONDS,
    PRODUCTS,
)
from delivery_dashboard.dashboard.state_machine import ViewState, ViewStateMachine
from delivery_dashboard.fetch.protocols import StatusServiceClient
from delivery_dashboard.observability.logging import (
    bind_view_context,
    clear_view_context,
)
from delivery_dashboard.orchestration.orchestrator import CheckOrchestrator
from delivery_dashboard.router.fragment import ParsedFragment
from delivery_dashboard.router.router import FragmentRouter
from delivery_dashboard.scheduler.refresh import AutoRefreshScheduler
from delivery_dashboard.status.aggregator import verdict_for_state
from delivery_dashboard.status.models import Verdict
from delivery_dashboard.store.models import ApplicationState
from delivery_dashboard.store.store import StateStore


logger = structlog.get_logger()


class DashboardView:
    """One dashboard session.

    Mounting subscribes to the store, loads the service version and the
    channel menu, and routes the initial fragment. Every published state
    starts or stops the auto-refresh timer according to ``should_refresh``.
    Unmounting releases the timer, the subscription and all in-flight
    requests; ``async with`` guarantees it on every exit path.
    """

    def __init__(
        self,
        client: StatusServiceClient,
        refresh_interval_seconds: float = DEFAULT_REFRESH_INTERVAL_SECONDS,
        products: Iterable[str] = PRODUCTS,
        store: StateStore | None = None,
        view_id: str | None = None,
    ) -> None:
        """Initialize the view.

        Args:
            client: Status service client.
            refresh_interval_seconds: Auto-refresh interval.
            products: Supported products (deep links and channel menu).
            store: Store to use (a fresh one by default).
            view_id: Identifier for logging (random by default).
        """
        self._view_id = view_id or uuid.uuid4().hex[:12]
        self._products = tuple(products)
        self._store = store or StateStore()
        self._orchestrator = CheckOrchestrator(self._store, client)
        self._scheduler = AutoRefreshScheduler(
            self._orchestrator.refresh_status, refresh_interval_seconds
        )
        self._router = FragmentRouter(self._orchestrator.select_version, self._products)
        self._lifecycle = ViewStateMachine(self._view_id)
        self._unsubscribe: Callable[[], None] | None = None
        self._log = logger.bind(component=COMPONENT_VIEW, view_id=self._view_id)

    @property
    def view_id(self) -> str:
        """Get the view ID."""
        return self._view_id

    @property
    def store(self) -> StateStore:
        """Get the store."""
        return self._store

    @property
    def state(self) -> ApplicationState:
        """Get the current state snapshot."""
        return self._store.state

    @property
    def orchestrator(self) -> CheckOrchestrator:
        """Get the request orchestrator."""
        return self._orchestrator

    @property
    def scheduler(self) -> AutoRefreshScheduler:
        """Get the auto-refresh scheduler."""
        return self._scheduler

    @property
    def lifecycle_state(self) -> ViewState:
        """Get the lifecycle state."""
        return self._lifecycle.state

    @property
    def verdict(self) -> Verdict | None:
        """Verdict for the current release, if one is loaded."""
        return verdict_for_state(self._store.state)

    async def __aenter__(self) -> "DashboardView":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.unmount()

    def mount(self, fragment: str = "") -> None:
        """Start the session. Must run inside the event loop.

        Args:
            fragment: Initial address-bar fragment (deep link).

        Raises:
            ViewStateError: If the view was already mounted or torn down.
        """
        self._lifecycle.transition(ViewState.VIEW_MOUNTED)
        bind_view_context(self._view_id)
        self._unsubscribe = self._store.subscribe(self._on_state_change)

        self._orchestrator.spawn(
            self._orchestrator.request_service_version(), name="service-version"
        )
        self._orchestrator.spawn(
            self._orchestrator.request_ongoing_versions(self._products),
            name="ongoing-versions",
        )
        self._router.route(fragment)

    def on_fragment_change(self, fragment: str) -> ParsedFragment | None:
        """Handle back/forward navigation or a manual fragment edit.

        Args:
            fragment: New address-bar fragment.

        Returns:
            The parsed fragment, or None if ignored.
        """
        if not self._lifecycle.is_mounted():
            self._log.warning(
                "fragment_change_ignored", state=self._lifecycle.state.name
            )
            return None
        return self._router.route(fragment)

    async def unmount(self) -> None:
        """Tear the session down. Safe to call more than once."""
        if self._lifecycle.is_terminal():
            return
        self._lifecycle.transition(ViewState.VIEW_UNMOUNTED)

        try:
            if self._unsubscribe is not None:
                self._unsubscribe()
                self._unsubscribe = None
            await self._scheduler.aclose()
        finally:
            await self._orchestrator.aclose()
            clear_view_context()

    def _on_state_change(self, state: ApplicationState) -> None:
        self._scheduler.sync(state.should_refresh)
