"""Fan-out of check probes and the async actions that feed the store."""

import asyncio
from collections.abc import Coroutine, Iterable
from typing import Any

import structlog

from delivery_dashboard.config.constants import COMPONENT_ORCHESTRATION, PRODUCTS
from delivery_dashboard.fetch.errors import StatusServiceError
from delivery_dashboard.fetch.protocols import StatusServiceClient
from delivery_dashboard.orchestration.metrics import ProbeMetrics
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
    CheckDescriptor,
    ReleaseInfoError,
    SelectedVersion,
)
from delivery_dashboard.store.store import StateStore


logger = structlog.get_logger()


class CheckOrchestrator:
    """Issues status service requests and dispatches their outcomes.

    Each check probe runs as its own task and dispatches its result as soon
    as it resolves, so results land in whatever order the service answers.
    A failed probe records a server error and leaves the check pending.

    Every probe is scoped to the version selected when it started; if the
    selection changed by the time it resolves, its outcome is dropped.
    """

    def __init__(self, store: StateStore, client: StatusServiceClient) -> None:
        """Initialize the orchestrator.

        Args:
            store: Store receiving the actions.
            client: Status service client.
        """
        self._store = store
        self._client = client
        self._tasks: set[asyncio.Task[None]] = set()
        self._metrics = ProbeMetrics.get_instance()
        self._log = logger.bind(component=COMPONENT_ORCHESTRATION)

    @property
    def pending_tasks(self) -> int:
        """Number of requests still in flight."""
        return len(self._tasks)

    def select_version(self, product: str, version: str) -> asyncio.Task[None]:
        """Schedule ``request_status`` for a selection.

        Args:
            product: Product name.
            version: Version string.

        Returns:
            The scheduled task.
        """
        return self.spawn(
            self.request_status(product, version),
            name=f"request-status-{product}-{version}",
        )

    async def request_status(self, product: str, version: str) -> None:
        """Select a version, load its release info and probe every check.

        Args:
            product: Product name.
            version: Version string.
        """
        self._store.dispatch(SetVersion(product=product, version=version))
        scope = self._store.state.selected_version
        log = self._log.bind(product=product, version=version)

        try:
            info = await self._client.get_release_info(product, version)
        except StatusServiceError as e:
            log.warning(
                "release_info_failed",
                error_class=e.error_class.value,
                error=e.message,
            )
            info = ReleaseInfoError(message=e.message)

        if self._is_stale(scope):
            log.info("release_info_discarded")
            return

        self._store.dispatch(UpdateReleaseInfo(info=info))
        if isinstance(info, ReleaseInfoError):
            log.info("release_info_error", message=info.message)
            return

        log.info(
            "release_info_loaded", checks=len(info.checks), channel=info.channel
        )
        self.fan_out(info.checks, scope)

    def fan_out(
        self,
        checks: Iterable[CheckDescriptor],
        scope: SelectedVersion,
    ) -> list[asyncio.Task[None]]:
        """Start one independent probe per check.

        Args:
            checks: Checks to probe.
            scope: Selection the probes belong to.

        Returns:
            The probe tasks.
        """
        return [
            self.spawn(self.fetch_check(check, scope), name=f"check-{check.title}")
            for check in checks
        ]

    async def fetch_check(
        self, check: CheckDescriptor, scope: SelectedVersion
    ) -> None:
        """Probe a single check and dispatch the outcome.

        Args:
            check: Check to probe.
            scope: Selection the probe belongs to.
        """
        log = self._log.bind(title=check.title, version=scope.version)
        self._metrics.record_started()

        try:
            result = await self._client.check_status(check.url)
        except StatusServiceError as e:
            if self._discard_if_stale(scope, log):
                return
            self._metrics.record_failure(e.error_class)
            log.warning(
                "check_failed", error_class=e.error_class.value, error=e.message
            )
            self._store.dispatch(AddServerError(title=check.title, message=e.message))
            return

        if self._discard_if_stale(scope, log):
            return
        self._metrics.record_success()
        log.debug("check_resolved", status=result.status.value)
        self._store.dispatch(AddCheckResult(title=check.title, result=result))

    def refresh_status(self) -> list[asyncio.Task[None]]:
        """Re-probe every check of the current release.

        Each check is first cleared back to pending, then probed again.

        Returns:
            The probe tasks.
        """
        state = self._store.state
        release = state.current_release
        if release is None:
            return []

        self._metrics.record_refresh_cycle()
        scope = state.selected_version
        self._log.info(
            "refresh_cycle", version=scope.version, checks=len(release.checks)
        )

        tasks: list[asyncio.Task[None]] = []
        for check in release.checks:
            self._store.dispatch(RefreshCheckResult(title=check.title))
            tasks.extend(self.fan_out([check], scope))
        return tasks

    async def request_service_version(self) -> None:
        """Load the status service build metadata."""
        try:
            info = await self._client.get_service_version()
        except StatusServiceError as e:
            self._log.warning(
                "service_version_failed",
                error_class=e.error_class.value,
                error=e.message,
            )
            return
        self._store.dispatch(UpdateServiceVersion(info=info))

    async def request_ongoing_versions(
        self, products: Iterable[str] = PRODUCTS
    ) -> None:
        """Load the channel versions of each product.

        Args:
            products: Products to query.
        """
        for product in products:
            try:
                versions = await self._client.get_ongoing_versions(product)
            except StatusServiceError as e:
                self._log.warning(
                    "ongoing_versions_failed",
                    product=product,
                    error_class=e.error_class.value,
                    error=e.message,
                )
                continue
            self._store.dispatch(
                UpdateProductVersions(product=product, versions=versions)
            )

    async def wait_idle(self) -> None:
        """Wait until no request is in flight, including ones started meanwhile."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel every request still in flight."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            self._log.info("requests_cancelled", count=len(tasks))

    def spawn(
        self, coro: Coroutine[Any, Any, None], name: str | None = None
    ) -> asyncio.Task[None]:
        """Run a coroutine as a tracked task.

        Args:
            coro: Coroutine to run.
            name: Optional task name.

        Returns:
            The task.
        """
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._log.error(
                "task_failed",
                task=task.get_name(),
                error=str(exc),
                error_type=type(exc).__name__,
            )

    def _is_stale(self, scope: SelectedVersion) -> bool:
        return self._store.state.selected_version != scope

    def _discard_if_stale(
        self, scope: SelectedVersion, log: structlog.stdlib.BoundLogger
    ) -> bool:
        if not self._is_stale(scope):
            return False
        self._metrics.record_discarded()
        log.info(
            "check_discarded", selected=self._store.state.selected_version.version
        )
        return True
