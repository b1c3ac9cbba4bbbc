"""Auto-refresh timer driven by the store's refresh flag."""

import asyncio
import contextlib
from collections.abc import Callable

import structlog

from delivery_dashboard.config.constants import (
    COMPONENT_SCHEDULER,
    DEFAULT_REFRESH_INTERVAL_SECONDS,
)


logger = structlog.get_logger()


class AutoRefreshScheduler:
    """Single repeating timer calling ``on_tick`` every interval.

    At most one timer task is live: ``start`` while running is a no-op and
    ``stop`` while idle is a no-op. Use as an async context manager (or call
    ``aclose``) so the timer is released on every exit path.
    """

    def __init__(
        self,
        on_tick: Callable[[], object],
        interval_seconds: float = DEFAULT_REFRESH_INTERVAL_SECONDS,
    ) -> None:
        """Initialize the scheduler.

        Args:
            on_tick: Called on every tick.
            interval_seconds: Time between ticks.

        Raises:
            ValueError: If the interval is not positive.
        """
        if interval_seconds <= 0:
            msg = f"Refresh interval must be positive, got {interval_seconds}"
            raise ValueError(msg)
        self._on_tick = on_tick
        self._interval_seconds = interval_seconds
        self._task: asyncio.Task[None] | None = None
        self._ticks = 0
        self._log = logger.bind(component=COMPONENT_SCHEDULER)

    @property
    def interval_seconds(self) -> float:
        """Get the tick interval."""
        return self._interval_seconds

    @property
    def is_running(self) -> bool:
        """Check if a timer is live."""
        return self._task is not None and not self._task.done()

    @property
    def ticks(self) -> int:
        """Number of ticks fired so far."""
        return self._ticks

    async def __aenter__(self) -> "AutoRefreshScheduler":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def start(self) -> bool:
        """Start the timer unless one is already running.

        Returns:
            True if a timer was started.
        """
        if self.is_running:
            return False
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name="auto-refresh"
        )
        self._log.info("auto_refresh_started", interval_seconds=self._interval_seconds)
        return True

    def stop(self) -> bool:
        """Cancel the running timer, if any.

        Returns:
            True if a timer was stopped.
        """
        if self._task is None:
            return False
        task, self._task = self._task, None
        if task.done():
            return False
        task.cancel()
        self._log.info("auto_refresh_stopped", ticks=self._ticks)
        return True

    def sync(self, should_refresh: bool) -> None:
        """Start or stop the timer to match the refresh flag.

        Args:
            should_refresh: The store's ``should_refresh`` flag.
        """
        if should_refresh:
            self.start()
        else:
            self.stop()

    def tick(self) -> None:
        """Fire one tick.

        Exceptions raised by ``on_tick`` are logged; the timer keeps running.
        """
        self._ticks += 1
        self._log.debug("auto_refresh_tick", tick=self._ticks)
        try:
            self._on_tick()
        except Exception:
            self._log.exception("auto_refresh_tick_failed", tick=self._ticks)

    async def aclose(self) -> None:
        """Stop the timer and wait for its task to finish."""
        task = self._task
        self.stop()
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval_seconds)
            self.tick()
