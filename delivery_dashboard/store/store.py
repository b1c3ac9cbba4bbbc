"""Single-owner state store with queued dispatch."""

from collections import deque
from collections.abc import Callable

import structlog

from delivery_dashboard.config.constants import COMPONENT_STORE
from delivery_dashboard.store.models import ApplicationState
from delivery_dashboard.store.reducer import reduce


logger = structlog.get_logger()

Listener = Callable[[ApplicationState], None]
Reducer = Callable[[ApplicationState | None, object], ApplicationState]


class StateStore:
    """Holds the authoritative dashboard state.

    ``dispatch`` enqueues an action; a single consumer drains the queue in
    FIFO order, applies the reducer and publishes every new snapshot to the
    subscribers. Actions dispatched by a subscriber while the queue is being
    drained are applied after the current one, never nested inside it.
    A listener that raises is logged and skipped; the remaining listeners
    and queued actions still run.
    """

    def __init__(
        self,
        reducer: Reducer = reduce,
        initial_state: ApplicationState | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            reducer: Pure transition function.
            initial_state: Starting state (defaults to the reducer's initial state).
        """
        self._reducer = reducer
        self._state = (
            initial_state if initial_state is not None else reducer(None, None)
        )
        self._queue: deque[object] = deque()
        self._draining = False
        self._listeners: list[Listener] = []
        self._log = logger.bind(component=COMPONENT_STORE)

    @property
    def state(self) -> ApplicationState:
        """Get the current state snapshot."""
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called with each new state.

        Args:
            listener: Callable receiving the new state.

        Returns:
            A callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: object) -> None:
        """Queue an action and drain the queue unless already draining.

        Args:
            action: Action to apply.
        """
        self._queue.append(action)
        if self._draining:
            return

        self._draining = True
        try:
            while self._queue:
                self._apply(self._queue.popleft())
        finally:
            self._draining = False

    def _apply(self, action: object) -> None:
        previous = self._state
        self._state = self._reducer(previous, action)
        if self._state is previous:
            self._log.debug("action_ignored", action=type(action).__name__)
            return

        self._log.debug(
            "state_transition",
            action=type(action).__name__,
            check_results=len(self._state.check_results),
            errors=len(self._state.errors),
            should_refresh=self._state.should_refresh,
        )
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                self._log.exception(
                    "listener_failed",
                    action=type(action).__name__,
                    listener=getattr(listener, "__name__", type(listener).__name__),
                )
