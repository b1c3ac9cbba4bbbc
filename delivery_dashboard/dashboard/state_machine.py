"""Dashboard view lifecycle state machine implementation."""

from enum import Enum, auto
from typing import ClassVar

import structlog

from delivery_dashboard.config.constants import COMPONENT_VIEW


logger = structlog.get_logger()


class ViewState(Enum):
    """View lifecycle states.

    State transitions:
        VIEW_CREATED -> VIEW_MOUNTED: Store subscribed, initial requests sent
        VIEW_MOUNTED -> VIEW_UNMOUNTED: Timer and requests released
        VIEW_CREATED -> VIEW_UNMOUNTED: Torn down before mounting
    """

    VIEW_CREATED = auto()
    VIEW_MOUNTED = auto()
    VIEW_UNMOUNTED = auto()


class ViewStateError(Exception):
    """Raised when an invalid view state transition is attempted."""

    def __init__(self, from_state: ViewState, to_state: ViewState) -> None:
        """Initialize the error.

        Args:
            from_state: The current state.
            to_state: The attempted target state.
        """
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid view state transition: {from_state.name} -> {to_state.name}"
        )


class ViewStateMachine:
    """State machine for the dashboard view lifecycle.

    A view is mounted at most once and cannot be used after unmounting.
    """

    VALID_TRANSITIONS: ClassVar[dict[ViewState, set[ViewState]]] = {
        ViewState.VIEW_CREATED: {
            ViewState.VIEW_MOUNTED,
            ViewState.VIEW_UNMOUNTED,
        },
        ViewState.VIEW_MOUNTED: {ViewState.VIEW_UNMOUNTED},
        ViewState.VIEW_UNMOUNTED: set(),  # Terminal state
    }

    def __init__(self, view_id: str) -> None:
        """Initialize the state machine in VIEW_CREATED state.

        Args:
            view_id: Unique view identifier for logging.
        """
        self._view_id = view_id
        self._state = ViewState.VIEW_CREATED
        self._log = logger.bind(view_id=view_id, component=COMPONENT_VIEW)

    @property
    def state(self) -> ViewState:
        """Get the current state."""
        return self._state

    @property
    def view_id(self) -> str:
        """Get the view ID."""
        return self._view_id

    def can_transition(self, to_state: ViewState) -> bool:
        """Check if a transition to the given state is valid."""
        return to_state in self.VALID_TRANSITIONS.get(self._state, set())

    def transition(self, to_state: ViewState) -> None:
        """Transition to a new state.

        Args:
            to_state: The target state.

        Raises:
            ViewStateError: If the transition is invalid.
        """
        if not self.can_transition(to_state):
            self._log.error(
                "invariant_violation",
                error_type="illegal_state_transition",
                from_state=self._state.name,
                to_state=to_state.name,
            )
            raise ViewStateError(self._state, to_state)

        old_state = self._state
        self._state = to_state
        self._log.info(
            "view_state_transition",
            from_state=old_state.name,
            to_state=to_state.name,
        )

    def is_mounted(self) -> bool:
        """Check if the view is mounted."""
        return self._state == ViewState.VIEW_MOUNTED

    def is_terminal(self) -> bool:
        """Check if the view has been torn down."""
        return self._state == ViewState.VIEW_UNMOUNTED
