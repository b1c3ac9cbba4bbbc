"""Unit tests for the view lifecycle state machine."""

import pytest

from delivery_dashboard.dashboard.state_machine import (
    ViewState,
    ViewStateError,
    ViewStateMachine,
)


class TestViewStateMachine:
    """Tests for ViewStateMachine."""

    def test_initial_state(self) -> None:
        """A new machine starts in VIEW_CREATED."""
        sm = ViewStateMachine("view-1")
        assert sm.state == ViewState.VIEW_CREATED
        assert sm.view_id == "view-1"
        assert not sm.is_mounted()
        assert not sm.is_terminal()

    def test_mount_then_unmount(self) -> None:
        """The normal lifecycle is created, mounted, unmounted."""
        sm = ViewStateMachine("view-1")
        sm.transition(ViewState.VIEW_MOUNTED)
        assert sm.is_mounted()
        sm.transition(ViewState.VIEW_UNMOUNTED)
        assert sm.is_terminal()

    def test_unmount_before_mount(self) -> None:
        """A view can be torn down without being mounted."""
        sm = ViewStateMachine("view-1")
        sm.transition(ViewState.VIEW_UNMOUNTED)
        assert sm.is_terminal()

    def test_cannot_mount_twice(self) -> None:
        """Mounting a mounted view is rejected."""
        sm = ViewStateMachine("view-1")
        sm.transition(ViewState.VIEW_MOUNTED)
        with pytest.raises(ViewStateError) as exc_info:
            sm.transition(ViewState.VIEW_MOUNTED)
        assert exc_info.value.from_state == ViewState.VIEW_MOUNTED
        assert "VIEW_MOUNTED -> VIEW_MOUNTED" in str(exc_info.value)

    def test_unmounted_is_terminal(self) -> None:
        """Nothing follows VIEW_UNMOUNTED."""
        sm = ViewStateMachine("view-1")
        sm.transition(ViewState.VIEW_UNMOUNTED)
        for state in ViewState:
            assert not sm.can_transition(state)
        with pytest.raises(ViewStateError):
            sm.transition(ViewState.VIEW_MOUNTED)
