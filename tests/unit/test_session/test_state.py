"""Tests for the session lifecycle state machine."""

from __future__ import annotations

import pytest

from focuswise.domain.models import SessionState
from focuswise.session.state import (
    InvalidTransitionError,
    SessionAlreadyRunningError,
    SessionStateMachine,
)


def _machine_in(state: SessionState) -> SessionStateMachine:
    machine = SessionStateMachine()
    path = {
        SessionState.IDLE: [],
        SessionState.CONFIGURING: [SessionState.CONFIGURING],
        SessionState.RUNNING: [SessionState.CONFIGURING, SessionState.RUNNING],
        SessionState.FINISHED: [
            SessionState.CONFIGURING,
            SessionState.RUNNING,
            SessionState.FINISHED,
        ],
    }[state]
    for step in path:
        machine.transition(step)
    return machine


class TestSessionStateMachine:
    """Test legal and illegal lifecycle transitions."""

    def test_starts_idle(self) -> None:
        machine = SessionStateMachine()
        assert machine.state is SessionState.IDLE
        assert machine.is_running is False

    def test_full_cycle(self) -> None:
        machine = SessionStateMachine()
        for target in (
            SessionState.CONFIGURING,
            SessionState.RUNNING,
            SessionState.FINISHED,
            SessionState.CONFIGURING,
            SessionState.IDLE,
        ):
            machine.transition(target)
            assert machine.state is target

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (SessionState.IDLE, SessionState.RUNNING),
            (SessionState.IDLE, SessionState.FINISHED),
            (SessionState.CONFIGURING, SessionState.FINISHED),
            (SessionState.RUNNING, SessionState.IDLE),
            (SessionState.RUNNING, SessionState.CONFIGURING),
            (SessionState.FINISHED, SessionState.RUNNING),
        ],
    )
    def test_illegal_transition_leaves_state_unchanged(
        self, current: SessionState, target: SessionState
    ) -> None:
        machine = _machine_in(current)
        with pytest.raises(InvalidTransitionError) as exc_info:
            machine.transition(target)
        assert machine.state is current
        assert exc_info.value.current is current
        assert exc_info.value.target is target

    def test_second_start_reports_already_running(self) -> None:
        machine = _machine_in(SessionState.RUNNING)
        with pytest.raises(SessionAlreadyRunningError, match="already running"):
            machine.transition(SessionState.RUNNING)
        assert machine.is_running is True

    def test_can_transition(self) -> None:
        machine = _machine_in(SessionState.FINISHED)
        assert machine.can_transition(SessionState.CONFIGURING) is True
        assert machine.can_transition(SessionState.IDLE) is True
        assert machine.can_transition(SessionState.RUNNING) is False

    def test_reset_from_running(self) -> None:
        machine = _machine_in(SessionState.RUNNING)
        machine.reset()
        assert machine.state is SessionState.IDLE
