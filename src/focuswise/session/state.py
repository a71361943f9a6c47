"""Lifecycle state machine for the focus-mode widget.

Only the transitions below are legal; everything else raises
InvalidTransitionError without changing state::

    idle        -> configuring   open
    configuring -> running       start
    configuring -> idle          dismiss
    running     -> finished      end / countdown complete
    finished    -> configuring   new session
    finished    -> idle          dismiss
"""

from __future__ import annotations

import logging

from focuswise.domain.models import SessionState

logger = logging.getLogger(__name__)

_TRANSITIONS: dict[SessionState, frozenset[SessionState]] = {
    SessionState.IDLE: frozenset({SessionState.CONFIGURING}),
    SessionState.CONFIGURING: frozenset({SessionState.RUNNING, SessionState.IDLE}),
    SessionState.RUNNING: frozenset({SessionState.FINISHED}),
    SessionState.FINISHED: frozenset({SessionState.CONFIGURING, SessionState.IDLE}),
}


class FocusSessionError(Exception):
    """Base class for focus session lifecycle errors."""


class InvalidTransitionError(FocusSessionError):
    """Raised when an operation is not allowed in the current state."""

    def __init__(self, current: SessionState, target: SessionState) -> None:
        super().__init__(f"Cannot go from {current.value} to {target.value}")
        self.current = current
        self.target = target


class SessionAlreadyRunningError(InvalidTransitionError):
    """Raised when a session is started while another one is running."""

    def __init__(self) -> None:
        super().__init__(SessionState.RUNNING, SessionState.RUNNING)
        self.args = ("A focus session is already running",)


class ConfigurationError(FocusSessionError):
    """Raised when a session cannot start: camera or classifier unavailable."""


class InvalidDurationError(FocusSessionError, ValueError):
    """Raised for a session duration that is not a positive integer."""


class SessionStateMachine:
    """Tracks the widget state and enforces the legal transitions."""

    def __init__(self) -> None:
        self._state = SessionState.IDLE

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is SessionState.RUNNING

    def can_transition(self, target: SessionState) -> bool:
        return target in _TRANSITIONS[self._state]

    def transition(self, target: SessionState) -> None:
        """Move to target or raise InvalidTransitionError."""
        if not self.can_transition(target):
            if self._state is SessionState.RUNNING and target is SessionState.RUNNING:
                raise SessionAlreadyRunningError()
            raise InvalidTransitionError(self._state, target)
        logger.debug("Session state %s -> %s", self._state.value, target.value)
        self._state = target

    def reset(self) -> None:
        """Force the machine back to idle (used by abrupt teardown)."""
        self._state = SessionState.IDLE
