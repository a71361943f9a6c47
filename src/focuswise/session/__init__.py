"""Focus session module for focuswise.

Contains the session lifecycle: focus accounting, the state machine,
the per-second ticker, and the widget that owns them.

Public API:
    FocusAccounting -- Counters and live score for one session
    SessionStateMachine -- Legal lifecycle transitions
    Ticker -- Fixed-interval sampler
    FocusModeWidget -- Owner of one session's lifecycle and resources
"""

from focuswise.session.accounting import FocusAccounting, compute_focus_score
from focuswise.session.state import (
    ConfigurationError,
    FocusSessionError,
    InvalidDurationError,
    InvalidTransitionError,
    SessionAlreadyRunningError,
    SessionStateMachine,
)
from focuswise.session.ticker import Ticker
from focuswise.session.widget import FocusModeWidget

__all__ = [
    "ConfigurationError",
    "FocusAccounting",
    "FocusModeWidget",
    "FocusSessionError",
    "InvalidDurationError",
    "InvalidTransitionError",
    "SessionAlreadyRunningError",
    "SessionStateMachine",
    "Ticker",
    "compute_focus_score",
]
