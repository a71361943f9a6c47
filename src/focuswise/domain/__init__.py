"""Domain models for focuswise.

This package contains all core data structures, enumerations, and value
objects used throughout the system. All models use Pydantic v2 for
validation and serialization.
"""

from focuswise.domain.models import (
    CapturedFrame,
    Detection,
    FinalTotals,
    FocusReport,
    Session,
    SessionSnapshot,
    SessionState,
)

__all__ = [
    "CapturedFrame",
    "Detection",
    "FinalTotals",
    "FocusReport",
    "Session",
    "SessionSnapshot",
    "SessionState",
]
