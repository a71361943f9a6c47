"""Focus accounting over a single session record.

Pure bookkeeping: the ticker feeds one presence verdict per tick and
this module keeps the cumulative counters and the live focus score.
"""

from __future__ import annotations

import logging

from focuswise.domain.models import FinalTotals, Session

logger = logging.getLogger(__name__)


def compute_focus_score(elapsed_seconds: int, distracted_seconds: int) -> int:
    """Percentage of elapsed time classified present, rounded half up.

    Returns 100 for a session with no elapsed time.
    """
    if elapsed_seconds <= 0:
        return 100
    focused = max(0, elapsed_seconds - distracted_seconds)
    # round(100 * focused / elapsed) with halves rounded up, in integers
    return (200 * focused + elapsed_seconds) // (2 * elapsed_seconds)


class FocusAccounting:
    """Maintains the counters of one Session, updated in place."""

    def __init__(self, session: Session) -> None:
        self._session = session

    @classmethod
    def start(cls, duration_seconds: int) -> FocusAccounting:
        """Create accounting for a fresh session with all counters zeroed."""
        return cls(Session(planned_seconds=duration_seconds, remaining_seconds=duration_seconds))

    @property
    def session(self) -> Session:
        return self._session

    def record_tick(self, present: bool) -> None:
        """Account for one tick's presence verdict."""
        s = self._session
        s.elapsed_seconds += 1
        if present:
            s.in_distraction_episode = False
        else:
            s.distracted_seconds += 1
            if not s.in_distraction_episode:
                s.distraction_events += 1
                s.in_distraction_episode = True
                logger.debug("Distraction episode %d started", s.distraction_events)
        s.is_currently_distracted = not present
        s.live_focus_score = compute_focus_score(s.elapsed_seconds, s.distracted_seconds)

    def count_down(self) -> int:
        """Decrement the remaining countdown, floored at zero."""
        s = self._session
        s.remaining_seconds = max(0, s.remaining_seconds - 1)
        return s.remaining_seconds

    def finalize(self) -> FinalTotals:
        """Return the report numbers unchanged from current session state."""
        s = self._session
        return FinalTotals(
            duration=s.elapsed_seconds,
            focus_score=compute_focus_score(s.elapsed_seconds, s.distracted_seconds),
            distractions=s.distraction_events,
            distraction_seconds=s.distracted_seconds,
        )
