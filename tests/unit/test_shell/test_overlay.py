"""Tests for the plain-text overlay and report renderings."""

from __future__ import annotations

from focuswise.domain.models import FocusReport, SessionSnapshot, SessionState
from focuswise.shell.overlay import render_history, render_overlay, render_report


def _report(**overrides) -> FocusReport:
    fields = {
        "id": "2025-03-07T16:05:09+00:00",
        "date": "3/7/2025, 4:05:09 PM",
        "duration": 10,
        "focus_score": 60,
        "distractions": 1,
        "distraction_seconds": 4,
    }
    fields.update(overrides)
    return FocusReport(**fields)


class TestRenderOverlay:
    def test_minimized_shows_only_time_left(self) -> None:
        snapshot = SessionSnapshot(state=SessionState.RUNNING, remaining_seconds=1499, minimized=True)
        assert render_overlay(snapshot) == "Time Left: 24:59"

    def test_maximized_shows_score_and_indicator(self) -> None:
        snapshot = SessionSnapshot(
            state=SessionState.RUNNING,
            remaining_seconds=65,
            live_focus_score=83,
            is_currently_distracted=True,
            distraction_events=2,
        )
        line = render_overlay(snapshot)
        assert "TIME LEFT 01:05" in line
        assert "SCORE 83%" in line
        assert "DISTRACTED" in line
        assert "alerts 2" in line


class TestRenderReport:
    def test_report_view(self) -> None:
        text = render_report(_report())
        assert "Focus Score         60%" in text
        assert "Focused: 60%   Distracted: 40%" in text
        assert "Total Duration      00:10" in text
        assert "Time Focused        00:06" in text
        assert "Time Distracted     00:04" in text
        assert "Distraction Alerts  1" in text


class TestRenderHistory:
    def test_empty_history(self) -> None:
        assert render_history([]).startswith("You have no saved focus reports yet.")

    def test_cards_in_given_order(self) -> None:
        newer = _report(id="b", date="3/8/2025, 9:00:00 AM", duration=1500, distraction_seconds=0, focus_score=100)
        older = _report(id="a")
        text = render_history([newer, older])
        assert text.index("3/8/2025") < text.index("3/7/2025")
        assert "Total Duration      25m 0s" in text
        assert "Time Distracted     0m 4s" in text
