"""Tests for focus accounting and the focus score."""

from __future__ import annotations

import itertools

import pytest

from focuswise.session.accounting import FocusAccounting, compute_focus_score


def _run(duration: int, verdicts: list[bool]) -> FocusAccounting:
    accounting = FocusAccounting.start(duration)
    for present in verdicts:
        accounting.record_tick(present)
        accounting.count_down()
    return accounting


class TestComputeFocusScore:
    """Test the rounded focus percentage."""

    def test_no_elapsed_time_scores_100(self) -> None:
        assert compute_focus_score(0, 0) == 100

    @pytest.mark.parametrize(
        ("elapsed", "distracted", "expected"),
        [
            (10, 4, 60),
            (10, 0, 100),
            (10, 10, 0),
            (3, 1, 67),
            (3, 2, 33),
            (8, 1, 88),
            (8, 3, 63),
        ],
    )
    def test_rounds_half_up(self, elapsed: int, distracted: int, expected: int) -> None:
        """Exact halves round up, e.g. 62.5% becomes 63%."""
        assert compute_focus_score(elapsed, distracted) == expected


class TestFocusAccounting:
    """Test per-tick bookkeeping."""

    def test_start_zeroes_counters(self) -> None:
        s = FocusAccounting.start(600).session
        assert s.planned_seconds == 600
        assert s.remaining_seconds == 600
        assert s.elapsed_seconds == 0
        assert s.distracted_seconds == 0
        assert s.distraction_events == 0
        assert s.live_focus_score == 100
        assert s.is_currently_distracted is False

    def test_one_long_absence_is_one_event(self) -> None:
        """Three present, four absent, three present over ten seconds."""
        verdicts = [True] * 3 + [False] * 4 + [True] * 3
        accounting = _run(10, verdicts)
        s = accounting.session
        assert s.elapsed_seconds == 10
        assert s.remaining_seconds == 0
        assert s.distracted_seconds == 4
        assert s.distraction_events == 1
        assert s.live_focus_score == 60

        totals = accounting.finalize()
        assert totals.duration == 10
        assert totals.focus_score == 60
        assert totals.distractions == 1
        assert totals.distraction_seconds == 4

    def test_flicker_counts_each_absence(self) -> None:
        accounting = _run(5, [False, True, False, True, False])
        s = accounting.session
        assert s.distraction_events == 3
        assert s.distracted_seconds == 3
        assert s.live_focus_score == 40

    def test_indicator_follows_latest_verdict(self) -> None:
        accounting = FocusAccounting.start(5)
        accounting.record_tick(False)
        assert accounting.session.is_currently_distracted is True
        accounting.record_tick(True)
        assert accounting.session.is_currently_distracted is False

    def test_countdown_floors_at_zero(self) -> None:
        accounting = FocusAccounting.start(1)
        assert accounting.count_down() == 0
        assert accounting.count_down() == 0
        assert accounting.session.remaining_seconds == 0

    def test_finalize_without_ticks(self) -> None:
        totals = FocusAccounting.start(600).finalize()
        assert totals.duration == 0
        assert totals.focus_score == 100
        assert totals.distractions == 0
        assert totals.distraction_seconds == 0

    def test_finalize_matches_live_state(self) -> None:
        accounting = _run(8, [True, False, False, True, True, True, False, True])
        s = accounting.session
        totals = accounting.finalize()
        assert totals.duration == s.elapsed_seconds
        assert totals.distraction_seconds == s.distracted_seconds
        assert totals.distractions == s.distraction_events
        assert totals.focus_score == s.live_focus_score

    def test_counter_invariants_hold_for_every_short_sequence(self) -> None:
        """Bounds and event counting hold for all presence patterns of length 6."""
        duration = 6
        for verdicts in itertools.product([True, False], repeat=duration):
            accounting = FocusAccounting.start(duration)
            previous_remaining = duration
            for i, present in enumerate(verdicts, start=1):
                accounting.record_tick(present)
                remaining = accounting.count_down()
                s = accounting.session
                assert s.elapsed_seconds == i
                assert s.elapsed_seconds + s.remaining_seconds == duration
                assert remaining == previous_remaining - 1
                assert 0 <= s.distracted_seconds <= s.elapsed_seconds
                assert s.distraction_events <= s.distracted_seconds
                assert 0 <= s.live_focus_score <= 100
                previous_remaining = remaining

            absent_runs = sum(
                1 for present, group in itertools.groupby(verdicts) if not present
            )
            assert accounting.session.distraction_events == absent_runs
            assert accounting.session.distracted_seconds == verdicts.count(False)
