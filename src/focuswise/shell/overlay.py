"""Plain-text renderings of the live overlay, report view and history.

The CLI prints these; they carry the same numbers the HTTP API returns.
"""

from __future__ import annotations

from focuswise.archive.formatting import format_clock, format_duration, report_breakdown
from focuswise.domain.models import FocusReport, SessionSnapshot

BAR_WIDTH = 20


def _bar(percent: int, width: int = BAR_WIDTH) -> str:
    filled = round(width * max(0, min(100, percent)) / 100)
    return "[" + "#" * filled + "-" * (width - filled) + "]"


def render_overlay(snapshot: SessionSnapshot) -> str:
    """One-line live status for a running session.

    The minimized overlay shows only the time left; the maximized one adds
    the live score and a distraction indicator.
    """
    time_left = format_clock(snapshot.remaining_seconds)
    if snapshot.minimized:
        return f"Time Left: {time_left}"
    indicator = "DISTRACTED" if snapshot.is_currently_distracted else "focused"
    return (
        f"TIME LEFT {time_left} | SCORE {snapshot.live_focus_score}% "
        f"| {indicator} | alerts {snapshot.distraction_events}"
    )


def render_report(report: FocusReport) -> str:
    """Multi-line session report shown when a session finishes."""
    b = report_breakdown(report)
    lines = [
        "Session Report",
        f"  Focus Score         {report.focus_score}% {_bar(report.focus_score)}",
        f"  Focused: {b.focused_percent}%   Distracted: {b.distracted_percent}%",
        f"  Total Duration      {format_clock(report.duration)}",
        f"  Time Focused        {format_clock(b.focused_seconds)}",
        f"  Time Distracted     {format_clock(b.distracted_seconds)}",
        f"  Distraction Alerts  {report.distractions}",
    ]
    return "\n".join(lines)


def render_history(reports: list[FocusReport]) -> str:
    """Report history cards, newest first."""
    if not reports:
        return (
            "You have no saved focus reports yet.\n"
            "Complete a focus session to see your history here."
        )
    cards = []
    for report in reports:
        b = report_breakdown(report)
        cards.append("\n".join([
            f"Focus Session  {report.date}",
            f"  Focus Score         {report.focus_score}% {_bar(report.focus_score)}",
            f"  Total Duration      {format_duration(report.duration)}",
            f"  Time Focused        {format_duration(b.focused_seconds)}",
            f"  Time Distracted     {format_duration(b.distracted_seconds)}",
            f"  Distraction Alerts  {report.distractions}",
        ]))
    return "\n\n".join(cards)
