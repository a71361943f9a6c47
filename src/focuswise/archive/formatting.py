"""Display helpers for focus reports."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from focuswise.domain.models import FocusReport


class ReportBreakdown(BaseModel):
    """Focused/distracted split shown in the report view."""

    model_config = ConfigDict(frozen=True)

    focused_seconds: int
    distracted_seconds: int
    focused_percent: int
    distracted_percent: int


def format_duration(seconds: int) -> str:
    """Format seconds as ``"Xm Ys"`` (history cards)."""
    minutes, rest = divmod(max(0, int(seconds)), 60)
    return f"{minutes}m {rest}s"


def format_clock(seconds: int) -> str:
    """Format seconds as zero-padded ``"MM:SS"`` (overlay and report view)."""
    minutes, rest = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{rest:02d}"


def format_timestamp(moment: datetime) -> str:
    """Human-readable local time, e.g. ``"3/7/2025, 4:05:09 PM"``."""
    local = moment.astimezone() if moment.tzinfo else moment
    hour = local.hour % 12 or 12
    suffix = "AM" if local.hour < 12 else "PM"
    return (
        f"{local.month}/{local.day}/{local.year}, "
        f"{hour}:{local.minute:02d}:{local.second:02d} {suffix}"
    )


def report_breakdown(report: FocusReport) -> ReportBreakdown:
    """Split a report's duration into focused and distracted parts.

    The distracted percentage is rounded half up and the focused
    percentage is its complement, so the two always sum to 100.
    """
    if report.duration > 0:
        distracted_percent = (200 * report.distraction_seconds + report.duration) // (2 * report.duration)
    else:
        distracted_percent = 0
    return ReportBreakdown(
        focused_seconds=report.duration - report.distraction_seconds,
        distracted_seconds=report.distraction_seconds,
        focused_percent=100 - distracted_percent,
        distracted_percent=distracted_percent,
    )
