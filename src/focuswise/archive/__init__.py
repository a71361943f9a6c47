"""Report archive for focuswise.

Durable, newest-first list of FocusReport records plus the helpers that
format them for display.

Public API:
    ReportStore -- Abstract persistence backend
    JsonFileReportStore -- JSON document on local disk
    ReportArchive -- append / list / clear over a store
"""

from focuswise.archive.archive import ReportArchive
from focuswise.archive.formatting import (
    ReportBreakdown,
    format_clock,
    format_duration,
    report_breakdown,
)
from focuswise.archive.store import ArchiveError, JsonFileReportStore, ReportStore

__all__ = [
    "ArchiveError",
    "JsonFileReportStore",
    "ReportArchive",
    "ReportBreakdown",
    "ReportStore",
    "format_clock",
    "format_duration",
    "report_breakdown",
]
