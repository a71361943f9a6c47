"""Newest-first archive of completed focus session reports."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from pydantic import ValidationError

from focuswise.archive.formatting import format_timestamp
from focuswise.archive.store import ArchiveError, ReportStore
from focuswise.domain.models import FinalTotals, FocusReport

logger = logging.getLogger(__name__)


def new_report(totals: FinalTotals, created_at: datetime | None = None) -> FocusReport:
    """Build an immutable report from end-of-session totals.

    The id is the UTC creation timestamp in ISO-8601 form; the date is
    the same moment rendered in local time.
    """
    created_at = created_at or datetime.now(timezone.utc)
    return FocusReport(
        id=created_at.isoformat(),
        date=format_timestamp(created_at),
        duration=totals.duration,
        focus_score=totals.focus_score,
        distractions=totals.distractions,
        distraction_seconds=totals.distraction_seconds,
    )


class ReportArchive:
    """Durable list of FocusReport, newest first.

    Every operation is a whole-list read-modify-write against the store;
    a single writer is assumed.
    """

    def __init__(self, store: ReportStore) -> None:
        self._store = store

    def append(self, report: FocusReport) -> None:
        """Prepend a report and persist the full list.

        Raises:
            ArchiveError: If the existing list cannot be read or the new
                          list cannot be written.
        """
        records = self._store.read_list()
        self._store.write_list([report.to_record(), *records])
        logger.info(
            "Archived focus report %s (score=%d%%, duration=%ds)",
            report.id, report.focus_score, report.duration,
        )

    def list(self) -> list[FocusReport]:
        """Return the stored reports, newest first.

        Unreadable storage yields an empty list; individual malformed
        records are skipped. Both are logged.
        """
        try:
            records = self._store.read_list()
        except ArchiveError as e:
            logger.error("Failed to load focus reports: %s", e)
            return []

        reports = []
        for record in records:
            try:
                reports.append(FocusReport.model_validate(record))
            except ValidationError as e:
                logger.warning("Skipping malformed focus report %r: %s", record, e)
        return reports

    def clear_all(self) -> None:
        """Irrecoverably remove all reports.

        Callers are responsible for obtaining explicit user confirmation
        first.
        """
        self._store.clear()
        logger.info("Cleared focus report history")
