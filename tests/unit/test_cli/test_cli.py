"""Tests for the command-line interface."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from focuswise.archive.archive import new_report
from focuswise.cli import _show_reports, parse_args
from focuswise.config.settings import Settings


@pytest.fixture
def settings(report_path) -> Settings:
    s = Settings()
    s.archive.path = str(report_path)
    return s


class TestParseArgs:
    def test_session_minutes(self) -> None:
        args = parse_args(["session", "-m", "25", "--minimized"])
        assert args.command == "session"
        assert args.minutes == "25"
        assert args.minimized is True

    def test_reports_clear(self) -> None:
        args = parse_args(["-v", "reports", "--clear", "-y"])
        assert args.verbose is True
        assert args.clear is True
        assert args.yes is True

    def test_session_requires_minutes(self) -> None:
        with pytest.raises(SystemExit):
            parse_args(["session"])


class TestShowReports:
    """Test history printing and clearing."""

    def test_empty_history(self, settings, capsys) -> None:
        args = parse_args(["reports"])
        assert _show_reports(settings, args) == 0
        assert "no saved focus reports" in capsys.readouterr().out

    def test_lists_saved_reports(self, settings, report_archive, sample_totals, capsys) -> None:
        created = datetime(2025, 3, 7, 16, 5, 9, tzinfo=timezone.utc)
        report_archive.append(new_report(sample_totals, created_at=created))
        assert _show_reports(settings, parse_args(["reports"])) == 0
        out = capsys.readouterr().out
        assert "Focus Score         60%" in out

    def test_clear_asks_for_confirmation(self, settings, report_archive, sample_totals, capsys) -> None:
        report_archive.append(new_report(sample_totals))
        with patch("builtins.input", return_value="n"):
            assert _show_reports(settings, parse_args(["reports", "--clear"])) == 0
        assert "Cancelled" in capsys.readouterr().out
        assert len(report_archive.list()) == 1

    def test_clear_confirmed(self, settings, report_archive, sample_totals) -> None:
        report_archive.append(new_report(sample_totals))
        assert _show_reports(settings, parse_args(["reports", "--clear", "--yes"])) == 0
        assert report_archive.list() == []
