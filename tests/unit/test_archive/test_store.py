"""Tests for the JSON file report store."""

from __future__ import annotations

import json

import pytest

from focuswise.archive.store import ArchiveError, JsonFileReportStore


class TestJsonFileReportStore:
    """Test whole-list persistence under a fixed key."""

    def test_missing_file_reads_empty(self, report_path) -> None:
        store = JsonFileReportStore(report_path)
        assert store.read_list() == []

    def test_write_then_read(self, report_path) -> None:
        store = JsonFileReportStore(report_path)
        store.write_list([{"id": "a"}, {"id": "b"}])
        assert store.read_list() == [{"id": "a"}, {"id": "b"}]

        on_disk = json.loads(report_path.read_text())
        assert on_disk == {"focusReports": [{"id": "a"}, {"id": "b"}]}

    def test_other_keys_are_preserved(self, report_path) -> None:
        report_path.write_text(json.dumps({"theme": "dark"}))
        store = JsonFileReportStore(report_path)
        store.write_list([{"id": "a"}])
        store.clear()
        assert json.loads(report_path.read_text()) == {"theme": "dark"}

    def test_custom_key(self, report_path) -> None:
        store = JsonFileReportStore(report_path, key="reports")
        store.write_list([{"id": "a"}])
        assert "reports" in json.loads(report_path.read_text())

    def test_creates_parent_directory(self, tmp_path) -> None:
        store = JsonFileReportStore(tmp_path / "nested" / "dir" / "reports.json")
        store.write_list([])
        assert store.path.exists()

    def test_corrupt_file_raises(self, report_path) -> None:
        report_path.write_text("{not json")
        store = JsonFileReportStore(report_path)
        with pytest.raises(ArchiveError):
            store.read_list()

    def test_non_list_value_raises(self, report_path) -> None:
        report_path.write_text(json.dumps({"focusReports": {"id": "a"}}))
        with pytest.raises(ArchiveError, match="not a list"):
            JsonFileReportStore(report_path).read_list()

    def test_write_replaces_corrupt_file(self, report_path) -> None:
        report_path.write_text("garbage")
        store = JsonFileReportStore(report_path)
        store.write_list([{"id": "a"}])
        assert store.read_list() == [{"id": "a"}]

    def test_clear_without_file_is_noop(self, report_path) -> None:
        JsonFileReportStore(report_path).clear()
        assert not report_path.exists()

    def test_write_failure_raises_archive_error(self, tmp_path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        store = JsonFileReportStore(blocker / "reports.json")
        with pytest.raises(ArchiveError):
            store.write_list([{"id": "a"}])

    def test_no_temp_files_left_behind(self, report_path) -> None:
        store = JsonFileReportStore(report_path)
        store.write_list([{"id": "a"}])
        store.write_list([{"id": "b"}])
        assert [p.name for p in report_path.parent.iterdir()] == [report_path.name]
