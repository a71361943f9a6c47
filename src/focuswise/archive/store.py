"""Persistence backends for the report list.

A store keeps one ordered list of raw report records under a fixed key.
The archive always reads and writes the whole list, so a backend only
needs whole-list read, write and clear.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_KEY = "focusReports"


class ReportStore(ABC):
    """Abstract key-value storage for the serialized report list."""

    @abstractmethod
    def read_list(self) -> list[dict]:
        """Return the stored records, or an empty list if none exist.

        Raises:
            ArchiveError: If stored data exists but cannot be read.
        """
        ...

    @abstractmethod
    def write_list(self, records: list[dict]) -> None:
        """Replace the stored list.

        Raises:
            ArchiveError: If the list cannot be written.
        """
        ...

    @abstractmethod
    def clear(self) -> None:
        """Remove the stored list."""
        ...


class JsonFileReportStore(ReportStore):
    """Stores the report list inside a JSON document on disk.

    The document is a JSON object; the list lives under ``key`` so other
    feature data can share the file. Writes replace the file atomically.
    """

    def __init__(self, path: Path | str, key: str = DEFAULT_KEY) -> None:
        self._path = Path(path)
        self._key = key

    @property
    def path(self) -> Path:
        return self._path

    def read_list(self) -> list[dict]:
        document = self._read_document()
        records = document.get(self._key, [])
        if not isinstance(records, list):
            raise ArchiveError(f"Stored value under {self._key!r} is not a list")
        return records

    def write_list(self, records: list[dict]) -> None:
        try:
            document = self._read_document()
        except ArchiveError:
            logger.warning("Replacing unreadable report store %s", self._path)
            document = {}
        document[self._key] = records
        self._write_document(document)

    def clear(self) -> None:
        try:
            document = self._read_document()
        except ArchiveError:
            document = {}
        if self._key not in document and not self._path.exists():
            return
        document.pop(self._key, None)
        self._write_document(document)

    def _read_document(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            with open(self._path, encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ArchiveError(f"Failed to read report store {self._path}: {e}") from e
        if not isinstance(document, dict):
            raise ArchiveError(f"Report store {self._path} is not a JSON object")
        return document

    def _write_document(self, document: dict) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(document, f, indent=2)
                os.replace(tmp_path, self._path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except (OSError, TypeError, ValueError) as e:
            raise ArchiveError(f"Failed to write report store {self._path}: {e}") from e


class ArchiveError(Exception):
    """Raised when the report store cannot be read or written."""
