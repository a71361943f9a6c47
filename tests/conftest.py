"""Shared test fixtures for the focuswise test suite.

Provides in-memory stand-ins for the camera and the presence classifier,
sample frames, and a report archive backed by a temporary JSON file.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from pathlib import Path
from typing import Callable

import numpy as np
import pytest

from focuswise.archive.archive import ReportArchive
from focuswise.archive.store import JsonFileReportStore
from focuswise.capture.base import CaptureError, CaptureSource
from focuswise.classifier.base import ClassifierLoadError, DetectionError, PresenceClassifier
from focuswise.domain.models import CapturedFrame, Detection, FinalTotals


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeCapture(CaptureSource):
    """Capture source that hands out a blank frame on every read."""

    def __init__(self, fail_open: bool = False, fail_reads: bool = False) -> None:
        super().__init__()
        self.fail_open = fail_open
        self.fail_reads = fail_reads
        self.open_calls = 0
        self.close_calls = 0

    async def open(self) -> None:
        self.open_calls += 1
        if self.fail_open:
            raise CaptureError("Permission denied")
        self._is_open = True

    async def close(self) -> None:
        self.close_calls += 1
        self._is_open = False

    async def capture_frame(self) -> CapturedFrame:
        if not self._is_open:
            raise CaptureError("Camera is not open")
        if self.fail_reads:
            raise CaptureError("Read failed")
        self._frame_counter += 1
        return CapturedFrame(
            image=np.zeros((48, 64, 3), dtype=np.uint8),
            frame_number=self._frame_counter,
            source_device="fake",
        )


class ScriptedClassifier(PresenceClassifier):
    """Classifier that replays a script of verdicts, one per detect call.

    Script entries are booleans, exceptions to raise, or asyncio.Event gates to
    wait on before answering present. Once the script runs out every
    frame is classified as ``default``.
    """

    def __init__(
        self,
        script: list | None = None,
        default: bool = True,
        fail_load: bool = False,
    ) -> None:
        super().__init__()
        self.script = list(script or [])
        self.default = default
        self.fail_load = fail_load
        self.load_calls = 0
        self.detect_calls = 0

    @property
    def name(self) -> str:
        return "scripted"

    async def load(self) -> None:
        self.load_calls += 1
        if self.fail_load:
            raise ClassifierLoadError("model files missing", backend=self.name)
        self._loaded = True

    async def detect(self, frame: CapturedFrame) -> Detection:
        self.detect_calls += 1
        step = self.script.pop(0) if self.script else self.default
        if isinstance(step, BaseException):
            raise step
        if isinstance(step, asyncio.Event):
            await step.wait()
            return Detection(present=True)
        return Detection(present=bool(step))


# ---------------------------------------------------------------------------
# Frame / Image Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_image() -> np.ndarray:
    """A minimal 100x100 black image for testing."""
    return np.zeros((100, 100, 3), dtype=np.uint8)


@pytest.fixture
def sample_frame(sample_image: np.ndarray) -> CapturedFrame:
    """A CapturedFrame with a sample image."""
    return CapturedFrame(
        image=sample_image,
        timestamp=datetime(2025, 1, 1, 12, 0, 0),
        frame_number=0,
        source_device="test",
    )


# ---------------------------------------------------------------------------
# Component Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_capture() -> FakeCapture:
    return FakeCapture()


@pytest.fixture
def make_classifier() -> Callable[..., ScriptedClassifier]:
    """Factory for scripted classifiers."""
    return ScriptedClassifier


@pytest.fixture
def make_capture() -> Callable[..., FakeCapture]:
    """Factory for fake capture sources."""
    return FakeCapture


@pytest.fixture
def detection_error() -> DetectionError:
    return DetectionError("model returned garbage", backend="scripted")


@pytest.fixture
def report_path(tmp_path) -> Path:
    return tmp_path / "focus_reports.json"


@pytest.fixture
def report_archive(report_path) -> ReportArchive:
    """An empty archive stored in a temporary JSON file."""
    return ReportArchive(JsonFileReportStore(report_path))


@pytest.fixture
def sample_totals() -> FinalTotals:
    return FinalTotals(duration=10, focus_score=60, distractions=1, distraction_seconds=4)
