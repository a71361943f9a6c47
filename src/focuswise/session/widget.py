"""The focus-mode widget: one owner for a session's lifecycle and resources.

The widget owns the state machine, the camera, the classifier, the ticker
task and the mutable session record. The presentation layer talks to it
through a handful of async operations and reads immutable snapshots.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from focuswise.archive.archive import ReportArchive, new_report
from focuswise.archive.store import ArchiveError
from focuswise.capture.base import CaptureError, CaptureSource
from focuswise.classifier.base import ClassifierLoadError, PresenceClassifier
from focuswise.domain.models import CapturedFrame, FocusReport, SessionSnapshot, SessionState
from focuswise.session.accounting import FocusAccounting
from focuswise.session.state import (
    ConfigurationError,
    InvalidDurationError,
    InvalidTransitionError,
    SessionAlreadyRunningError,
    SessionStateMachine,
)
from focuswise.session.ticker import Ticker

logger = logging.getLogger(__name__)

MODEL_LOAD_ERROR = "Error loading AI models. Please try again."
MODEL_LOADING_MESSAGE = "Loading AI models..."
CAMERA_ERROR = "Could not access camera. Please grant camera permission in your system settings."
SAVE_WARNING = (
    "Could not save your focus report. The report store might be full or read-only."
)
INVALID_MINUTES = "Please enter a valid number of minutes."

SnapshotListener = Callable[[SessionSnapshot], None]


def parse_duration_minutes(value: int | str) -> int:
    """Validate a preset or custom duration and return it in seconds.

    Raises:
        InvalidDurationError: If value is not a positive whole number of
                              minutes.
    """
    if isinstance(value, bool):
        raise InvalidDurationError(INVALID_MINUTES)
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise InvalidDurationError(INVALID_MINUTES) from None
    if not isinstance(value, int) or value <= 0:
        raise InvalidDurationError(INVALID_MINUTES)
    return value * 60


class FocusModeWidget:
    """Owns one focus session at a time.

    Example usage::

        widget = FocusModeWidget(capture, classifier, archive)
        await widget.open()
        await widget.start_minutes(25)
        report = await widget.wait_finished()
    """

    def __init__(
        self,
        capture: CaptureSource,
        classifier: PresenceClassifier,
        archive: ReportArchive,
        tick_interval: float = 1.0,
        detection_timeout: float = 0.9,
        preset_minutes: list[int] | None = None,
    ) -> None:
        self._capture = capture
        self._classifier = classifier
        self._archive = archive
        self._tick_interval = tick_interval
        self._detection_timeout = detection_timeout
        self._preset_minutes = list(preset_minutes or [10, 25, 45])

        self._machine = SessionStateMachine()
        self._accounting: FocusAccounting | None = None
        self._ticker_task: asyncio.Task | None = None
        self._load_task: asyncio.Task | None = None
        self._recovery_task: asyncio.Task | None = None
        # Bumped by start and teardown so a finish that outlives its
        # session can tell it no longer owns the widget
        self._generation = 0
        self._finished = asyncio.Event()
        self._starting = False
        self._finishing = False

        self._latest_frame: CapturedFrame | None = None
        self._last_report: FocusReport | None = None
        self._error: str | None = None
        self._warning: str | None = None
        self._minimized = False
        self._listeners: list[SnapshotListener] = []

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._machine.state

    @property
    def preset_minutes(self) -> list[int]:
        return list(self._preset_minutes)

    @property
    def last_report(self) -> FocusReport | None:
        return self._last_report

    @property
    def latest_frame(self) -> CapturedFrame | None:
        """Most recent preview frame; None whenever no camera is held."""
        return self._latest_frame

    @property
    def archive(self) -> ReportArchive:
        return self._archive

    def snapshot(self) -> SessionSnapshot:
        """Immutable view of the widget for rendering."""
        state = self._machine.state
        common = {
            "state": state,
            "classifier_loaded": self._classifier.is_loaded,
            "minimized": self._minimized,
            "error": self._error,
            "warning": self._warning,
        }
        if self._accounting is None or state not in (SessionState.RUNNING, SessionState.FINISHED):
            return SessionSnapshot(**common)
        s = self._accounting.session
        return SessionSnapshot(
            elapsed_seconds=s.elapsed_seconds,
            remaining_seconds=s.remaining_seconds,
            distracted_seconds=s.distracted_seconds,
            distraction_events=s.distraction_events,
            is_currently_distracted=s.is_currently_distracted,
            live_focus_score=s.live_focus_score,
            **common,
        )

    def add_listener(self, listener: SnapshotListener) -> None:
        """Register a callback invoked with a fresh snapshot after every change."""
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def open(self) -> SessionSnapshot:
        """idle -> configuring; starts loading the classifier in the background."""
        self._machine.transition(SessionState.CONFIGURING)
        self._error = None
        self._ensure_classifier_loading()
        self._notify()
        return self.snapshot()

    async def wait_until_ready(self) -> bool:
        """Wait for the classifier load started by open() and report success.

        A load that already failed is retried.
        """
        if self._classifier.is_loaded:
            return True
        task = self._load_task
        if task is None or task.cancelled() or (task.done() and not task.result()):
            self._load_task = asyncio.create_task(self._load_classifier())
        return await asyncio.shield(self._load_task)

    async def start_minutes(self, minutes: int | str) -> SessionSnapshot:
        """Start a session from a preset or user-entered number of minutes."""
        if self._machine.is_running or self._starting:
            raise SessionAlreadyRunningError()
        try:
            duration_seconds = parse_duration_minutes(minutes)
        except InvalidDurationError as e:
            self._error = str(e)
            self._notify()
            raise
        return await self.start(duration_seconds)

    async def start(self, duration_seconds: int) -> SessionSnapshot:
        """configuring -> running.

        Raises:
            SessionAlreadyRunningError: A session is running or starting;
                                        it is left untouched.
            InvalidTransitionError: The widget is not configuring.
            InvalidDurationError: duration_seconds is not a positive int.
            ConfigurationError: The classifier failed to load or the camera
                                could not be opened. The widget stays in
                                configuring with the message in ``error``.
        """
        if self._machine.is_running or self._starting:
            raise SessionAlreadyRunningError()
        if self._machine.state is not SessionState.CONFIGURING:
            raise InvalidTransitionError(self._machine.state, SessionState.RUNNING)
        if isinstance(duration_seconds, bool) or not isinstance(duration_seconds, int) or duration_seconds <= 0:
            raise InvalidDurationError(f"Session duration must be a positive number of seconds, got {duration_seconds!r}")

        self._starting = True
        try:
            self._error = None
            if not await self.wait_until_ready():
                self._error = MODEL_LOAD_ERROR
                self._notify()
                raise ConfigurationError(MODEL_LOAD_ERROR)
            self._ensure_still_configuring()

            try:
                await self._capture.open()
            except CaptureError as e:
                logger.error("Error accessing camera: %s", e)
                self._error = CAMERA_ERROR
                self._notify()
                raise ConfigurationError(CAMERA_ERROR) from e

            if self._machine.state is not SessionState.CONFIGURING:
                await self._capture.close()
                raise InvalidTransitionError(self._machine.state, SessionState.RUNNING)

            self._accounting = FocusAccounting.start(duration_seconds)
            self._last_report = None
            self._warning = None
            self._minimized = False
            self._latest_frame = None
            self._finished = asyncio.Event()
            self._generation += 1
            self._machine.transition(SessionState.RUNNING)

            ticker = Ticker(
                capture=self._capture,
                classifier=self._classifier,
                accounting=self._accounting,
                on_complete=self._finish,
                interval=self._tick_interval,
                detection_timeout=self._detection_timeout,
                on_frame=self._set_latest_frame,
                on_tick=self._notify,
            )
            self._ticker_task = asyncio.create_task(ticker.run())
            self._ticker_task.add_done_callback(self._on_ticker_done)
        finally:
            self._starting = False

        logger.info("Focus session started (%ds)", duration_seconds)
        self._notify()
        return self.snapshot()

    async def end(self) -> FocusReport:
        """running -> finished on user request.

        Calling it again after the session finished (for example racing
        the final tick) returns the same report.
        """
        if self._machine.state is SessionState.FINISHED and self._last_report is not None:
            return self._last_report
        if not self._machine.is_running:
            raise InvalidTransitionError(self._machine.state, SessionState.FINISHED)
        logger.info("Focus session ended by user")
        return await self._finish()

    async def new_session(self) -> SessionSnapshot:
        """finished -> configuring."""
        self._machine.transition(SessionState.CONFIGURING)
        self._error = None
        self._ensure_classifier_loading()
        self._notify()
        return self.snapshot()

    async def dismiss(self) -> SessionSnapshot:
        """configuring/finished -> idle."""
        self._machine.transition(SessionState.IDLE)
        self._error = None
        self._notify()
        return self.snapshot()

    def toggle_minimized(self) -> bool:
        """Flip the live overlay between minimized and maximized."""
        self._minimized = not self._minimized
        self._notify()
        return self._minimized

    async def wait_finished(self) -> FocusReport | None:
        """Wait until the running session finishes or the widget is torn down."""
        await self._finished.wait()
        return self._last_report

    async def teardown(self) -> None:
        """Abrupt cancellation: release everything and return to idle.

        A session interrupted this way is discarded without a report.
        Safe to call any number of times and from any state.
        """
        if self._load_task is not None and not self._load_task.done():
            self._load_task.cancel()
        was_running = self._machine.is_running
        self._generation += 1
        await self._release_resources()
        self._machine.reset()
        self._finished.set()
        if was_running:
            logger.warning("Focus session torn down while running; no report saved")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _finish(self) -> FocusReport | None:
        """Stop sampling, release the camera, and archive the report."""
        if self._finishing:
            await self._finished.wait()
            return self._last_report
        if not self._machine.is_running:
            return self._last_report
        self._finishing = True
        generation = self._generation
        try:
            await self._release_resources()
            if generation != self._generation:
                logger.info("Session was torn down while finishing; report discarded")
                return None
            totals = self._accounting.finalize()
            report = new_report(totals)
            try:
                self._archive.append(report)
            except ArchiveError as e:
                logger.error("Failed to save focus report: %s", e)
                self._warning = SAVE_WARNING
            self._last_report = report
            self._machine.transition(SessionState.FINISHED)
            self._finished.set()
        finally:
            self._finishing = False
        logger.info(
            "Focus session finished: score=%d%% duration=%ds distractions=%d",
            report.focus_score, report.duration, report.distractions,
        )
        self._notify()
        return report

    async def _release_resources(self) -> None:
        """Stop the ticker, release the camera, drop the preview frame.

        Idempotent. When called from inside the ticker task (the final
        tick) the task is left to return on its own.
        """
        task, self._ticker_task = self._ticker_task, None
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        try:
            await self._capture.close()
        except Exception as e:
            logger.error("Failed to release camera: %s", e)
        self._latest_frame = None

    def _on_ticker_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None and self._machine.is_running:
            logger.error("Ticker stopped unexpectedly: %s", exc)
            self._recovery_task = asyncio.ensure_future(self._finish())
            self._recovery_task.add_done_callback(_log_recovery_failure)

    def _ensure_classifier_loading(self) -> None:
        if self._classifier.is_loaded:
            return
        if self._load_task is None or self._load_task.done():
            self._load_task = asyncio.create_task(self._load_classifier())

    async def _load_classifier(self) -> bool:
        logger.info("%s (%s)", MODEL_LOADING_MESSAGE, self._classifier.name)
        try:
            await self._classifier.load()
        except ClassifierLoadError as e:
            logger.error("Failed to load presence classifier: %s", e)
            self._error = MODEL_LOAD_ERROR
            self._notify()
            return False
        except Exception as e:
            logger.error("Unexpected error loading presence classifier: %s", e)
            self._error = MODEL_LOAD_ERROR
            self._notify()
            return False
        self._notify()
        return True

    def _ensure_still_configuring(self) -> None:
        if self._machine.state is not SessionState.CONFIGURING:
            raise InvalidTransitionError(self._machine.state, SessionState.RUNNING)

    def _set_latest_frame(self, frame: CapturedFrame) -> None:
        if self._machine.is_running:
            self._latest_frame = frame

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in self._listeners:
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Snapshot listener failed")


def _log_recovery_failure(task: asyncio.Task) -> None:
    if not task.cancelled() and task.exception() is not None:
        logger.error("Failed to finish session after ticker error: %s", task.exception())
