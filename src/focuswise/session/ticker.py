"""Fixed-interval sampler that drives a running focus session.

Each tick samples one frame, classifies it, feeds the verdict to focus
accounting and decrements the countdown. Ticks never overlap: a tick is
awaited to completion (detection included) before the next one is
scheduled.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from focuswise.capture.base import CaptureError, CaptureSource
from focuswise.classifier.base import DetectionError, PresenceClassifier
from focuswise.domain.models import CapturedFrame
from focuswise.session.accounting import FocusAccounting

logger = logging.getLogger(__name__)


class Ticker:
    """Runs one detection-and-accounting cycle per interval.

    Args:
        capture: Open capture source to sample frames from.
        classifier: Presence classifier; a tick with an unloaded
                    classifier counts as absent.
        accounting: Accounting for the running session.
        on_complete: Awaited as the last action of the tick on which the
                     countdown reaches zero.
        interval: Seconds between ticks.
        detection_timeout: Upper bound for sampling plus detection within
                           one tick. Exceeding it counts as absent.
        on_frame: Called with every frame successfully read, before
                  classification (live preview).
        on_tick: Called after each tick's accounting, before completion.
    """

    def __init__(
        self,
        capture: CaptureSource,
        classifier: PresenceClassifier,
        accounting: FocusAccounting,
        on_complete: Callable[[], Awaitable[None]],
        interval: float = 1.0,
        detection_timeout: float = 0.9,
        on_frame: Callable[[CapturedFrame], None] | None = None,
        on_tick: Callable[[], None] | None = None,
    ) -> None:
        self._capture = capture
        self._classifier = classifier
        self._accounting = accounting
        self._on_complete = on_complete
        self._interval = interval
        self._detection_timeout = detection_timeout
        self._on_frame = on_frame
        self._on_tick = on_tick
        self._ticking = False
        self._tick_count = 0
        # Presence check that outlived its tick; detection may still be
        # running in a worker thread
        self._pending: asyncio.Task | None = None

    @property
    def tick_count(self) -> int:
        """Number of ticks completed so far."""
        return self._tick_count

    async def run(self) -> None:
        """Tick once per interval until the countdown completes.

        A late timer produces exactly one tick; the schedule then restarts
        from the current time instead of firing the missed ticks.
        """
        loop = asyncio.get_running_loop()
        next_at = loop.time() + self._interval
        try:
            while True:
                delay = next_at - loop.time()
                if delay > 0:
                    await asyncio.sleep(delay)
                if await self.tick():
                    break
                next_at += self._interval
                now = loop.time()
                if next_at < now:
                    logger.debug("Tick ran %.2fs late, not catching up", now - next_at)
                    next_at = now
        finally:
            if self._pending is not None and not self._pending.done():
                self._pending.cancel()
        logger.info("Ticker finished after %d ticks", self._tick_count)

    async def tick(self) -> bool:
        """Perform one tick.

        Returns:
            True if this tick completed the countdown.
        """
        if self._ticking:
            logger.warning("Tick requested while another tick is in progress, skipping")
            return False
        self._ticking = True
        try:
            present = await self._sample()
            self._accounting.record_tick(present)
            remaining = self._accounting.count_down()
            self._tick_count += 1
            if self._on_tick is not None:
                self._on_tick()
            if remaining == 0:
                await self._on_complete()
                return True
            return False
        finally:
            self._ticking = False

    async def _sample(self) -> bool:
        """Capture and classify one frame; any failure counts as absent.

        A check that times out keeps running in the background. Until it
        finishes, later ticks are absent and start no new detection.
        """
        if self._pending is not None and not self._pending.done():
            logger.warning("Previous presence check still running, counting tick as absent")
            return False
        self._pending = asyncio.create_task(self._capture_and_detect())
        self._pending.add_done_callback(_discard_late_result)
        try:
            return await asyncio.wait_for(
                asyncio.shield(self._pending), timeout=self._detection_timeout
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Presence check did not finish within %.2fs, counting tick as absent",
                self._detection_timeout,
            )
        except CaptureError as e:
            logger.warning("No frame available, counting tick as absent: %s", e)
        except DetectionError as e:
            logger.warning("Detection failed, counting tick as absent: %s", e)
        except Exception as e:
            logger.warning("Unexpected presence check failure, counting tick as absent: %s", e)
        return False

    async def _capture_and_detect(self) -> bool:
        frame = await self._capture.capture_frame()
        if self._on_frame is not None:
            self._on_frame(frame)
        if not self._classifier.is_loaded:
            logger.debug("Classifier not loaded, counting tick as absent")
            return False
        detection = await self._classifier.detect(frame)
        return detection.present


def _discard_late_result(task: asyncio.Task) -> None:
    # The awaiting tick has already handled or timed out on this result
    if not task.cancelled() and task.exception() is not None:
        logger.debug("Late presence check failed: %s", task.exception())
