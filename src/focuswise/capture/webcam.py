"""Webcam capture implementation using OpenCV."""

from __future__ import annotations

import asyncio
import logging
import threading
from datetime import datetime

import cv2
import numpy as np

from focuswise.capture.base import CaptureError, CaptureSource
from focuswise.domain.models import CapturedFrame

logger = logging.getLogger(__name__)


class WebcamCapture(CaptureSource):
    """Video-only webcam stream read through cv2.VideoCapture.

    All blocking OpenCV calls run in the default thread pool. A lock
    serializes reads against release so the device is never freed while
    a frame is being read.

    Args:
        device_index: OpenCV camera index.
        resolution: Requested (width, height). The driver may pick the
                    closest mode it supports.
    """

    def __init__(
        self,
        device_index: int = 0,
        resolution: tuple[int, int] | None = None,
    ) -> None:
        super().__init__()
        self._device_index = device_index
        self._resolution = resolution
        self._cap: cv2.VideoCapture | None = None
        self._lock = threading.Lock()

    @property
    def source_name(self) -> str:
        return f"webcam:{self._device_index}"

    async def open(self) -> None:
        """Acquire the camera; this is the permission step of a session start."""
        loop = asyncio.get_running_loop()
        self._cap = await loop.run_in_executor(None, self._open_sync)
        self._frame_counter = 0
        self._is_open = True

    def _open_sync(self) -> cv2.VideoCapture:
        cap = cv2.VideoCapture(self._device_index)
        if not cap.isOpened():
            cap.release()
            raise CaptureError(
                f"Camera device {self._device_index} is unavailable or access was denied"
            )
        if self._resolution:
            width, height = self._resolution
            cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
            cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
        logger.info(
            "Camera %s acquired at %dx%d",
            self.source_name,
            int(cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
            int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
        )
        return cap

    async def close(self) -> None:
        """Stop the stream. A no-op when nothing is held."""
        self._is_open = False
        if self._cap is None:
            return
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._release_sync)

    def _release_sync(self) -> None:
        with self._lock:
            cap, self._cap = self._cap, None
            if cap is not None and cap.isOpened():
                cap.release()
                logger.info("Camera %s released", self.source_name)

    async def capture_frame(self) -> CapturedFrame:
        """Read the current frame of the open stream."""
        if not self._is_open:
            raise CaptureError(f"Camera {self.source_name} is not open")
        loop = asyncio.get_running_loop()
        image = await loop.run_in_executor(None, self._read_sync)
        self._frame_counter += 1
        return CapturedFrame(
            image=image,
            timestamp=datetime.now(),
            frame_number=self._frame_counter,
            source_device=self.source_name,
        )

    def _read_sync(self) -> np.ndarray:
        with self._lock:
            if self._cap is None:
                raise CaptureError(f"Camera {self.source_name} was released during capture")
            ok, image = self._cap.read()
        if not ok or image is None:
            raise CaptureError(f"No frame available from {self.source_name}")
        return image
