"""Camera source interface used by the focus session sampler.

The widget acquires a source when a session starts and releases it when
the session ends, so a source only has to support one holder at a time.
Tests plug in an in-memory source in place of the webcam.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from focuswise.domain.models import CapturedFrame

logger = logging.getLogger(__name__)


class CaptureSource(ABC):
    """A camera that can be acquired, read frame by frame, and released.

    Opening the source is the camera-permission step of session start;
    closing it stops the stream.

    Example usage::

        async with WebcamCapture(device_index=0) as camera:
            frame = await camera.capture_frame()
    """

    def __init__(self) -> None:
        self._frame_counter = 0
        self._is_open = False

    @property
    def is_open(self) -> bool:
        """True between a successful open() and the next close()."""
        return self._is_open

    @abstractmethod
    async def open(self) -> None:
        """Acquire the camera.

        Raises:
            CaptureError: No camera, permission denied, or device busy.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release the camera.

        Idempotent, and safe on a source that was never opened.
        """
        ...

    @abstractmethod
    async def capture_frame(self) -> CapturedFrame:
        """Read one frame from the open stream.

        Raises:
            CaptureError: The source is closed or the read failed.
        """
        ...

    async def __aenter__(self) -> CaptureSource:
        await self.open()
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        await self.close()


class CaptureError(Exception):
    """Raised when the camera cannot be opened or a frame cannot be read."""
