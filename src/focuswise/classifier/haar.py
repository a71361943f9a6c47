"""Presence classifier backed by OpenCV Haar cascades.

Runs entirely on-device: a frontal-face cascade, with an optional
profile-face cascade tried when no frontal face is found so a user
glancing sideways at notes still counts as present.
"""

from __future__ import annotations

import asyncio
import logging
import os

import cv2
import numpy as np

from focuswise.classifier.base import ClassifierLoadError, DetectionError, PresenceClassifier
from focuswise.domain.models import CapturedFrame, Detection
from focuswise.utils.imaging import resize_for_classifier, to_grayscale

logger = logging.getLogger(__name__)

PROFILE_CASCADE_FILE = "haarcascade_profileface.xml"


class HaarPresenceClassifier(PresenceClassifier):
    """Detects faces with cv2.CascadeClassifier in a thread pool."""

    def __init__(
        self,
        cascade_file: str = "haarcascade_frontalface_default.xml",
        profile_fallback: bool = True,
        scale_factor: float = 1.1,
        min_neighbors: int = 5,
        min_face_size: int = 60,
    ) -> None:
        super().__init__()
        self._cascade_file = cascade_file
        self._profile_fallback = profile_fallback
        self._scale_factor = scale_factor
        self._min_neighbors = min_neighbors
        self._min_face_size = min_face_size
        self._frontal: cv2.CascadeClassifier | None = None
        self._profile: cv2.CascadeClassifier | None = None

    @property
    def name(self) -> str:
        return "haar"

    async def load(self) -> None:
        """Load the cascade XML files."""
        if self._loaded:
            return
        loop = asyncio.get_running_loop()
        self._frontal = await loop.run_in_executor(
            None, _load_cascade, self._cascade_file
        )
        if self._profile_fallback:
            self._profile = await loop.run_in_executor(
                None, _load_cascade, PROFILE_CASCADE_FILE
            )
        self._loaded = True
        logger.info(
            "Loaded Haar cascade %s (profile fallback: %s)",
            self._cascade_file, self._profile_fallback,
        )

    async def detect(self, frame: CapturedFrame) -> Detection:
        """Return present=True if at least one face is found."""
        if not self._loaded:
            raise DetectionError("Classifier is not loaded", backend=self.name)
        loop = asyncio.get_running_loop()
        try:
            count = await loop.run_in_executor(None, self._detect_sync, frame.image)
        except cv2.error as e:
            raise DetectionError(f"Face detection failed: {e}", backend=self.name) from e
        return Detection(present=count > 0, face_count=count)

    def _detect_sync(self, image: np.ndarray) -> int:
        """Synchronous cascade evaluation (runs in thread pool)."""
        gray = to_grayscale(resize_for_classifier(image))
        min_size = (self._min_face_size, self._min_face_size)
        faces = self._frontal.detectMultiScale(
            gray,
            scaleFactor=self._scale_factor,
            minNeighbors=self._min_neighbors,
            minSize=min_size,
        )
        if len(faces) == 0 and self._profile is not None:
            faces = self._profile.detectMultiScale(
                gray,
                scaleFactor=self._scale_factor,
                minNeighbors=self._min_neighbors,
                minSize=min_size,
            )
        return len(faces)


def _load_cascade(filename: str) -> cv2.CascadeClassifier:
    """Load a cascade from a path, or by name from OpenCV's bundled data."""
    path = filename if os.path.isabs(filename) else os.path.join(cv2.data.haarcascades, filename)
    cascade = cv2.CascadeClassifier(path)
    if cascade.empty():
        raise ClassifierLoadError(f"Failed to load Haar cascade from {path}", backend="haar")
    return cascade
