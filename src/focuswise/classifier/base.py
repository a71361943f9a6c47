"""Abstract base class for presence classifiers.

All classifier implementations must conform to this interface, enabling
the session to swap between a local cascade and a remote vision model
without changing the rest of the pipeline.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from focuswise.domain.models import CapturedFrame, Detection

logger = logging.getLogger(__name__)


class PresenceClassifier(ABC):
    """Abstract interface for face-presence classifiers.

    ``load()`` is a one-time asynchronous initialization that must finish
    before a session may start. ``detect()`` is called at most once per
    tick with the frame sampled for that tick.
    """

    def __init__(self) -> None:
        self._loaded = False

    @property
    def is_loaded(self) -> bool:
        """Whether load() has completed successfully."""
        return self._loaded

    @property
    @abstractmethod
    def name(self) -> str:
        """Short backend identifier used in logs."""
        ...

    @abstractmethod
    async def load(self) -> None:
        """Load the underlying model.

        Raises:
            ClassifierLoadError: If the model cannot be loaded. This is a
                                 configuration-time failure; no session can
                                 start without a loaded classifier.
        """
        ...

    @abstractmethod
    async def detect(self, frame: CapturedFrame) -> Detection:
        """Classify one frame.

        Raises:
            DetectionError: If this frame could not be classified. Callers
                            treat it as an absent verdict for the tick.
        """
        ...


class ClassifierLoadError(Exception):
    """Raised when a classifier model fails to load."""

    def __init__(self, message: str, backend: str = "") -> None:
        super().__init__(message)
        self.backend = backend


class DetectionError(Exception):
    """Raised when classifying a single frame fails."""

    def __init__(self, message: str, backend: str = "", raw_response: str = "") -> None:
        super().__init__(message)
        self.backend = backend
        self.raw_response = raw_response
