"""Presence classifier module for focuswise.

Isolates the focus session from the specific face/presence model. Each
backend answers one question per sampled frame: is the user in view?

Public API:
    PresenceClassifier -- Abstract base class
    HaarPresenceClassifier -- OpenCV Haar cascade implementation
    OpenAIPresenceClassifier -- OpenAI-compatible vision model implementation
"""

from focuswise.classifier.base import (
    ClassifierLoadError,
    DetectionError,
    PresenceClassifier,
)

__all__ = [
    "ClassifierLoadError",
    "DetectionError",
    "HaarPresenceClassifier",
    "OpenAIPresenceClassifier",
    "PresenceClassifier",
]


def __getattr__(name: str) -> type:
    """Lazy import for concrete implementations that require external deps."""
    if name == "HaarPresenceClassifier":
        from focuswise.classifier.haar import HaarPresenceClassifier
        return HaarPresenceClassifier
    if name == "OpenAIPresenceClassifier":
        from focuswise.classifier.openai import OpenAIPresenceClassifier
        return OpenAIPresenceClassifier
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
