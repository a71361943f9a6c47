"""Vision Capture module for focuswise.

Provides webcam frame capture for the focus session sampler. The abstract
base class allows alternative capture implementations (e.g., file-based
test sources).

Public API:
    CaptureSource -- Abstract base class
    WebcamCapture -- OpenCV webcam implementation
"""

from focuswise.capture.base import CaptureSource, CaptureError

__all__ = ["CaptureSource", "CaptureError", "WebcamCapture"]


def __getattr__(name: str) -> type:
    """Lazy import for concrete implementations that require external deps."""
    if name == "WebcamCapture":
        from focuswise.capture.webcam import WebcamCapture
        return WebcamCapture
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
