"""Image processing utilities for focuswise.

Shared image encoding, conversion, and preprocessing functions used
by the classifier backends and the preview endpoint.
"""

from __future__ import annotations

import base64
import logging

import cv2
import numpy as np

logger = logging.getLogger(__name__)


def encode_jpeg(image: np.ndarray, quality: int = 80) -> bytes:
    """Encode a numpy image array (BGR, OpenCV format) as JPEG bytes."""
    success, buffer = cv2.imencode(".jpg", image, [cv2.IMWRITE_JPEG_QUALITY, quality])
    if not success:
        raise ValueError("Failed to encode image to JPEG")
    return buffer.tobytes()


def numpy_to_base64_jpeg(image: np.ndarray, quality: int = 80) -> str:
    """Convert a numpy image array (BGR) to a base64 JPEG string."""
    return base64.b64encode(encode_jpeg(image, quality)).decode("utf-8")


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """Convert a BGR frame to an equalized grayscale image for detection.

    Single-channel input is passed through the equalizer unchanged.
    """
    if image.ndim == 3:
        gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    else:
        gray = image
    return cv2.equalizeHist(gray)


def resize_for_classifier(image: np.ndarray, max_dimension: int = 640) -> np.ndarray:
    """Downscale an image so its largest side is at most max_dimension.

    Preserves aspect ratio. Smaller images are returned unchanged.
    """
    h, w = image.shape[:2]
    largest = max(h, w)
    if largest <= max_dimension:
        return image
    scale = max_dimension / largest
    new_w = int(w * scale)
    new_h = int(h * scale)
    return cv2.resize(image, (new_w, new_h), interpolation=cv2.INTER_AREA)
