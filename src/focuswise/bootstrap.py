"""Builds the focus-mode widget and its collaborators from Settings."""

from __future__ import annotations

import logging

from focuswise.archive.archive import ReportArchive
from focuswise.archive.store import JsonFileReportStore
from focuswise.capture.base import CaptureSource
from focuswise.classifier.base import PresenceClassifier
from focuswise.config.settings import Settings
from focuswise.session.widget import FocusModeWidget

logger = logging.getLogger(__name__)


def build_capture(settings: Settings) -> CaptureSource:
    from focuswise.capture.webcam import WebcamCapture

    resolution = None
    if settings.capture.resolution_width and settings.capture.resolution_height:
        resolution = (settings.capture.resolution_width, settings.capture.resolution_height)
    return WebcamCapture(device_index=settings.capture.device_index, resolution=resolution)


def build_classifier(settings: Settings) -> PresenceClassifier:
    cfg = settings.classifier
    if cfg.backend == "openai":
        from focuswise.classifier.openai import OpenAIPresenceClassifier

        return OpenAIPresenceClassifier(
            api_key=settings.openai_api_key.get_secret_value(),
            model=cfg.model,
            base_url=cfg.base_url,
            max_tokens=cfg.max_tokens,
            verify_on_load=cfg.verify_on_load,
        )

    from focuswise.classifier.haar import HaarPresenceClassifier

    return HaarPresenceClassifier(
        cascade_file=cfg.cascade_file,
        profile_fallback=cfg.profile_fallback,
        scale_factor=cfg.scale_factor,
        min_neighbors=cfg.min_neighbors,
        min_face_size=cfg.min_face_size,
    )


def build_archive(settings: Settings) -> ReportArchive:
    return ReportArchive(JsonFileReportStore(settings.archive.path, key=settings.archive.key))


def build_widget(settings: Settings) -> FocusModeWidget:
    """Wire a widget with the webcam, configured classifier and archive."""
    classifier = build_classifier(settings)
    logger.info("Using %s presence classifier", classifier.name)
    return FocusModeWidget(
        capture=build_capture(settings),
        classifier=classifier,
        archive=build_archive(settings),
        tick_interval=settings.session.tick_interval,
        detection_timeout=settings.session.detection_timeout,
        preset_minutes=settings.session.preset_minutes,
    )
