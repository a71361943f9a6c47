"""Core domain models for the focuswise system.

These models represent the data flowing through a focus session: frames
captured from the webcam, presence verdicts from the classifier, the
mutable session record updated once per tick, the immutable snapshots
handed to the presentation layer, and the durable report archived when
the session ends.
"""

from __future__ import annotations

import enum
from datetime import datetime

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class SessionState(str, enum.Enum):
    """Lifecycle state of the focus-mode widget."""

    IDLE = "idle"
    CONFIGURING = "configuring"  # Duration picker shown, classifier loading
    RUNNING = "running"  # Ticker active, camera held
    FINISHED = "finished"  # Report view shown


# ---------------------------------------------------------------------------
# Vision / Capture Models
# ---------------------------------------------------------------------------


class CapturedFrame(BaseModel):
    """A single frame captured from the webcam.

    Contains the raw image data as a numpy array along with metadata
    about when and how it was captured.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    image: np.ndarray = Field(description="Raw image data as BGR numpy array (OpenCV format)")
    timestamp: datetime = Field(default_factory=datetime.now, description="When the frame was captured")
    frame_number: int = Field(ge=0, description="Sequential frame counter")
    source_device: str = Field(default="webcam", description="Identifier for the capture device")


class Detection(BaseModel):
    """Presence verdict for one sampled frame."""

    model_config = ConfigDict(frozen=True)

    present: bool = Field(description="Whether a face was found in the frame")
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    face_count: int | None = Field(default=None, ge=0)


# ---------------------------------------------------------------------------
# Session Models
# ---------------------------------------------------------------------------


class Session(BaseModel):
    """Mutable record of one running focus session.

    Owned exclusively by a single widget and updated in place by the
    ticker, once per tick. The presentation layer never sees this object
    directly; it reads a SessionSnapshot instead.
    """

    planned_seconds: int = Field(ge=0, description="Requested session length")
    elapsed_seconds: int = Field(default=0, ge=0)
    remaining_seconds: int = Field(default=0, ge=0)
    distracted_seconds: int = Field(default=0, ge=0)
    distraction_events: int = Field(default=0, ge=0)
    is_currently_distracted: bool = False
    live_focus_score: int = Field(default=100, ge=0, le=100)
    # Latched while an absence run is in progress; cleared on the next
    # present tick so one run counts as one event.
    in_distraction_episode: bool = False
    started_at: datetime = Field(default_factory=datetime.now)


class SessionSnapshot(BaseModel):
    """Immutable view of the widget for the presentation layer."""

    model_config = ConfigDict(frozen=True)

    state: SessionState
    elapsed_seconds: int = 0
    remaining_seconds: int = 0
    distracted_seconds: int = 0
    distraction_events: int = 0
    is_currently_distracted: bool = False
    live_focus_score: int = 100
    classifier_loaded: bool = False
    minimized: bool = False
    error: str | None = None
    warning: str | None = None


# ---------------------------------------------------------------------------
# Report Models
# ---------------------------------------------------------------------------


class FinalTotals(BaseModel):
    """End-of-session numbers copied unchanged into a FocusReport."""

    model_config = ConfigDict(frozen=True)

    duration: int = Field(ge=0)
    focus_score: int = Field(ge=0, le=100)
    distractions: int = Field(ge=0)
    distraction_seconds: int = Field(ge=0)


class FocusReport(BaseModel):
    """Durable summary of a completed session.

    Serialized with the camelCase field names used by the report list on
    disk. Records written before distraction time was tracked load with
    ``distractionSeconds`` of zero.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(description="ISO-8601 creation timestamp")
    date: str = Field(description="Human-readable creation time")
    duration: int = Field(ge=0, description="Total elapsed seconds")
    focus_score: int = Field(alias="focusScore", ge=0, le=100)
    distractions: int = Field(ge=0, description="Number of distraction episodes")
    distraction_seconds: int = Field(default=0, alias="distractionSeconds", ge=0)

    @model_validator(mode="after")
    def _check_distraction_within_duration(self) -> FocusReport:
        if self.distraction_seconds > self.duration:
            raise ValueError(
                f"distractionSeconds ({self.distraction_seconds}) exceeds "
                f"duration ({self.duration})"
            )
        return self

    def to_record(self) -> dict:
        """Serialize to the on-disk record shape."""
        return self.model_dump(by_alias=True)
