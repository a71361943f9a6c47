"""Tests for the presence classifier base class."""

from __future__ import annotations

import pytest

from focuswise.classifier.base import ClassifierLoadError, DetectionError, PresenceClassifier


class TestPresenceClassifier:
    """Test the abstract classifier interface."""

    def test_cannot_instantiate_abstract(self) -> None:
        with pytest.raises(TypeError):
            PresenceClassifier()  # type: ignore[abstract]

    @pytest.mark.asyncio
    async def test_loaded_after_load(self, make_classifier) -> None:
        classifier = make_classifier()
        assert classifier.is_loaded is False
        await classifier.load()
        assert classifier.is_loaded is True

    @pytest.mark.asyncio
    async def test_failed_load_stays_unloaded(self, make_classifier) -> None:
        classifier = make_classifier(fail_load=True)
        with pytest.raises(ClassifierLoadError):
            await classifier.load()
        assert classifier.is_loaded is False


class TestErrors:
    def test_detection_error_keeps_raw_response(self) -> None:
        err = DetectionError("bad", backend="openai", raw_response="nope")
        assert str(err) == "bad"
        assert err.backend == "openai"
        assert err.raw_response == "nope"

    def test_load_error_backend(self) -> None:
        assert ClassifierLoadError("missing", backend="haar").backend == "haar"
