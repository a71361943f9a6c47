"""Tests for the abstract CaptureSource base class."""

from __future__ import annotations

import pytest

from focuswise.capture.base import CaptureError, CaptureSource


class TestCaptureSource:
    """Test the CaptureSource abstract interface."""

    def test_cannot_instantiate_abstract(self) -> None:
        """CaptureSource should not be instantiable directly."""
        with pytest.raises(TypeError):
            CaptureSource()  # type: ignore[abstract]

    @pytest.mark.asyncio
    async def test_context_manager_opens_and_closes(self, fake_capture) -> None:
        async with fake_capture as capture:
            assert capture.is_open is True
            frame = await capture.capture_frame()
            assert frame.frame_number == 1
        assert fake_capture.is_open is False
        assert fake_capture.close_calls == 1

    @pytest.mark.asyncio
    async def test_capture_when_closed_raises(self, fake_capture) -> None:
        with pytest.raises(CaptureError):
            await fake_capture.capture_frame()
