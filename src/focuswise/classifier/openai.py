"""OpenAI-compatible presence classifier implementation.

Works with OpenAI, OpenRouter, and any OpenAI-compatible API by setting
a custom base_url. Each sampled frame is sent to a vision model that
answers with a small JSON verdict.
"""

from __future__ import annotations

import json
import logging
import re

from focuswise.classifier.base import ClassifierLoadError, DetectionError, PresenceClassifier
from focuswise.domain.models import CapturedFrame, Detection
from focuswise.utils.imaging import numpy_to_base64_jpeg, resize_for_classifier

logger = logging.getLogger(__name__)


DEFAULT_SYSTEM_PROMPT = """You are a webcam presence checker for a study timer.

You are given one webcam frame. Decide whether a person's face is visible and
turned roughly toward the screen.

Respond ONLY with valid JSON in the following format (no markdown, no explanation):
{"face_present": true | false, "confidence": 0.0 to 1.0}
"""


class OpenAIPresenceClassifier(PresenceClassifier):
    """Presence classifier using OpenAI's chat completions vision API."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        max_tokens: int = 64,
        verify_on_load: bool = True,
        system_prompt: str | None = None,
    ) -> None:
        super().__init__()
        self._api_key = api_key
        self._model = model
        self._base_url = base_url
        self._max_tokens = max_tokens
        self._verify_on_load = verify_on_load
        self._system_prompt = system_prompt or DEFAULT_SYSTEM_PROMPT
        self._client = None

    @property
    def name(self) -> str:
        return "openai"

    @property
    def model(self) -> str:
        return self._model

    async def load(self) -> None:
        """Create the API client and optionally verify the credentials."""
        if self._loaded:
            return
        if not self._api_key:
            raise ClassifierLoadError("OpenAI API key is not configured", backend=self.name)
        from openai import AsyncOpenAI

        kwargs = {"api_key": self._api_key}
        if self._base_url:
            kwargs["base_url"] = self._base_url
        self._client = AsyncOpenAI(**kwargs)

        if self._verify_on_load:
            try:
                await self._client.models.list()
            except Exception as e:
                self._client = None
                raise ClassifierLoadError(
                    f"Vision API is not reachable: {e}", backend=self.name
                ) from e

        self._loaded = True
        logger.info("Initialized OpenAI classifier (model=%s, base_url=%s)", self._model, self._base_url)

    async def detect(self, frame: CapturedFrame) -> Detection:
        """Ask the vision model whether a face is in the frame."""
        if not self._loaded or self._client is None:
            raise DetectionError("Classifier is not loaded", backend=self.name)
        b64_image = numpy_to_base64_jpeg(resize_for_classifier(frame.image))

        messages = [
            {"role": "system", "content": self._system_prompt},
            {
                "role": "user",
                "content": [
                    {
                        "type": "image_url",
                        "image_url": {
                            "url": f"data:image/jpeg;base64,{b64_image}",
                            "detail": "low",
                        },
                    },
                    {"type": "text", "text": "Is a face visible in this frame?"},
                ],
            },
        ]

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                max_tokens=self._max_tokens,
                messages=messages,
            )
        except Exception as e:
            raise DetectionError(f"OpenAI API call failed: {e}", backend=self.name) from e

        raw_text = response.choices[0].message.content or ""
        logger.debug("Presence raw response: %s", raw_text[:200])
        return self._parse_response(raw_text)

    def _parse_response(self, raw_response: str) -> Detection:
        """Parse a raw model reply into a Detection."""
        json_str = raw_response.strip()

        # Remove markdown code block if present
        match = re.search(r"```(?:json)?\s*(.*?)```", json_str, re.DOTALL)
        if match:
            json_str = match.group(1).strip()

        brace_match = re.search(r"\{.*\}", json_str, re.DOTALL)
        if brace_match:
            json_str = brace_match.group(0)

        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise DetectionError(
                "Failed to parse presence response as JSON",
                backend=self.name,
                raw_response=raw_response,
            ) from e

        present = data.get("face_present") if isinstance(data, dict) else None
        if not isinstance(present, bool):
            raise DetectionError(
                "Presence response has no boolean face_present field",
                backend=self.name,
                raw_response=raw_response,
            )

        confidence = None
        try:
            if data.get("confidence") is not None:
                confidence = max(0.0, min(1.0, float(data["confidence"])))
        except (TypeError, ValueError):
            logger.debug("Ignoring non-numeric confidence: %r", data.get("confidence"))

        return Detection(present=present, confidence=confidence)
