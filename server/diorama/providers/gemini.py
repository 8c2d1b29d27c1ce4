# Gemini vision + image synthesis via the google-genai async client.
# One client serves both capabilities; without an API key it reports is_mock
# and the pipeline substitutes canned output instead of calling it.

from __future__ import annotations

import base64
from collections.abc import Sequence
from typing import Any

import structlog
from google import genai
from google.genai import types

from diorama.exceptions import SynthesisError, VisionError
from diorama.providers.protocol import ImageData

logger = structlog.get_logger(__name__)


def _to_parts(prompt: str, images: Sequence[ImageData]) -> list[Any]:
    parts: list[Any] = [prompt]
    parts.extend(types.Part.from_bytes(data=img.data, mime_type=img.mime_type) for img in images)
    return parts


def _pick_inline_image(response: Any) -> ImageData | None:
    """First inline image across all candidates, or None."""
    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        for part in getattr(content, "parts", None) or []:
            inline = getattr(part, "inline_data", None)
            raw = getattr(inline, "data", None)
            if not raw:
                continue
            data = base64.b64decode(raw) if isinstance(raw, str) else bytes(raw)
            mime_type = getattr(inline, "mime_type", None) or "image/png"
            return ImageData(data=data, mime_type=mime_type)
    return None


class GeminiClient:
    """VisionProvider and SynthesisProvider backed by the Gemini API."""

    def __init__(
        self,
        api_key: str,
        *,
        timeout_seconds: float = 60.0,
        client: genai.Client | None = None,
    ) -> None:
        if client is None and api_key:
            # google-genai expects the timeout in milliseconds
            client = genai.Client(
                api_key=api_key,
                http_options=types.HttpOptions(timeout=int(timeout_seconds * 1000)),
            )
        self._client = client

    @property
    def is_mock(self) -> bool:
        return self._client is None

    async def analyze(self, prompt: str, images: Sequence[ImageData], *, model: str) -> str:
        """Describe the images according to the prompt. Raises VisionError."""
        if self._client is None:
            raise VisionError("Google AI API key not configured")

        log = logger.bind(model=model, images=len(images))
        try:
            response = await self._client.aio.models.generate_content(
                model=model,
                contents=_to_parts(prompt, images),
            )
        except Exception as e:
            log.warning("vision_call_failed", error=str(e))
            raise VisionError(str(e)) from e

        text = (getattr(response, "text", None) or "").strip()
        if not text:
            raise VisionError("empty analysis response")
        return text

    async def synthesize(
        self, prompt: str, images: Sequence[ImageData], *, model: str
    ) -> ImageData:
        """Generate one image. Raises SynthesisError if the call fails or has no image."""
        if self._client is None:
            raise SynthesisError("Google AI API key not configured")

        log = logger.bind(model=model, reference_images=len(images))
        config = types.GenerateContentConfig(
            response_modalities=[types.Modality.TEXT, types.Modality.IMAGE],
        )
        try:
            response = await self._client.aio.models.generate_content(
                model=model,
                contents=_to_parts(prompt, images),
                config=config,
            )
        except Exception as e:
            log.warning("synthesis_call_failed", error=str(e))
            raise SynthesisError(str(e)) from e

        picked = _pick_inline_image(response)
        if picked is None:
            candidates = getattr(response, "candidates", None) or []
            finish_reason = (
                getattr(candidates[0], "finish_reason", "UNKNOWN") if candidates else "NO_CANDIDATES"
            )
            log.warning("synthesis_no_image", finish_reason=str(finish_reason))
            raise SynthesisError(f"no image in response (finish reason: {finish_reason})")

        log.info("synthesis_complete", bytes=len(picked.data), mime=picked.mime_type)
        return picked
