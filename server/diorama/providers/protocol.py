# ─────────────────────────────────────────────────────────────────────────────
# Provider Protocols — runtime_checkable capability interfaces
# ─────────────────────────────────────────────────────────────────────────────
# The pipeline only talks to these four capabilities:
#   fetch street-level image for address   → ImageryProvider
#   fetch aerial image for address          → ImageryProvider
#   analyze image → text                    → VisionProvider
#   synthesize image from text + images     → SynthesisProvider
# Real implementations live in maps.py and gemini.py; tests pass fakes.
# ─────────────────────────────────────────────────────────────────────────────

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class ImageData:
    """Raw image bytes plus their MIME type."""

    data: bytes
    mime_type: str = "image/jpeg"


@dataclass(frozen=True)
class CoverageResult:
    """Street-level imagery availability for an address."""

    status: str
    available: bool
    metadata: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class ImageryProvider(Protocol):
    """Street-level and aerial imagery for a postal address (e.g., Google Maps)."""

    @property
    def is_mock(self) -> bool: ...

    async def street_view_metadata(self, address: str) -> dict[str, Any]: ...

    async def check_coverage(self, address: str) -> CoverageResult: ...

    def street_view_url(
        self,
        address: str,
        size: str,
        fov: int = 90,
        pitch: int = 10,
        heading: int | None = None,
    ) -> str: ...

    def aerial_view_url(self, address: str, size: str, zoom: int) -> str: ...

    async def fetch_street_view(self, address: str, size: str) -> ImageData: ...

    async def fetch_aerial_view(self, address: str, size: str, zoom: int) -> ImageData: ...


@runtime_checkable
class VisionProvider(Protocol):
    """Describes images as text (e.g., Gemini Flash)."""

    @property
    def is_mock(self) -> bool: ...

    async def analyze(self, prompt: str, images: Sequence[ImageData], *, model: str) -> str: ...


@runtime_checkable
class SynthesisProvider(Protocol):
    """Generates an image from a prompt plus optional reference images."""

    @property
    def is_mock(self) -> bool: ...

    async def synthesize(
        self, prompt: str, images: Sequence[ImageData], *, model: str
    ) -> ImageData: ...
