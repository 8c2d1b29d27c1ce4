"""Provider wrappers — capability Protocols plus Google Maps and Gemini clients."""

from diorama.providers.gemini import GeminiClient
from diorama.providers.maps import GoogleMapsImagery
from diorama.providers.protocol import (
    CoverageResult,
    ImageData,
    ImageryProvider,
    SynthesisProvider,
    VisionProvider,
)

__all__ = [
    "CoverageResult",
    "GeminiClient",
    "GoogleMapsImagery",
    "ImageData",
    "ImageryProvider",
    "SynthesisProvider",
    "VisionProvider",
]
