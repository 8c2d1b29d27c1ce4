# ─────────────────────────────────────────────────────────────────────────────
# Pydantic v2 Request / Response Schemas
# ─────────────────────────────────────────────────────────────────────────────
# Wire format is camelCase (the browser client's convention); Python
# attributes stay snake_case. FastAPI serializes response_model by alias.
# ─────────────────────────────────────────────────────────────────────────────


from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Generation ───────────────────────────────────────────────────────────────


class GenerateRequest(CamelModel):
    """Incoming request to stylize the house at an address.

    The address is only required to be non-empty here; sanitize() in the
    orchestrator truncates it and decides whether it is acceptable. styleId
    is looked up in the registry. Old clients still send
    stylePrompt/useReference; extra fields are dropped and never forwarded.
    """

    address: str = Field(..., min_length=1)
    style_id: str = Field(..., min_length=1, max_length=100)


class GeneratedImage(CamelModel):
    """Either inline image data (fresh synthesis) or a URL (fallback catalog)."""

    base64: str | None = None
    mime_type: str = "image/png"
    url: str | None = None


class FallbackHomeInfo(CamelModel):
    id: str
    name: str
    location: str


class GenerateV2Response(CamelModel):
    success: bool = True
    identity: str
    generated_image: GeneratedImage | None
    mock: bool
    model: str


class FallbackResponse(CamelModel):
    """Returned with 200 when the address could not be rendered directly."""

    success: bool = True
    no_street_view: bool = False
    blurred_address: bool = False
    message: str
    fallback_home: FallbackHomeInfo
    generated_image: GeneratedImage
    model: Literal["fallback"] = "fallback"


class LegacyGenerateResponse(CamelModel):
    success: bool = True
    street_view_url: str
    aerial_view_url: str
    semantic_description: str
    prompt: str
    generated_image: GeneratedImage | None
    mock: bool


# ── Imagery + vision ─────────────────────────────────────────────────────────


class StreetViewImageResponse(CamelModel):
    url: str
    mock: bool


class ImageryFetchResponse(CamelModel):
    base64: str | None
    mime_type: str | None = None
    mock: bool
    message: str | None = None


class VisionAnalyzeRequest(CamelModel):
    image_base64: str = Field(..., min_length=1)
    mime_type: str = Field("image/jpeg", pattern=r"^image/[a-z0-9.+-]+$")


class VisionAnalyzeResponse(CamelModel):
    description: str
    mock: bool


# ── Leads ────────────────────────────────────────────────────────────────────


class CaptureEmailRequest(CamelModel):
    email: str = Field(..., min_length=3, max_length=254)
    address: str | None = Field(None, max_length=1000)
    timestamp: str | None = Field(None, max_length=64)

    @field_validator("email")
    @classmethod
    def email_must_look_valid(cls, v: str) -> str:
        v = v.strip()
        local, sep, domain = v.rpartition("@")
        if not sep or not local or "." not in domain or " " in v:
            raise ValueError("Invalid email address")
        return v


class CaptureEmailResponse(CamelModel):
    success: bool = True


# ── Health / ops ─────────────────────────────────────────────────────────────


class QueueInfo(CamelModel):
    running: int
    queued: int


class CacheSizes(CamelModel):
    street_view: int
    aerial: int
    identity: int


class HealthResponse(CamelModel):
    """Liveness plus provider-key and capacity status. No I/O."""

    status: str = "ok"
    has_street_view_key: bool
    # Acronym stays upper-case on the wire
    has_google_ai_key: bool = Field(..., alias="hasGoogleAIKey")
    queue: QueueInfo
    cache: CacheSizes


class ClearCacheResponse(CamelModel):
    success: bool = True
    message: str


class StyleInfo(CamelModel):
    id: str
    display_name: str
    use_reference: bool
    has_fallback: bool


class StylesResponse(CamelModel):
    styles: list[StyleInfo]


class ErrorResponse(CamelModel):
    error: str
    type: str | None = None
    details: Any = None
