# Core generation orchestrator: validate → coverage → imagery → identity → synthesis.
# Missing street-level coverage and privacy-blurred imagery route to the
# fallback catalog instead of synthesizing from nothing.


import asyncio
import base64
import binascii
import time
from dataclasses import dataclass, field
from typing import Any

import structlog
from opentelemetry import trace

from diorama.cache.resource_cache import PipelineCaches
from diorama.config import Settings
from diorama.exceptions import (
    DioramaError,
    FallbackUnavailableError,
    GenerationFailedError,
    InvalidAddressError,
    InvalidRequestError,
    SynthesisError,
    UnknownStyleError,
)
from diorama.pipeline.address import cache_key, describe_location, sanitize
from diorama.pipeline.fallback_catalog import FallbackCatalog
from diorama.pipeline.privacy import find_blur_phrase
from diorama.pipeline.prompts import (
    AERIAL_VIEW_ANALYSIS_PROMPT,
    GENERIC_IDENTITY,
    IDENTITY_EXTRACTION_PROMPT,
    MOCK_DESCRIPTION,
    SEMANTIC_DESCRIPTION_PROMPT,
    STREET_ONLY_ANALYSIS_PROMPT,
    STREET_VIEW_ANALYSIS_PROMPT,
    build_combine_prompt,
    build_generation_prompt,
    build_legacy_prompt,
)
from diorama.pipeline.styles import StyleDefinition, StyleRegistry
from diorama.providers.protocol import (
    ImageData,
    ImageryProvider,
    SynthesisProvider,
    VisionProvider,
)
from diorama.schemas import (
    FallbackHomeInfo,
    FallbackResponse,
    GeneratedImage,
    GenerateRequest,
    GenerateV2Response,
    ImageryFetchResponse,
    LegacyGenerateResponse,
    StreetViewImageResponse,
    VisionAnalyzeRequest,
    VisionAnalyzeResponse,
)
from diorama.services.generation_log import CacheFlags, GenerationLogEntry, GenerationLogger
from diorama.services.generation_queue import GenerationQueue
from diorama.services.metrics import PipelineMetrics

logger = structlog.get_logger(__name__)
tracer = trace.get_tracer(__name__)

FALLBACK_NO_STREET_VIEW = "no_street_view"
FALLBACK_BLURRED = "blurred_address"
FALLBACK_MODEL = "fallback"
MOCK_MODEL = "mock"

_FALLBACK_MESSAGES = {
    FALLBACK_NO_STREET_VIEW: (
        "Street View imagery isn't available for this address, so here is "
        "{name} ({location}) in the same style instead."
    ),
    FALLBACK_BLURRED: (
        "The imagery for this address is privacy-blurred, so here is "
        "{name} ({location}) in the same style instead."
    ),
}


@dataclass
class _Attempt:
    """Bookkeeping for one generation request, from validation to log entry."""

    address: str
    style: StyleDefinition
    key: str
    started: float = field(default_factory=time.perf_counter)
    cached: CacheFlags = field(default_factory=CacheFlags)
    cost: float = 0.0

    def elapsed_ms(self) -> int:
        return int((time.perf_counter() - self.started) * 1000)


@dataclass(frozen=True)
class AcquiredImagery:
    street_view: ImageData | None
    aerial: ImageData | None

    def as_list(self) -> list[ImageData]:
        return [img for img in (self.street_view, self.aerial) if img is not None]


def _to_generated_image(image: ImageData | None) -> GeneratedImage | None:
    if image is None:
        return None
    return GeneratedImage(
        base64=base64.b64encode(image.data).decode("ascii"),
        mime_type=image.mime_type,
    )


class PipelineOrchestrator:
    """Runs generation requests against injected providers, caches and queue."""

    def __init__(
        self,
        settings: Settings,
        *,
        imagery: ImageryProvider,
        vision: VisionProvider,
        synthesis: SynthesisProvider,
        caches: PipelineCaches,
        styles: StyleRegistry,
        queue: GenerationQueue,
        generation_log: GenerationLogger,
        fallback_catalog: FallbackCatalog,
        metrics: PipelineMetrics | None = None,
    ) -> None:
        self._settings = settings
        self._imagery = imagery
        self._vision = vision
        self._synthesis = synthesis
        self._caches = caches
        self._styles = styles
        self._queue = queue
        self._log = generation_log
        self._fallback_catalog = fallback_catalog
        self._metrics = metrics

    # ── Validation ───────────────────────────────────────────────────────

    def _require_address(self, raw: object) -> str:
        address = sanitize(raw, max_length=self._settings.max_address_length)
        if address is None:
            logger.info("address_rejected", length=len(raw) if isinstance(raw, str) else None)
            raise InvalidAddressError()
        return address

    def validate(self, request: GenerateRequest) -> tuple[str, StyleDefinition]:
        """Sanitize the address and resolve the style. Raises before any provider call."""
        address = self._require_address(request.address)
        style = self._styles.resolve(request.style_id)
        if style is None:
            raise UnknownStyleError(request.style_id, self._styles.list_ids())
        return address, style

    def _log_address(self, address: str) -> str:
        return address[: self._settings.log_address_chars]

    # ── /generate-v2 ─────────────────────────────────────────────────────

    async def generate_v2(self, request: GenerateRequest) -> GenerateV2Response | FallbackResponse:
        """Identity + reference pipeline with coverage and privacy fallbacks."""
        address, style = self.validate(request)
        attempt = _Attempt(address=address, style=style, key=cache_key(address))

        with tracer.start_as_current_span("generate_v2") as span:
            span.set_attribute("style_id", style.id)
            span.set_attribute("use_reference", style.use_reference)
            try:
                return await self._generate_v2_traced(attempt, span)
            except FallbackUnavailableError as e:
                await self._record_failure(attempt, e.message)
                raise
            except Exception as e:
                raise await self._fail(attempt, e) from e

    async def _generate_v2_traced(
        self, attempt: _Attempt, parent_span: trace.Span
    ) -> GenerateV2Response | FallbackResponse:
        logger.info(
            "generation_started",
            pipeline="v2",
            style=attempt.style.id,
            address=self._log_address(attempt.address),
        )

        # A cached street image already proves coverage
        street_hit = self._caches.street_view.get(attempt.key)
        if street_hit is None:
            with tracer.start_as_current_span("coverage_check"):
                available = await self._check_coverage(attempt.address)
            if available is False:
                parent_span.set_attribute("fallback", FALLBACK_NO_STREET_VIEW)
                return await self._fallback(attempt, FALLBACK_NO_STREET_VIEW)

        with tracer.start_as_current_span("acquire_imagery"):
            imagery = await self._acquire(attempt, street_hit, require_street=True)

        with tracer.start_as_current_span("extract_identity"):
            identity = await self._extract_identity(attempt, imagery)

        blur_phrase = find_blur_phrase(identity)
        if blur_phrase:
            logger.info(
                "privacy_blur_detected",
                phrase=blur_phrase,
                address=self._log_address(attempt.address),
            )
            parent_span.set_attribute("fallback", FALLBACK_BLURRED)
            return await self._fallback(attempt, FALLBACK_BLURRED)

        style_prompt = attempt.style.render_prompt(location=describe_location(attempt.address))
        prompt = build_generation_prompt(
            style_prompt, identity, use_reference=attempt.style.use_reference
        )
        with tracer.start_as_current_span("synthesize"):
            image, model = await self._synthesize(attempt, prompt, imagery)

        parent_span.set_attribute("model", model)
        parent_span.set_attribute("latency_ms", attempt.elapsed_ms())
        await self._record_success(attempt, model=model, mock=image is None)

        return GenerateV2Response(
            identity=identity,
            generated_image=_to_generated_image(image),
            mock=image is None,
            model=model,
        )

    # ── /generate (legacy dual analysis) ─────────────────────────────────

    async def generate_legacy(self, request: GenerateRequest) -> LegacyGenerateResponse:
        """Single-shot pipeline: dual image analysis, then synthesis from the description."""
        address, style = self.validate(request)
        attempt = _Attempt(address=address, style=style, key=cache_key(address))
        settings = self._settings

        with tracer.start_as_current_span("generate_legacy") as span:
            span.set_attribute("style_id", style.id)
            try:
                street_hit = self._caches.street_view.get(attempt.key)
                imagery = await self._acquire(attempt, street_hit, require_street=False)
                description = await self._describe(attempt, imagery)

                style_prompt = style.render_prompt(location=describe_location(address))
                prompt = build_legacy_prompt(style_prompt, description)
                image, model = await self._synthesize(attempt, prompt, imagery)
            except Exception as e:
                raise await self._fail(attempt, e) from e

            await self._record_success(attempt, model=model, mock=image is None)

        return LegacyGenerateResponse(
            street_view_url=self._imagery.street_view_url(address, settings.street_view_size),
            aerial_view_url=self._imagery.aerial_view_url(
                address, settings.aerial_view_size, settings.aerial_view_zoom
            ),
            semantic_description=description,
            prompt=prompt,
            generated_image=_to_generated_image(image),
            mock=image is None,
        )

    # ── Stages ───────────────────────────────────────────────────────────

    async def _check_coverage(self, address: str) -> bool | None:
        """True/False when the provider answered, None when coverage is unknown."""
        try:
            coverage = await self._imagery.check_coverage(address)
        except DioramaError as e:
            logger.warning("coverage_check_failed", error=e.message, proceeding=True)
            return None
        logger.debug("coverage_checked", status=coverage.status, available=coverage.available)
        return coverage.available

    async def _acquire(
        self, attempt: _Attempt, street_hit: ImageData | None, *, require_street: bool
    ) -> AcquiredImagery:
        """Street + aerial concurrently, each through its cache. Aerial failure is non-fatal."""
        settings = self._settings
        aerial_hit = self._caches.aerial.get(attempt.key)
        attempt.cached.street_view = street_hit is not None
        attempt.cached.aerial = aerial_hit is not None

        async def _street() -> ImageData:
            if street_hit is not None:
                return street_hit
            image = await self._imagery.fetch_street_view(attempt.address, settings.street_view_size)
            self._caches.street_view.set(attempt.key, image)
            attempt.cost += settings.cost_street_view
            return image

        async def _aerial() -> ImageData:
            if aerial_hit is not None:
                return aerial_hit
            image = await self._imagery.fetch_aerial_view(
                attempt.address, settings.aerial_view_size, settings.aerial_view_zoom
            )
            self._caches.aerial.set(attempt.key, image)
            attempt.cost += settings.cost_aerial_view
            return image

        street, aerial = await asyncio.gather(_street(), _aerial(), return_exceptions=True)

        if isinstance(aerial, BaseException):
            if not isinstance(aerial, Exception):
                raise aerial
            logger.warning("aerial_fetch_failed", error=str(aerial))
            aerial = None
        if isinstance(street, BaseException):
            if require_street or not isinstance(street, Exception):
                raise street
            logger.warning("street_view_fetch_failed", error=str(street))
            street = None

        logger.debug(
            "imagery_acquired",
            street_view=street is not None,
            aerial=aerial is not None,
            street_view_cached=attempt.cached.street_view,
            aerial_cached=attempt.cached.aerial,
        )
        return AcquiredImagery(street_view=street, aerial=aerial)

    async def _extract_identity(self, attempt: _Attempt, imagery: AcquiredImagery) -> str:
        cached = self._caches.identity.get(attempt.key)
        if cached is not None:
            attempt.cached.identity = True
            return cached

        if self._vision.is_mock:
            # Not cached: a real key later should get a real identity
            return GENERIC_IDENTITY

        identity = await self._vision.analyze(
            IDENTITY_EXTRACTION_PROMPT, imagery.as_list(), model=self._settings.vision_model
        )
        attempt.cost += self._settings.cost_identity
        self._caches.identity.set(attempt.key, identity)
        logger.info("identity_extracted", chars=len(identity), images=len(imagery.as_list()))
        return identity

    async def _describe(self, attempt: _Attempt, imagery: AcquiredImagery) -> str:
        """Legacy description: both views analyzed separately then merged, or street only."""
        if self._vision.is_mock or imagery.street_view is None:
            return GENERIC_IDENTITY

        model = self._settings.vision_model
        if imagery.aerial is None:
            attempt.cost += self._settings.cost_identity
            return await self._vision.analyze(
                STREET_ONLY_ANALYSIS_PROMPT, [imagery.street_view], model=model
            )

        street_text, aerial_text = await asyncio.gather(
            self._vision.analyze(STREET_VIEW_ANALYSIS_PROMPT, [imagery.street_view], model=model),
            self._vision.analyze(AERIAL_VIEW_ANALYSIS_PROMPT, [imagery.aerial], model=model),
        )
        combined = await self._vision.analyze(
            build_combine_prompt(street_text, aerial_text), [], model=model
        )
        attempt.cost += 3 * self._settings.cost_identity
        logger.info(
            "dual_analysis_complete",
            street_chars=len(street_text),
            aerial_chars=len(aerial_text),
            combined_chars=len(combined),
        )
        return combined

    async def _synthesize(
        self, attempt: _Attempt, prompt: str, imagery: AcquiredImagery
    ) -> tuple[ImageData | None, str]:
        """Primary model, then the fallback model, inside a single queue slot."""
        if self._synthesis.is_mock:
            logger.info("synthesis_mocked", style=attempt.style.id)
            return None, MOCK_MODEL

        references = imagery.as_list() if attempt.style.use_reference else []
        primary = self._settings.synthesis_model
        fallback = self._settings.synthesis_fallback_model

        async def _work() -> tuple[ImageData, str]:
            try:
                image = await self._synthesis.synthesize(prompt, references, model=primary)
                return image, primary
            except SynthesisError as e:
                if not fallback or fallback == primary:
                    raise
                logger.warning(
                    "synthesis_primary_failed",
                    model=primary,
                    fallback_model=fallback,
                    error=e.reason,
                )
                if self._metrics:
                    self._metrics.record_model_fallback()
                image = await self._synthesis.synthesize(prompt, references, model=fallback)
                return image, fallback

        image, model = await self._queue.add(_work)
        attempt.cost += self._settings.cost_synthesis
        return image, model

    async def _fallback(self, attempt: _Attempt, reason: str) -> FallbackResponse:
        home = self._fallback_catalog.select(attempt.key, attempt.style.id)
        image_url = home.image_for(attempt.style.id) if home else None
        if home is None or image_url is None:
            logger.info("fallback_unavailable", reason=reason, style=attempt.style.id)
            raise FallbackUnavailableError(attempt.style.id)

        logger.info("fallback_served", reason=reason, home=home.id, style=attempt.style.id)
        await self._write_entry(attempt, success=True, fallback=reason, model=FALLBACK_MODEL)
        if self._metrics:
            self._metrics.record_generation(
                "fallback",
                attempt.elapsed_ms(),
                cached=attempt.cached.model_dump(),
                cost=attempt.cost,
                fallback_reason=reason,
            )

        return FallbackResponse(
            no_street_view=reason == FALLBACK_NO_STREET_VIEW,
            blurred_address=reason == FALLBACK_BLURRED,
            message=_FALLBACK_MESSAGES[reason].format(name=home.name, location=home.location),
            fallback_home=FallbackHomeInfo(**home.to_dict()),
            generated_image=GeneratedImage(url=image_url, mime_type="image/png"),
        )

    # ── Logging ──────────────────────────────────────────────────────────

    async def _write_entry(
        self,
        attempt: _Attempt,
        *,
        success: bool,
        error: str | None = None,
        fallback: str | None = None,
        model: str | None = None,
    ) -> None:
        await self._log.log(
            GenerationLogEntry(
                address=attempt.address,
                style_id=attempt.style.id,
                success=success,
                duration_ms=attempt.elapsed_ms(),
                error=error,
                fallback=fallback,
                cached=attempt.cached,
                estimated_cost=round(attempt.cost, 4),
                model=model,
            )
        )

    async def _record_success(self, attempt: _Attempt, *, model: str, mock: bool) -> None:
        elapsed = attempt.elapsed_ms()
        logger.info(
            "generation_complete",
            style=attempt.style.id,
            model=model,
            mock=mock,
            time_ms=elapsed,
            estimated_cost=round(attempt.cost, 4),
            cached=attempt.cached.model_dump(),
        )
        await self._write_entry(attempt, success=True, model=model)
        if self._metrics:
            self._metrics.record_generation(
                "mock" if mock else "success",
                elapsed,
                cached=attempt.cached.model_dump(),
                cost=attempt.cost,
            )

    async def _record_failure(self, attempt: _Attempt, error: str) -> None:
        await self._write_entry(attempt, success=False, error=error)
        if self._metrics:
            self._metrics.record_generation(
                "failure",
                attempt.elapsed_ms(),
                cached=attempt.cached.model_dump(),
                cost=attempt.cost,
            )

    async def _fail(self, attempt: _Attempt, error: Exception) -> GenerationFailedError:
        """Log a failed generation and build the 500 to raise in its place."""
        details = error.message if isinstance(error, DioramaError) else str(error)
        logger.error(
            "generation_failed",
            style=attempt.style.id,
            address=self._log_address(attempt.address),
            error=details[: self._settings.log_error_chars],
            error_type=type(error).__name__,
            time_ms=attempt.elapsed_ms(),
        )
        await self._record_failure(attempt, details)
        return GenerationFailedError(details[: self._settings.log_error_chars])

    # ── Imagery + vision passthroughs ────────────────────────────────────

    async def street_view_metadata(self, raw_address: str) -> dict[str, Any]:
        address = self._require_address(raw_address)
        return await self._imagery.street_view_metadata(address)

    def street_view_image(
        self,
        raw_address: str,
        size: str,
        fov: int = 90,
        pitch: int = 10,
        heading: int | None = None,
    ) -> StreetViewImageResponse:
        address = self._require_address(raw_address)
        url = self._imagery.street_view_url(address, size, fov=fov, pitch=pitch, heading=heading)
        return StreetViewImageResponse(url=url, mock=self._imagery.is_mock)

    async def fetch_street_view(self, raw_address: str, size: str) -> ImageryFetchResponse:
        address = self._require_address(raw_address)
        if self._imagery.is_mock:
            return ImageryFetchResponse(
                base64=None, mock=True, message="Street View API key not configured"
            )
        image = await self._imagery.fetch_street_view(address, size)
        return ImageryFetchResponse(
            base64=base64.b64encode(image.data).decode("ascii"),
            mime_type=image.mime_type,
            mock=False,
        )

    async def fetch_aerial_view(self, raw_address: str, size: str, zoom: int) -> ImageryFetchResponse:
        address = self._require_address(raw_address)
        if self._imagery.is_mock:
            return ImageryFetchResponse(
                base64=None, mock=True, message="Maps API key not configured"
            )
        image = await self._imagery.fetch_aerial_view(address, size, zoom)
        return ImageryFetchResponse(
            base64=base64.b64encode(image.data).decode("ascii"),
            mime_type=image.mime_type,
            mock=False,
        )

    async def analyze_image(self, request: VisionAnalyzeRequest) -> VisionAnalyzeResponse:
        """Free-form semantic description of one uploaded image."""
        try:
            data = base64.b64decode(request.image_base64, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidRequestError("imageBase64 is not valid base64") from e

        if self._vision.is_mock:
            return VisionAnalyzeResponse(description=MOCK_DESCRIPTION, mock=True)

        with tracer.start_as_current_span("vision_analyze"):
            description = await self._vision.analyze(
                SEMANTIC_DESCRIPTION_PROMPT,
                [ImageData(data=data, mime_type=request.mime_type)],
                model=self._settings.vision_model,
            )
        return VisionAnalyzeResponse(description=description, mock=False)
