# FastAPI application factory with lifespan management.
# Entrypoint: uvicorn diorama.main:create_app --factory --host 0.0.0.0 --port 3001

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import httpx
import structlog
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from starlette.requests import Request
from starlette.responses import JSONResponse

from diorama.cache.resource_cache import PipelineCaches
from diorama.config import get_settings
from diorama.exceptions import register_exception_handlers
from diorama.logging_config import configure_logging
from diorama.middleware import REQUEST_ID_HEADER, RequestContextMiddleware
from diorama.pipeline.fallback_catalog import FallbackCatalog
from diorama.pipeline.styles import StyleRegistry
from diorama.providers import GeminiClient, GoogleMapsImagery
from diorama.rate_limit import GENERAL_LIMIT_MESSAGE, enforce_general_limit, limiter
from diorama.routes import cache as cache_routes
from diorama.routes import generate, health, imagery, leads, styles
from diorama.routes import prometheus as prometheus_routes
from diorama.services.generation_log import GenerationLogger
from diorama.services.generation_queue import GenerationQueue
from diorama.services.leads import LeadStore
from diorama.services.metrics import PipelineMetrics
from diorama.services.pipeline import PipelineOrchestrator

logger = structlog.get_logger(__name__)

DEFAULT_RETRY_AFTER_SECONDS = 60


def _retry_after(exc: RateLimitExceeded) -> str:
    """Window length of the limit that tripped, in seconds."""
    try:
        return str(int(exc.limit.limit.get_expiry()))
    except (AttributeError, TypeError, ValueError):
        return str(DEFAULT_RETRY_AFTER_SECONDS)


async def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return a structured JSON 429 consistent with DioramaError responses."""
    error_message = getattr(exc.limit, "error_message", None)
    message = error_message if isinstance(error_message, str) else GENERAL_LIMIT_MESSAGE
    logger.warning(
        "rate_limit_exceeded",
        path=request.url.path,
        method=request.method,
        limit=str(exc.detail),
    )
    return JSONResponse(
        status_code=429,
        content={"error": message, "type": "RateLimitExceeded"},
        headers={"Retry-After": _retry_after(exc)},
    )


if TYPE_CHECKING:
    from opentelemetry.sdk.trace import TracerProvider


def _configure_otel(exporter_type: str) -> "TracerProvider | None":
    """Configure OpenTelemetry tracing (console or gcp)."""
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor

    provider = TracerProvider()

    if exporter_type == "console":
        from opentelemetry.sdk.trace.export import ConsoleSpanExporter

        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
    elif exporter_type == "gcp":
        try:
            from opentelemetry.exporter.cloud_trace import CloudTraceSpanExporter

            provider.add_span_processor(BatchSpanProcessor(CloudTraceSpanExporter()))  # type: ignore[no-untyped-call]
        except ImportError:
            logger.warning("gcp_trace_exporter_not_available")
            return None
    else:
        logger.warning("unknown_otel_exporter", exporter=exporter_type)
        return None

    from opentelemetry import trace

    trace.set_tracer_provider(provider)
    logger.info("otel_configured", exporter=exporter_type)
    return provider


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build providers, caches, queue and loggers once; share them via app.state."""
    settings = get_settings()

    otel_provider = None
    otel_exporter = os.environ.get("OTEL_EXPORTER", "")
    if otel_exporter:
        otel_provider = _configure_otel(otel_exporter)

    if not settings.has_maps_key:
        logger.warning("maps_key_missing", hint="Street View and aerial imagery run in mock mode")
    if not settings.has_ai_key:
        logger.warning("ai_key_missing", hint="Vision and synthesis run in mock mode")

    http_client = httpx.AsyncClient(timeout=settings.provider_timeout_seconds)
    gemini = GeminiClient(
        settings.google_ai_api_key.get_secret_value(),
        timeout_seconds=settings.provider_timeout_seconds,
    )
    caches = PipelineCaches.create(
        street_view_size=settings.street_view_cache_size,
        aerial_size=settings.aerial_view_cache_size,
        identity_size=settings.identity_cache_size,
        ttl_seconds=settings.cache_ttl_seconds,
    )
    # Raises StyleCatalogError on a malformed table, before the port binds
    style_registry = StyleRegistry()
    queue = GenerationQueue(settings.max_concurrent_generations)
    generation_log = GenerationLogger(
        settings.generation_log_path,
        address_chars=settings.log_address_chars,
        error_chars=settings.log_error_chars,
    )
    fallback_catalog = FallbackCatalog.default(settings.gallery_base_url)
    metrics = PipelineMetrics()

    orchestrator = PipelineOrchestrator(
        settings,
        imagery=GoogleMapsImagery(settings.google_maps_api_key.get_secret_value(), http_client),
        vision=gemini,
        synthesis=gemini,
        caches=caches,
        styles=style_registry,
        queue=queue,
        generation_log=generation_log,
        fallback_catalog=fallback_catalog,
        metrics=metrics,
    )

    app.state.settings = settings
    app.state.caches = caches
    app.state.style_registry = style_registry
    app.state.generation_queue = queue
    app.state.generation_log = generation_log
    app.state.fallback_catalog = fallback_catalog
    app.state.lead_store = LeadStore(settings.leads_path)
    app.state.metrics = metrics
    app.state.pipeline_orchestrator = orchestrator

    logger.info(
        "server_ready",
        styles=len(style_registry),
        fallback_homes=len(fallback_catalog),
        max_concurrent_generations=settings.max_concurrent_generations,
    )

    yield

    await http_client.aclose()

    # Flush OTel spans before shutdown
    if otel_provider is not None:
        otel_provider.shutdown()


def _parse_origins(allowed_origins: str) -> list[str]:
    """Parse comma-separated CORS origins. Empty string → deny all."""
    if not allowed_origins.strip():
        logger.warning(
            "cors_no_origins_configured",
            hint="Set ALLOWED_ORIGINS env var. Cross-origin requests will be rejected.",
        )
        return []
    return [origin.strip() for origin in allowed_origins.split(",") if origin.strip()]


def create_app() -> FastAPI:
    """Application factory. Invoked by: uvicorn diorama.main:create_app --factory"""
    settings = get_settings()
    configure_logging(log_level=settings.log_level, json_output=settings.log_json)

    app = FastAPI(
        title="Diorama Generator",
        description="Address to AI-stylized house image",
        version="0.1.0",
        lifespan=lifespan,
        # General rate limit on every route
        dependencies=[Depends(enforce_general_limit)],
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]

    # Middleware order (Starlette applies in reverse): CORS → RequestContext
    app.add_middleware(RequestContextMiddleware)

    origins = _parse_origins(settings.allowed_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["POST", "GET", "OPTIONS"],
        allow_headers=["Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER, "Retry-After"],
    )

    register_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(generate.router, tags=["generate"])
    app.include_router(imagery.router, tags=["imagery"])
    app.include_router(leads.router, tags=["leads"])
    app.include_router(styles.router, tags=["styles"])
    app.include_router(cache_routes.router, tags=["cache"])
    app.include_router(prometheus_routes.router, tags=["prometheus"])

    return app
