# ─────────────────────────────────────────────────────────────────────────────
# Dependency Injection — FastAPI Depends() providers
# ─────────────────────────────────────────────────────────────────────────────
# State flows: lifespan creates → app.state stores → Depends() injects.
# No global variables. Every dependency is explicit in endpoint signatures.
# ─────────────────────────────────────────────────────────────────────────────


from fastapi import Request

from diorama.cache.resource_cache import PipelineCaches
from diorama.config import Settings
from diorama.pipeline.fallback_catalog import FallbackCatalog
from diorama.pipeline.styles import StyleRegistry
from diorama.services.generation_log import GenerationLogger
from diorama.services.generation_queue import GenerationQueue
from diorama.services.leads import LeadStore
from diorama.services.metrics import PipelineMetrics
from diorama.services.pipeline import PipelineOrchestrator


def get_settings_dep(request: Request) -> Settings:
    """Inject Settings into endpoints via Depends()."""
    return request.app.state.settings  # type: ignore[no-any-return]


def get_caches(request: Request) -> PipelineCaches:
    """Inject the street view / aerial / identity caches."""
    return request.app.state.caches  # type: ignore[no-any-return]


def get_generation_queue(request: Request) -> GenerationQueue:
    return request.app.state.generation_queue  # type: ignore[no-any-return]


def get_style_registry(request: Request) -> StyleRegistry:
    return request.app.state.style_registry  # type: ignore[no-any-return]


def get_fallback_catalog(request: Request) -> FallbackCatalog:
    return request.app.state.fallback_catalog  # type: ignore[no-any-return]


def get_generation_log(request: Request) -> GenerationLogger:
    return request.app.state.generation_log  # type: ignore[no-any-return]


def get_lead_store(request: Request) -> LeadStore:
    return request.app.state.lead_store  # type: ignore[no-any-return]


def get_metrics(request: Request) -> PipelineMetrics:
    """Inject PipelineMetrics into endpoints via Depends()."""
    return request.app.state.metrics  # type: ignore[no-any-return]


def get_pipeline_orchestrator(request: Request) -> PipelineOrchestrator:
    """Inject PipelineOrchestrator into endpoints via Depends()."""
    return request.app.state.pipeline_orchestrator  # type: ignore[no-any-return]
