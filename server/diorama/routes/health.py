# ─────────────────────────────────────────────────────────────────────────────
# Health + Usage Routes
# ─────────────────────────────────────────────────────────────────────────────
#   /health → liveness plus provider-key and capacity status. No I/O.
#   /stats  → aggregates parsed from the generation log (reads the file).
#   /metrics → in-process counters since startup.
# ─────────────────────────────────────────────────────────────────────────────

from typing import Any

from fastapi import APIRouter, Depends

from diorama.cache.resource_cache import PipelineCaches
from diorama.config import Settings
from diorama.dependencies import (
    get_caches,
    get_generation_log,
    get_generation_queue,
    get_metrics,
    get_settings_dep,
)
from diorama.schemas import CacheSizes, HealthResponse, QueueInfo
from diorama.services.generation_log import GenerationLogger
from diorama.services.generation_queue import GenerationQueue
from diorama.services.metrics import PipelineMetrics

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(
    settings: Settings = Depends(get_settings_dep),
    queue: GenerationQueue = Depends(get_generation_queue),
    caches: PipelineCaches = Depends(get_caches),
) -> HealthResponse:
    """Liveness check with key presence, queue depth and cache sizes.

    Polled by uptime checks; keep it free of provider calls and disk reads.
    """
    status = queue.get_status()
    return HealthResponse(
        has_street_view_key=settings.has_maps_key,
        has_google_ai_key=settings.has_ai_key,
        queue=QueueInfo(running=status.running, queued=status.queued),
        cache=CacheSizes(**caches.sizes()),
    )


@router.get("/stats")
async def stats(
    generation_log: GenerationLogger = Depends(get_generation_log),
) -> dict[str, Any]:
    """Counts, estimated spend and durations across every logged generation.

    Response schema:
    {
        "totalGenerations": 42,
        "successful": 39,
        "failed": 3,
        "fallbacks": 4,
        "successRate": 0.929,
        "totalEstimatedCost": 1.7412,
        "averageDurationMs": 11840,
        "cacheHits": {"streetView": 12, "aerial": 12, "identity": 10},
        "byStyle": {"diorama": 20, "ghibli": 12, ...},
        "lastGenerationAt": "2026-01-01T12:00:00+00:00"
    }
    """
    return await generation_log.stats()


@router.get("/metrics")
async def metrics_endpoint(
    metrics: PipelineMetrics = Depends(get_metrics),
) -> dict[str, Any]:
    """In-process counters since startup: outcomes, latency, cache hits, spend."""
    return metrics.to_dict()
