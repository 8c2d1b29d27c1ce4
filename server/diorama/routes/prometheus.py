# ─────────────────────────────────────────────────────────────────────────────
# Prometheus Metrics Endpoint — text exposition format
# ─────────────────────────────────────────────────────────────────────────────
# GET /metrics/prometheus → text/plain Prometheus format
# Bridges PipelineMetrics, queue status and cache stats → prometheus-client
# gauges, synced on every scrape.
# ─────────────────────────────────────────────────────────────────────────────

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from prometheus_client import CollectorRegistry, Gauge, generate_latest

from diorama.cache.resource_cache import PipelineCaches
from diorama.dependencies import get_caches, get_generation_queue, get_metrics
from diorama.services.generation_queue import GenerationQueue
from diorama.services.metrics import OUTCOMES, RESOURCES, PipelineMetrics

router = APIRouter()

# ── Prometheus metrics (custom registry to avoid default process metrics) ─────

_registry = CollectorRegistry()

# Gauges, not Counters: values are copied from PipelineMetrics on scrape
_generations = Gauge(
    "diorama_generations",
    "Generation requests since startup, by outcome",
    ["outcome"],
    registry=_registry,
)

_fallbacks = Gauge(
    "diorama_fallbacks",
    "Fallback-catalog substitutions since startup, by reason",
    ["reason"],
    registry=_registry,
)

_synthesis_model_fallbacks = Gauge(
    "diorama_synthesis_model_fallbacks",
    "Synthesis calls that needed the fallback model",
    registry=_registry,
)

_estimated_cost = Gauge(
    "diorama_estimated_cost_usd",
    "Estimated provider spend since startup",
    registry=_registry,
)

_latency_ms = Gauge(
    "diorama_generation_latency_ms",
    "Generation latency over the last 1000 requests",
    ["quantile"],
    registry=_registry,
)

_queue_depth = Gauge(
    "diorama_queue_tasks",
    "Generation queue tasks by state",
    ["state"],
    registry=_registry,
)

_cache_entries = Gauge(
    "diorama_cache_entries",
    "Entries currently held per cache",
    ["cache"],
    registry=_registry,
)

_cache_hit_ratio = Gauge(
    "diorama_cache_hit_ratio",
    "Cache hit ratio (0.0–1.0) per cache",
    ["cache"],
    registry=_registry,
)

_CACHE_LABELS = dict(zip(("streetView", "aerial", "identity"), RESOURCES, strict=True))


def _sync_metrics(
    metrics: PipelineMetrics, queue: GenerationQueue, caches: PipelineCaches
) -> None:
    """Copy current state into the Prometheus gauges."""
    data = metrics.to_dict()

    for outcome in OUTCOMES:
        _generations.labels(outcome=outcome).set(data["outcomes"][outcome])
    for reason, count in data["fallback_reasons"].items():
        _fallbacks.labels(reason=reason).set(count)
    _synthesis_model_fallbacks.set(data["synthesis_fallback_model_used"])
    _estimated_cost.set(data["estimated_cost_total"])
    _latency_ms.labels(quantile="0.5").set(data["latency_p50_ms"])
    _latency_ms.labels(quantile="0.95").set(data["latency_p95_ms"])

    status = queue.get_status()
    _queue_depth.labels(state="running").set(status.running)
    _queue_depth.labels(state="queued").set(status.queued)

    for wire_name, cache_stats in caches.stats().items():
        label = _CACHE_LABELS[wire_name]
        _cache_entries.labels(cache=label).set(cache_stats["size"])
        _cache_hit_ratio.labels(cache=label).set(cache_stats["hit_rate"])


@router.get("/metrics/prometheus")
async def prometheus_metrics(
    metrics: PipelineMetrics = Depends(get_metrics),
    queue: GenerationQueue = Depends(get_generation_queue),
    caches: PipelineCaches = Depends(get_caches),
) -> Response:
    """Prometheus text exposition format metrics endpoint."""
    _sync_metrics(metrics, queue, caches)
    return Response(
        content=generate_latest(_registry),
        media_type="text/plain; version=0.0.4; charset=utf-8",
    )
