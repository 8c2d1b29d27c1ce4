# ─────────────────────────────────────────────────────────────────────────────
# Cache Routes — monitoring and management
# ─────────────────────────────────────────────────────────────────────────────

from typing import Any

import structlog
from fastapi import APIRouter, Depends

from diorama.cache.resource_cache import PipelineCaches
from diorama.dependencies import get_caches
from diorama.schemas import ClearCacheResponse

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/cache/stats")
async def cache_stats(caches: PipelineCaches = Depends(get_caches)) -> dict[str, Any]:
    """Per-cache hit/miss statistics.

    Response schema:
    {
        "streetView": {"size": 12, "maxsize": 200, "ttl_seconds": 3600.0,
                       "hits": 30, "misses": 12, "expired": 1,
                       "evictions": 0, "hit_rate": 0.714},
        "aerial": {...},
        "identity": {...}
    }
    """
    return caches.stats()


@router.post("/clear-cache", response_model=ClearCacheResponse)
async def clear_cache(caches: PipelineCaches = Depends(get_caches)) -> ClearCacheResponse:
    """Drop every cached image and identity. The next request refetches."""
    sizes = caches.sizes()
    caches.clear_all()
    logger.info("caches_cleared", **sizes)
    return ClearCacheResponse(message="All caches cleared")
