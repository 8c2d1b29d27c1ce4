# In-memory TTL cache for expensive provider results (imagery bytes, identity text).
# Insertion-order eviction (cachetools FIFOCache) + lazy TTL expiry at read time.
# One instance per resource type so each has independent sizing and TTL.

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import structlog
from cachetools import FIFOCache  # type: ignore[import-untyped]

from diorama.providers.protocol import ImageData

logger = structlog.get_logger(__name__)

V = TypeVar("V")


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    value: V
    inserted_at: float


class ResourceCache(Generic[V]):
    """Bounded, time-limited cache keyed by normalized address.

    Every operation is synchronous and never yields to the event loop, so
    concurrent coroutines always see a consistent map. Not shared across
    processes.
    """

    def __init__(
        self,
        name: str,
        maxsize: int = 200,
        ttl_seconds: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if maxsize < 1:
            raise ValueError("maxsize must be at least 1")
        self.name = name
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: FIFOCache[str, CacheEntry[V]] = FIFOCache(maxsize=maxsize)

        self._hits = 0
        self._misses = 0
        self._expired = 0
        self._evictions = 0

    @property
    def maxsize(self) -> int:
        return int(self._entries.maxsize)

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    # ── Get ──────────────────────────────────────────────────────────────

    def get(self, key: str) -> V | None:
        """Return the cached value, or None if missing or older than the TTL."""
        entry = self._entries.get(key)
        if entry is None:
            self._misses += 1
            return None

        if self._clock() - entry.inserted_at > self._ttl:
            del self._entries[key]
            self._expired += 1
            self._misses += 1
            logger.debug("cache_expired", cache=self.name)
            return None

        self._hits += 1
        return entry.value

    # ── Set ──────────────────────────────────────────────────────────────

    def set(self, key: str, value: V) -> None:
        """Insert or replace. At capacity, the oldest-inserted entry is evicted first."""
        if key not in self._entries and len(self._entries) >= self._entries.maxsize:
            self._evictions += 1
        self._entries[key] = CacheEntry(value=value, inserted_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()
        logger.info("cache_cleared", cache=self.name)

    def stats(self) -> dict[str, Any]:
        """Hit/miss counters and current size."""
        lookups = self._hits + self._misses
        return {
            "size": len(self._entries),
            "maxsize": self.maxsize,
            "ttl_seconds": self._ttl,
            "hits": self._hits,
            "misses": self._misses,
            "expired": self._expired,
            "evictions": self._evictions,
            "hit_rate": round(self._hits / max(lookups, 1), 3),
        }


@dataclass
class PipelineCaches:
    """The three per-resource caches the orchestrator reads and writes."""

    street_view: ResourceCache[ImageData]
    aerial: ResourceCache[ImageData]
    identity: ResourceCache[str]

    @classmethod
    def create(
        cls,
        *,
        street_view_size: int = 200,
        aerial_size: int = 200,
        identity_size: int = 200,
        ttl_seconds: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> PipelineCaches:
        return cls(
            street_view=ResourceCache("street_view", street_view_size, ttl_seconds, clock),
            aerial=ResourceCache("aerial", aerial_size, ttl_seconds, clock),
            identity=ResourceCache("identity", identity_size, ttl_seconds, clock),
        )

    def clear_all(self) -> None:
        self.street_view.clear()
        self.aerial.clear()
        self.identity.clear()

    def sizes(self) -> dict[str, int]:
        return {
            "streetView": len(self.street_view),
            "aerial": len(self.aerial),
            "identity": len(self.identity),
        }

    def stats(self) -> dict[str, dict[str, Any]]:
        return {
            "streetView": self.street_view.stats(),
            "aerial": self.aerial.stats(),
            "identity": self.identity.stats(),
        }
