# ─────────────────────────────────────────────────────────────────────────────
# Pipeline Metrics — in-process generation counters
# ─────────────────────────────────────────────────────────────────────────────
# Outcome counts, latency percentiles, cache hit counts and estimated spend
# since process start. Bridged to Prometheus by routes/prometheus.py.
#
# All access goes through a threading.Lock so a snapshot taken from a
# worker thread is never half-updated.
#
# Bounded: latency history uses deque(maxlen=1000), auto-evicts oldest.
# ─────────────────────────────────────────────────────────────────────────────

from __future__ import annotations

import threading
import time
from collections import Counter, deque
from dataclasses import dataclass, field
from typing import Any

# Outcome labels, shared with the Prometheus bridge
OUTCOMES = ("success", "mock", "fallback", "failure")
RESOURCES = ("street_view", "aerial", "identity")


@dataclass
class PipelineMetrics:
    """Thread-safe generation metrics."""

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    outcomes: Counter[str] = field(default_factory=Counter)
    fallback_reasons: Counter[str] = field(default_factory=Counter)
    cache_hits: Counter[str] = field(default_factory=Counter)
    synthesis_fallback_model_used: int = 0
    estimated_cost_total: float = 0.0

    _latency_history: deque[float] = field(default_factory=lambda: deque(maxlen=1000), repr=False)
    _start_time: float = field(default_factory=time.time, repr=False)

    def record_generation(
        self,
        outcome: str,
        latency_ms: float,
        *,
        cached: dict[str, bool] | None = None,
        cost: float = 0.0,
        fallback_reason: str | None = None,
    ) -> None:
        """Record one finished generation request."""
        with self._lock:
            self.outcomes[outcome] += 1
            self._latency_history.append(latency_ms)
            self.estimated_cost_total += cost
            if fallback_reason:
                self.fallback_reasons[fallback_reason] += 1
            for resource, hit in (cached or {}).items():
                if hit:
                    self.cache_hits[resource] += 1

    def record_model_fallback(self) -> None:
        with self._lock:
            self.synthesis_fallback_model_used += 1

    @property
    def requests_total(self) -> int:
        return sum(self.outcomes.values())

    def to_dict(self) -> dict[str, Any]:
        with self._lock:
            latencies = sorted(self._latency_history)
            n = len(latencies)
            total = sum(self.outcomes.values())
            return {
                "requests_total": total,
                "outcomes": {outcome: self.outcomes[outcome] for outcome in OUTCOMES},
                "fallback_reasons": dict(self.fallback_reasons),
                "cache_hits": {resource: self.cache_hits[resource] for resource in RESOURCES},
                "synthesis_fallback_model_used": self.synthesis_fallback_model_used,
                "estimated_cost_total": round(self.estimated_cost_total, 4),
                "latency_p50_ms": round(latencies[n // 2], 1) if n else 0,
                "latency_p95_ms": round(latencies[int(n * 0.95)], 1) if n else 0,
                "latency_mean_ms": round(sum(latencies) / n, 1) if n else 0,
                "uptime_seconds": int(time.time() - self._start_time),
            }
