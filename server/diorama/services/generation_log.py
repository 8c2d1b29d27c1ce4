# ─────────────────────────────────────────────────────────────────────────────
# Generation Log — append-only JSON Lines record of every generation attempt
# ─────────────────────────────────────────────────────────────────────────────
# One line per request that got past validation (success, failure or
# fallback). Never rewritten. GET /stats re-reads the whole file; it grows
# without bound, which is acceptable at this scale.
#
# File I/O runs in the default executor so the event loop never blocks on disk.
# ─────────────────────────────────────────────────────────────────────────────

from __future__ import annotations

import asyncio
import json
import threading
from collections import Counter
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

logger = structlog.get_logger(__name__)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CacheFlags(_CamelModel):
    """Which pipeline resources were served from cache."""

    street_view: bool = False
    aerial: bool = False
    identity: bool = False


class GenerationLogEntry(_CamelModel):
    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    address: str
    style_id: str
    success: bool
    duration_ms: int = Field(..., ge=0)
    error: str | None = None
    fallback: str | None = None
    cached: CacheFlags = Field(default_factory=CacheFlags)
    estimated_cost: float = 0.0
    model: str | None = None


class GenerationLogger:
    """Appends GenerationLogEntry lines and aggregates them for /stats."""

    def __init__(self, path: str | Path, *, address_chars: int = 60, error_chars: int = 200):
        self._path = Path(path)
        self._address_chars = address_chars
        self._error_chars = error_chars
        self._write_lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def truncate_address(self, address: str) -> str:
        return address[: self._address_chars]

    def truncate_error(self, error: str) -> str:
        return error[: self._error_chars]

    async def log(self, entry: GenerationLogEntry) -> None:
        """Append one entry. Write failures are logged, never raised to the request."""
        entry = entry.model_copy(
            update={
                "address": self.truncate_address(entry.address),
                "error": self.truncate_error(entry.error) if entry.error else None,
            }
        )
        line = entry.model_dump_json(by_alias=True, exclude_none=True)
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._append, line)
        except OSError as e:
            logger.error("generation_log_write_failed", path=str(self._path), error=str(e))

    def _append(self, line: str) -> None:
        with self._write_lock:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")

    async def read_entries(self) -> list[GenerationLogEntry]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._read_sync)

    def _read_sync(self) -> list[GenerationLogEntry]:
        if not self._path.exists():
            return []

        entries: list[GenerationLogEntry] = []
        skipped = 0
        with self._path.open(encoding="utf-8") as f:
            for line in f:
                if not line.strip():
                    continue
                try:
                    entries.append(GenerationLogEntry.model_validate(json.loads(line)))
                except (json.JSONDecodeError, ValidationError):
                    skipped += 1
        if skipped:
            logger.warning("generation_log_lines_skipped", count=skipped)
        return entries

    async def stats(self) -> dict[str, Any]:
        """Aggregate counts, cost and duration across the whole log."""
        return summarize(await self.read_entries())


def summarize(entries: list[GenerationLogEntry]) -> dict[str, Any]:
    total = len(entries)
    successful = [e for e in entries if e.success]
    fallbacks = [e for e in entries if e.fallback]
    durations = [e.duration_ms for e in successful]

    cache_hits = {
        "streetView": sum(e.cached.street_view for e in entries),
        "aerial": sum(e.cached.aerial for e in entries),
        "identity": sum(e.cached.identity for e in entries),
    }
    by_style = Counter(e.style_id for e in entries)

    return {
        "totalGenerations": total,
        "successful": len(successful),
        "failed": total - len(successful),
        "fallbacks": len(fallbacks),
        "successRate": round(len(successful) / total, 3) if total else 0,
        "totalEstimatedCost": round(sum(e.estimated_cost for e in entries), 4),
        "averageDurationMs": round(sum(durations) / len(durations)) if durations else 0,
        "cacheHits": cache_hits,
        "byStyle": dict(by_style.most_common()),
        "lastGenerationAt": entries[-1].timestamp if entries else None,
    }
