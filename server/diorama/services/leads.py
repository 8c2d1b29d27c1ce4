# Lead capture — append-only JSON Lines file of opted-in email addresses.

from __future__ import annotations

import asyncio
import threading
from datetime import UTC, datetime
from pathlib import Path

import structlog
from pydantic import BaseModel

logger = structlog.get_logger(__name__)

LEAD_SOURCE = "diorama-generator"


class Lead(BaseModel):
    email: str
    address: str | None = None
    timestamp: str
    source: str = LEAD_SOURCE


class LeadStore:
    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._write_lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    async def capture(
        self, email: str, address: str | None = None, timestamp: str | None = None
    ) -> Lead:
        """Normalize and append one lead. Raises OSError if the file can't be written."""
        lead = Lead(
            email=email.strip().lower(),
            address=address,
            timestamp=timestamp or datetime.now(UTC).isoformat(),
        )
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._append, lead.model_dump_json())
        # Domain only; the full address stays out of logs
        logger.info("lead_captured", email_domain=lead.email.rpartition("@")[2])
        return lead

    def _append(self, line: str) -> None:
        with self._write_lock:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
