# ─────────────────────────────────────────────────────────────────────────────
# Generation Queue — bounded-concurrency FIFO scheduler for synthesis calls
# ─────────────────────────────────────────────────────────────────────────────
# Tasks start in submission order, at most max_concurrent at a time, and
# settle independently: one failure never touches its siblings. No priority,
# cancellation or queue-level timeout.
#
# `running` is only mutated in synchronous, non-yielding sections (dequeue
# and settle), so no lock is needed on a single event loop.
# ─────────────────────────────────────────────────────────────────────────────

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

import structlog

logger = structlog.get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class QueueStatus:
    running: int
    queued: int


@dataclass
class _QueuedTask:
    work: Callable[[], Awaitable[Any]]
    future: asyncio.Future[Any]


class GenerationQueue:
    """FIFO task scheduler that never runs more than max_concurrent tasks."""

    def __init__(self, max_concurrent: int = 3) -> None:
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        self._max_concurrent = max_concurrent
        self._pending: deque[_QueuedTask] = deque()
        self._running = 0
        # Strong refs so in-flight tasks aren't garbage-collected mid-run
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def max_concurrent(self) -> int:
        return self._max_concurrent

    async def add(self, work: Callable[[], Awaitable[T]]) -> T:
        """Enqueue work and wait for its result (or exception)."""
        future: asyncio.Future[T] = asyncio.get_running_loop().create_future()
        self._pending.append(_QueuedTask(work=work, future=future))
        self._advance()
        return await future

    def get_status(self) -> QueueStatus:
        """Snapshot for health reporting. Pure read."""
        return QueueStatus(running=self._running, queued=len(self._pending))

    def _advance(self) -> None:
        while self._running < self._max_concurrent and self._pending:
            queued = self._pending.popleft()
            self._running += 1
            task = asyncio.create_task(self._execute(queued))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def _execute(self, queued: _QueuedTask) -> None:
        # Every exit path settles the caller's future exactly once
        try:
            result = await queued.work()
        except asyncio.CancelledError:
            queued.future.cancel()
            raise
        except BaseException as exc:
            if not queued.future.done():
                queued.future.set_exception(exc)
            else:
                logger.warning("queue_task_failed_after_caller_left", error=str(exc))
            if isinstance(exc, (KeyboardInterrupt, SystemExit)):
                raise
        else:
            if not queued.future.done():
                queued.future.set_result(result)
        finally:
            self._running -= 1
            self._advance()
