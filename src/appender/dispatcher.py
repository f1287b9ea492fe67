"""Async dispatcher that feeds an appender without blocking the event loop."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any

from .file import FileAppender
from .models import LogEntry, utc_now

logger = logging.getLogger(__name__)


class AppenderDispatcher:
    """Queues log entries and writes them to an appender in a background task.

    The appender itself is synchronous; writes run in a worker thread via
    `asyncio.to_thread`, one at a time, in submission order.
    """

    def __init__(self, *, appender: FileAppender, max_queue_size: int = 10000) -> None:
        """Create a dispatcher in front of a synchronous appender.

        Args:
            appender: Appender that receives every queued entry.
            max_queue_size: Bound for in-memory buffering; entries are dropped
                when full so that producers never block on logging.
        """
        self._appender = appender
        self._queue: asyncio.Queue[LogEntry | None] = asyncio.Queue(maxsize=max_queue_size)
        self._worker: asyncio.Task[None] | None = None
        self._closed = False

        self._dropped = 0
        self._write_failures = 0
        self._first_failure_at: datetime | None = None
        self._last_failure_at: datetime | None = None

    @property
    def appender(self) -> FileAppender:
        return self._appender

    def _ensure_started(self) -> None:
        """Start the background writer task if it hasn't been started yet."""
        if self._worker is not None:
            return
        self._worker = asyncio.create_task(self._run_worker(), name="appender-writer")

    def _record_failure(self) -> None:
        now = utc_now()
        self._write_failures += 1
        self._first_failure_at = self._first_failure_at or now
        self._last_failure_at = now

    async def submit(self, entry: LogEntry) -> bool:
        """Enqueue an entry (non-blocking). Returns False if it was dropped."""
        if self._closed:
            return False

        self._ensure_started()
        try:
            self._queue.put_nowait(entry)
        except asyncio.QueueFull:
            self._dropped += 1
            return False
        return True

    async def flush(self) -> None:
        """Wait for queued entries to be written, then flush the appender."""
        if self._worker is not None:
            await self._queue.join()
        await asyncio.to_thread(self._appender.flush)

    async def aclose(self) -> None:
        """Drain, flush and close the appender.

        Safe to call multiple times.
        """
        if self._closed:
            return
        self._closed = True
        if self._worker is not None:
            await self._queue.put(None)
            await self._worker
        try:
            await asyncio.to_thread(self._appender.flush)
        finally:
            await asyncio.to_thread(self._appender.close)

    async def _run_worker(self) -> None:
        """Background loop that drains the queue and writes to the appender."""
        while True:
            item = await self._queue.get()
            try:
                if item is None:
                    return
                await asyncio.to_thread(self._appender.write, item)
            except Exception:  # noqa: BLE001 - logging must not crash producers
                logger.exception("Failed to write log entry to %r", self._appender)
                self._record_failure()
            finally:
                self._queue.task_done()

    def degraded_status(self) -> dict[str, Any]:
        """Return a minimal degraded-status snapshot."""
        return {
            "dropped": self._dropped,
            "write_failures": self._write_failures,
            "first_failure_at": self._first_failure_at,
            "last_failure_at": self._last_failure_at,
        }
