"""Async request queue for rate-limited model calls."""

from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Any, Callable, TypeVar

from roomstage.utils.rate_limit import RateLimiter

T = TypeVar("T")

logger = logging.getLogger(__name__)


class RequestQueue:
    """Runs blocking SDK calls in worker threads.

    At most ``max_concurrency`` calls are in flight, and each one waits on the
    shared ``RateLimiter`` before it starts.
    """

    def __init__(self, rate_limiter: RateLimiter | None = None, max_concurrency: int = 4) -> None:
        if max_concurrency <= 0:
            raise ValueError("max_concurrency must be positive")
        self._rate_limiter = rate_limiter
        self._max_concurrency = max_concurrency
        self._semaphore: asyncio.Semaphore | None = None
        self._pending = 0
        self._ids = itertools.count(1)

    @property
    def pending(self) -> int:
        return self._pending

    def _get_semaphore(self) -> asyncio.Semaphore:
        # Created lazily so the queue can be built outside a running loop
        if self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self._max_concurrency)
        return self._semaphore

    def _run(self, fn: Callable[..., T], args: tuple[Any, ...]) -> T:
        if self._rate_limiter is not None:
            self._rate_limiter.wait()
        return fn(*args)

    async def submit(self, fn: Callable[..., T], *args: Any, request_id: str | None = None) -> T:
        request_id = request_id or f"req-{next(self._ids)}"
        self._pending += 1
        try:
            async with self._get_semaphore():
                logger.debug("Processing request %s (%d pending)", request_id, self._pending)
                return await asyncio.to_thread(self._run, fn, args)
        except Exception:
            logger.error("Request %s failed", request_id)
            raise
        finally:
            self._pending -= 1
