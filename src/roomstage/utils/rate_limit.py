"""Simple rate limiting utilities."""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from typing import Callable

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60.0


class RateLimiter:
    """Paces calls to a minimum interval and caps them per rolling minute.

    Safe to share between worker threads.
    """

    def __init__(
        self,
        requests_per_minute: int,
        max_per_minute: int | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if requests_per_minute <= 0:
            raise ValueError("requests_per_minute must be positive")
        self._min_interval = WINDOW_SECONDS / requests_per_minute
        self._max_per_minute = max_per_minute or requests_per_minute
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._last_time: float | None = None
        self._recent: deque[float] = deque()

    @property
    def min_interval(self) -> float:
        return self._min_interval

    def wait(self) -> None:
        with self._lock:
            now = self._clock()
            if self._last_time is not None:
                sleep_time = self._min_interval - (now - self._last_time)
                if sleep_time > 0:
                    logger.debug("Rate limiting: waiting %.2fs before next request", sleep_time)
                    self._sleep(sleep_time)
                    now = self._clock()

            while self._recent and now - self._recent[0] >= WINDOW_SECONDS:
                self._recent.popleft()
            if len(self._recent) >= self._max_per_minute:
                sleep_time = WINDOW_SECONDS - (now - self._recent[0])
                if sleep_time > 0:
                    logger.info(
                        "Hit rate limit (%d requests/minute), waiting %.1fs",
                        self._max_per_minute,
                        sleep_time,
                    )
                    self._sleep(sleep_time)
                    now = self._clock()
                self._recent.popleft()

            self._last_time = now
            self._recent.append(now)
