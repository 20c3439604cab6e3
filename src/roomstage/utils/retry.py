"""Retry helper with exponential backoff."""

from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar

T = TypeVar("T")


class RetryError(RuntimeError):
    def __init__(self, message: str, attempts: int) -> None:
        super().__init__(message)
        self.attempts = attempts


def backoff_delay(attempt: int, backoff_seconds: float) -> float:
    return backoff_seconds * (2 ** (attempt - 1))


def with_retry(
    fn: Callable[[], T],
    *,
    max_retries: int = 3,
    backoff_seconds: float = 1.5,
    logger: logging.Logger | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    attempt = 0
    while True:
        try:
            return fn()
        except Exception as exc:  # noqa: BLE001 - intentional retry wrapper
            attempt += 1
            if attempt > max_retries:
                raise RetryError(f"Exceeded max retries ({max_retries})", attempts=attempt) from exc

            sleep_time = backoff_delay(attempt, backoff_seconds)
            if logger:
                logger.warning(
                    "Retrying after error: %s (attempt %d/%d, sleep %.2fs)",
                    exc,
                    attempt,
                    max_retries,
                    sleep_time,
                )
            sleep(sleep_time)
