"""Logging helpers."""

from __future__ import annotations

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    quiet_sdks: bool = True,
) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)

    if quiet_sdks:
        # SDK request logs drown out pipeline progress at INFO
        for name in ("httpx", "openai", "urllib3"):
            logging.getLogger(name).setLevel(logging.WARNING)
