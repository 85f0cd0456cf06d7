from __future__ import annotations

import logging

from comfortboard.core.config import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_log_level(level: str, default: int = logging.INFO) -> int:
    value = logging.getLevelName(level.upper())
    if isinstance(value, int):
        return value
    return default


def configure_logging(settings: Settings) -> None:
    root = logging.getLogger()
    level = get_log_level(settings.log_level)
    root.setLevel(level)

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
