from __future__ import annotations

import logging
import os
from typing import Optional

from pythonjsonlogger import jsonlogger

PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Libraries that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "werkzeug")


def _build_formatter(format_mode: str) -> logging.Formatter:
    if format_mode == "plain":
        return logging.Formatter(PLAIN_FORMAT)
    return jsonlogger.JsonFormatter(JSON_FORMAT, rename_fields={"levelname": "level"})


def configure_logging(
        level: Optional[int] = None,
        force_format: Optional[str] = None,
) -> None:
    """
    Configure the root logger for the roster browser.

    Output is either one JSON object per line (default), where every
    `extra={...}` field becomes a key, or plain text for local runs.

    The format is taken from `force_format` ("json" / "plain") or else
    ROSTER_BROWSER_LOG_FORMAT. The level is taken from `level` or else
    ROSTER_BROWSER_LOG_LEVEL (a name such as "DEBUG"), defaulting to INFO.
    """
    format_mode = (force_format or os.getenv("ROSTER_BROWSER_LOG_FORMAT", "json")).lower()
    if level is None:
        level = logging.getLevelName(os.getenv("ROSTER_BROWSER_LOG_LEVEL", "INFO").upper())
        if not isinstance(level, int):
            level = logging.INFO

    handler = logging.StreamHandler()
    handler.setFormatter(_build_formatter(format_mode))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
