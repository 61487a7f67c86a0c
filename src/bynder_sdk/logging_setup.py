"""Opt-in loguru output for applications embedding the client."""

from __future__ import annotations

import sys
from typing import Any, TextIO

from loguru import logger

PACKAGE = "bynder_sdk"
LOG_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {name} - {message}"


def enable_logging(level: str = "INFO", sink: TextIO | Any = sys.stderr) -> int:
    """Route the client's log records to ``sink`` and return the handler id."""

    logger.remove()
    handler_id = logger.add(sink, level=level, format=LOG_FORMAT)
    logger.enable(PACKAGE)
    return handler_id


def disable_logging() -> None:
    logger.disable(PACKAGE)
