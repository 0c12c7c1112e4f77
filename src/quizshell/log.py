"""Logging setup for the server process."""

from __future__ import annotations

import sys

from loguru import logger

LOG_FORMAT = "<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}"


def configure_logging(level: str = "INFO") -> None:
    """Replace loguru's default sink with one stderr sink at `level`."""
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)
