"""Loguru sink configuration."""

from __future__ import annotations

import sys

from loguru import logger

_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


def configure_logging(level: str = "INFO") -> int:
    """Replace loguru's default sink with a stderr sink at ``level``.

    Returns the handler id so callers (mostly tests) can remove it again.
    """

    normalized = level.upper()
    if normalized not in _LEVELS:
        logger.warning("Unknown logging level '{}'; falling back to INFO", level)
        normalized = "INFO"

    logger.remove()
    return logger.add(
        sys.stderr,
        level=normalized,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {name}:{line} - {message}",
    )


__all__ = ["configure_logging"]
