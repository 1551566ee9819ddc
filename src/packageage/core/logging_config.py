"""Logging configuration.

All diagnostics go to stderr through rich; stdout is reserved for the hook
decision JSON.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "packageage"

_logger: logging.Logger | None = None


def setup_logging(
    level: str = "WARNING",
    *,
    verbose: bool = False,
    quiet: bool = False,
    propagate: bool = False,
) -> logging.Logger:
    """Configure the `packageage` logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        verbose: Force DEBUG.
        quiet: Drop the console handler entirely.
        propagate: Let records reach the root logger (useful for tests).
    """

    global _logger

    if verbose:
        effective_level = "DEBUG"
    else:
        effective_level = level.upper()
    numeric_level = logging.getLevelName(effective_level)
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    if quiet:
        # keeps logging's last-resort stderr handler out of the way
        logger.addHandler(logging.NullHandler())
    else:
        handler = RichHandler(
            console=Console(stderr=True),
            show_time=False,
            show_path=False,
            markup=False,
        )
        handler.setLevel(numeric_level)
        logger.addHandler(handler)

    logger.propagate = propagate

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Return the configured logger, initializing defaults on first use."""

    global _logger
    if _logger is None:
        _logger = setup_logging()
    return _logger
