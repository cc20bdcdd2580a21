"""Logging helpers for structchain.

Stdlib logging with a silent package logger; applications opt in through
``configure_logging``.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

_LOGGER_NAME = "structchain"

__all__ = [
    "get_logger",
    "configure_logging",
]

logging.getLogger(_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if not name or name == _LOGGER_NAME:
        return logging.getLogger(_LOGGER_NAME)
    if not name.startswith(_LOGGER_NAME + "."):
        name = f"{_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(verbosity: int = 0, *, stream=None) -> logging.Logger:
    """Attach a stream handler to the package logger.

    verbosity 0 logs warnings, 1 and above logs debug records (cycle
    short-circuits and degraded comparisons).
    """
    logger = get_logger()
    logger.setLevel(logging.DEBUG if verbosity >= 1 else logging.WARNING)

    for h in list(logger.handlers):
        if not isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    return logger
