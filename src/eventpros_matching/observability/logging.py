"""Shared logging utilities for the matching engine.

Usage example:
    from eventpros_matching.observability.logging import get_logger

    logger = get_logger("eventpros_matching.ranking")
    logger.info("Ranked %s contractors", contractor_count)
"""

from __future__ import annotations

import logging
import time

ROOT_LOGGER_NAME = "eventpros_matching"

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"
_state = {"level": logging.INFO}


def get_logger(name: str) -> logging.Logger:
    """Return a standard logger configured for UTC timestamps.

    Args:
        name: Logger name (use a stable module-qualified name under ``eventpros_matching``).

    Returns:
        A logger with a single stream handler and a consistent UTC format.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(fmt=_LOG_FORMAT, datefmt=_LOG_DATE_FORMAT)
        formatter.converter = time.gmtime
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(_state["level"])
        logger.propagate = False
    return logger


def set_log_level(level: int) -> None:
    """Apply ``level`` to every engine logger created so far and to later ones."""
    _state["level"] = level
    for name, candidate in logging.Logger.manager.loggerDict.items():
        if not isinstance(candidate, logging.Logger):
            continue
        if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
            candidate.setLevel(level)
