"""Logging setup for the SafetyNet service."""

from __future__ import annotations

import logging

LOGGER_NAME = "safetynet"
LOG_FORMAT = "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"

_handler: logging.Handler | None = None


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a single stream handler to the package logger.

    Safe to call more than once (each app built in tests calls it); the
    handler is only installed the first time, the level is always updated.
    """
    global _handler
    logger = logging.getLogger(LOGGER_NAME)
    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(_handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger
