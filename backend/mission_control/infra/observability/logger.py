"""Observability layer: console logging for API routes, transcript tails and CLI calls."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")
TRANSCRIPT_LOGGERS = ("mission_control.transcript", "mission_control.infra.store")


def setup_logging(level: str = "INFO", *, transcript_level: str | None = None) -> None:
    """Route server and app records through one root handler.

    `transcript_level` sets the transcript/store loggers apart from the rest;
    tail polls and skipped-line counts log there at debug level.
    """
    root_level = level.upper()
    logging.basicConfig(level=root_level, format=LOG_FORMAT, force=True)
    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.setLevel(root_level)
        server_logger.propagate = True
    for name in TRANSCRIPT_LOGGERS:
        logging.getLogger(name).setLevel((transcript_level or root_level).upper())


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
