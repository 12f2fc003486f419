"""Structured logging configuration (structlog)."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import structlog


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError(f"unknown log level: {name}")
    return level


def configure_structlog(level: str = "WARNING", log_file: Path | None = None) -> None:
    """Configure structlog once at process startup.

    Console output goes to stderr so it never mixes with the dashboard
    frame on stdout.  With *log_file*, events are appended there as JSON
    lines instead.
    """
    if log_file is None:
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.dev.ConsoleRenderer(colors=False),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(_level(level)),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
            cache_logger_on_first_use=True,
        )
        return

    log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(str(log_file), mode="a")
    file_handler.setLevel(logging.DEBUG)

    stdlib_logger = logging.getLogger("pai_dashboard")
    stdlib_logger.handlers = [file_handler]
    stdlib_logger.setLevel(logging.DEBUG)
    stdlib_logger.propagate = False

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_level(level)),
        context_class=dict,
        logger_factory=lambda *args: stdlib_logger,
        cache_logger_on_first_use=True,
    )
