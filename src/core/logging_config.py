"""Structured logging configuration.

This module initializes a structlog logger with a stable JSON format.
Log lines go to stderr so command output on stdout stays parseable.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

from core.constants import DEFAULT_LOG_LEVEL


def configure_logging(log_level: str) -> None:
    """Configure structured logging at a minimum level.

    Loggers returned by ``get_logger`` pick up the new level on their next
    call, including module loggers created before this call.

    Args:
        log_level: Level name such as ``info`` or ``debug``.
    """
    level = logging.getLevelName(log_level.strip().upper())
    if not isinstance(level, int):
        level = logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Logging is configured from ``TABULA_LOG_LEVEL`` when nothing has
    configured it yet.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog bound logger with structured output.
    """
    if not structlog.is_configured():
        configure_logging(os.getenv("TABULA_LOG_LEVEL", DEFAULT_LOG_LEVEL))
    return structlog.get_logger(name)


def _stderr_logger(*_args: Any) -> structlog.PrintLogger:
    """Create a print logger bound to the current ``sys.stderr``."""
    return structlog.PrintLogger(file=sys.stderr)
