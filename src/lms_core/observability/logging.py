"""Structured logging configuration for the LMS request core.

This module sets up structlog so that every component emits dotted event
names with key/value context instead of free-form messages.

Bound context commonly includes:
- Idempotency keys (never request or response bodies)
- Route method and path template
- Status codes
- Paging metadata

Examples:
    Configure logging once at startup::

        from lms_core.observability.logging import configure_logging

        configure_logging(level="INFO", json_output=True)

    Use a module logger::

        from lms_core.observability.logging import get_logger

        logger = get_logger(__name__)
        logger.info("idempotency.replayed", key="course-123", status_code=201)

    Output (JSON)::

        {
            "event": "idempotency.replayed",
            "key": "course-123",
            "status_code": 201,
            "level": "info",
            "timestamp": "2024-01-01T00:00:00.000000Z"
        }
"""

import logging
import sys
from typing import Any

import structlog


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
) -> None:
    """Configure structlog and the standard library root logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Emit JSON lines when True, colored console output otherwise
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Return a structlog logger bound to ``name``.

    Args:
        name: Logger name, usually __name__ of the calling module
    """
    return structlog.get_logger(name)
