"""Observability utilities for the LMS request core.

This package provides:
- Prometheus metrics for gate decisions and served pages
- Structured logging with contextual information
"""

from lms_core.observability.logging import configure_logging, get_logger
from lms_core.observability.metrics import (
    record_cached_body,
    record_page,
    record_request,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "record_request",
    "record_cached_body",
    "record_page",
]
