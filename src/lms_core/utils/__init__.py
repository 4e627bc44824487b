"""Utility modules for the LMS request core."""

from .headers import (
    TRANSFER_HEADER_PREFIX,
    collect_headers,
    filter_transfer_headers,
    get_header_value,
    set_header_value,
)

__all__ = [
    "filter_transfer_headers",
    "collect_headers",
    "get_header_value",
    "set_header_value",
    "TRANSFER_HEADER_PREFIX",
]
