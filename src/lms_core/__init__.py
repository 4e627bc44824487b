"""
Request-handling core for the LMS demo API.

This package provides the idempotency gate that deduplicates retried POST
requests by their Idempotency-Key header, and the query pipeline that gives
every list endpoint the same search, sort and paging behavior.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
