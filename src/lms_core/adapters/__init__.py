"""Framework adapters for the idempotency gate.

- asgi.py: ASGI middleware for FastAPI, Starlette, etc.

The adapters handle the conversion between framework-specific request and
response objects and the gate's internal representation.
"""

from lms_core.adapters.asgi import ASGIIdempotencyMiddleware

__all__ = ["ASGIIdempotencyMiddleware"]
