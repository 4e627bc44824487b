"""ASGI middleware adapter for FastAPI and Starlette applications.

This module wraps the framework-agnostic IdempotencyGate in a Starlette
middleware.

The middleware:
1. Resolves the matched route and looks up its idempotency policy
2. Lets ungated requests through without buffering
3. Converts gated requests to the internal Request format
4. Runs the downstream application with its response buffered
5. Converts the gate's result back into a Starlette Response

Examples:
    FastAPI integration::

        from fastapi import FastAPI
        from lms_core.adapters.asgi import ASGIIdempotencyMiddleware
        from lms_core.routing import RoutePolicyTable
        from lms_core.storage.memory import MemoryCacheStore

        policies = RoutePolicyTable()
        policies.register("POST", "/api/courses")

        app = FastAPI()
        app.add_middleware(
            ASGIIdempotencyMiddleware,
            store=MemoryCacheStore(),
            policies=policies,
        )
"""

from collections.abc import Awaitable, Callable
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request as StarletteRequest
from starlette.responses import Response

from lms_core.config import IdempotencyConfig
from lms_core.core.capture import CapturedResponse, capture_response
from lms_core.core.gate import IdempotencyGate, Request
from lms_core.models import IdempotencyPolicy
from lms_core.routing import RoutePolicyTable
from lms_core.storage.base import CacheStore


class ASGIIdempotencyMiddleware(BaseHTTPMiddleware):
    """ASGI middleware for idempotency handling.

    Attributes:
        store: Cache of captured responses
        policies: Route policy table
        config: Configuration object
        gate: Core gate instance
    """

    def __init__(
        self,
        app: Any,
        store: CacheStore,
        policies: RoutePolicyTable,
        config: IdempotencyConfig | None = None,
    ) -> None:
        """Initialize the ASGI middleware.

        Args:
            app: The ASGI application
            store: Cache of captured responses, created once per process
            policies: Route policy table built at startup
            config: Configuration object (uses defaults if not provided)
        """
        super().__init__(app)
        self.store = store
        self.policies = policies
        self.config = config or IdempotencyConfig()
        self.gate = IdempotencyGate(store, self.config)

    async def dispatch(
        self,
        request: StarletteRequest,
        call_next: Callable[[StarletteRequest], Awaitable[Response]],
    ) -> Response:
        """Process a request with idempotency handling.

        Args:
            request: The Starlette request object
            call_next: Function to call the next middleware/handler

        Returns:
            Starlette Response object
        """
        policy = self._resolve_policy(request)
        if not self.gate.applies(request.method, policy):
            return await call_next(request)

        async def handler(_req: Request) -> CapturedResponse:
            response = await call_next(request)
            return await capture_response(response)

        result = await self.gate.process(
            self._convert_request(request),
            policy,
            handler,
        )

        return result.to_response()

    def _resolve_policy(self, request: StarletteRequest) -> IdempotencyPolicy | None:
        """Look up the policy of the route matching this request.

        Args:
            request: Starlette request object

        Returns:
            The policy, or None for unmatched or unregistered routes
        """
        app = request.scope.get("app")
        router = getattr(app, "router", None)
        if router is None:
            return None

        return self.policies.resolve(request.scope, router.routes)

    def _convert_request(self, request: StarletteRequest) -> Request:
        """Convert Starlette request to internal Request format.

        The body is left unread; the downstream handler consumes it.
        """
        return Request(
            method=request.method,
            path=request.url.path,
            headers=dict(request.headers.items()),
        )
