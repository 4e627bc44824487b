"""Framework-agnostic idempotency gate.

This module holds the decision logic that sits between an incoming request
and its handler. It is independent of any web framework; the ASGI adapter
converts Starlette requests and responses to and from the types used here.

The gate:
1. Skips requests whose method is not enabled or whose route has no policy
2. Extracts and validates the Idempotency-Key header
3. Replays a stored response when the key has been seen
4. Otherwise runs the handler with its output buffered
5. Stores 2xx responses under the key for the configured TTL

There is no lock around steps 3-5. Two requests racing with the same new key
can both reach the handler; only one record survives in the cache.

Examples:
    Using the gate directly::

        from lms_core.config import IdempotencyConfig
        from lms_core.core.gate import IdempotencyGate, Request
        from lms_core.models import IdempotencyPolicy
        from lms_core.storage.memory import MemoryCacheStore

        gate = IdempotencyGate(MemoryCacheStore(), IdempotencyConfig())

        async def handler(request: Request) -> CapturedResponse:
            return CapturedResponse(status=201, headers={}, body=b"{}")

        response = await gate.process(request, IdempotencyPolicy.REQUIRED, handler)
"""

from collections.abc import Awaitable, Callable

from lms_core.config import IdempotencyConfig
from lms_core.core.capture import CapturedResponse
from lms_core.core.replay import replay_response, snapshot_response
from lms_core.exceptions import InvalidIdempotencyKeyError
from lms_core.models import IdempotencyPolicy, ProblemDetails
from lms_core.observability.logging import get_logger
from lms_core.observability.metrics import record_cached_body, record_request
from lms_core.storage.base import CacheStore
from lms_core.utils.headers import get_header_value

logger = get_logger(__name__)

BAD_REQUEST_TYPE = "https://tools.ietf.org/html/rfc7231#section-6.5.1"
PROBLEM_CONTENT_TYPE = "application/problem+json"


class Request:
    """Abstract request representation.

    Framework adapters convert their own request objects into this format.

    Attributes:
        method: HTTP method (GET, POST, etc.)
        path: URL path
        headers: Request headers as dict
        body: Request body as bytes
    """

    def __init__(
        self,
        method: str,
        path: str,
        headers: dict[str, str],
        body: bytes = b"",
    ) -> None:
        self.method = method
        self.path = path
        self.headers = headers
        self.body = body


Handler = Callable[[Request], Awaitable[CapturedResponse]]


def problem_response(detail: str, status: int = 400) -> CapturedResponse:
    """Build a problem+json response for a rejected request.

    Args:
        detail: Client-facing explanation
        status: HTTP status code (400 for key errors)

    Returns:
        CapturedResponse with a {type, title, status, detail} JSON body
    """
    problem = ProblemDetails(
        type=BAD_REQUEST_TYPE,
        title="Bad Request",
        status=status,
        detail=detail,
    )
    return CapturedResponse(
        status=status,
        headers={"content-type": PROBLEM_CONTENT_TYPE},
        body=problem.model_dump_json(exclude_none=True).encode("utf-8"),
    )


class IdempotencyGate:
    """Deduplicates retried requests by their idempotency key.

    Attributes:
        store: Cache of captured responses
        config: Configuration object
    """

    def __init__(self, store: CacheStore, config: IdempotencyConfig) -> None:
        """Initialize the gate.

        Args:
            store: Cache of captured responses, shared by all requests
            config: Configuration object
        """
        self.store = store
        self.config = config

    @property
    def missing_key_detail(self) -> str:
        return f"{self.config.header_name} header is required for this operation"

    @property
    def invalid_key_detail(self) -> str:
        return (
            f"{self.config.header_name} must be between 1 and "
            f"{self.config.max_key_length} characters"
        )

    def applies(self, method: str, policy: IdempotencyPolicy | None) -> bool:
        """Return True if a request with this method and route policy is gated."""
        return policy is not None and method.upper() in self.config.enabled_methods

    async def process(
        self,
        request: Request,
        policy: IdempotencyPolicy | None,
        handler: Handler,
    ) -> CapturedResponse:
        """Process a request with idempotency handling.

        Args:
            request: The incoming request
            policy: Policy of the matched route, None if not annotated
            handler: Async function producing the buffered response

        Returns:
            The replayed, rejected or freshly produced response

        Raises:
            Exception: Whatever the handler raises; nothing is cached then
        """
        if not self.applies(request.method, policy):
            return await handler(request)

        try:
            key = self.extract_key(request, policy)
        except InvalidIdempotencyKeyError as e:
            logger.warning(
                "idempotency.rejected",
                reason=e.reason,
                path=request.path,
            )
            record_request("rejected", 400)
            return problem_response(e.detail)

        if key is None:
            # Optional route, no key supplied
            response = await handler(request)
            record_request("passthrough", response.status)
            return response

        lookup_key = f"{self.config.cache_key_prefix}{key}"

        cached = await self.store.get(lookup_key)
        if cached is not None:
            logger.info(
                "idempotency.replayed",
                key=key,
                status_code=cached.status_code,
            )
            record_request("replay", cached.status_code)
            return replay_response(cached)

        response = await handler(request)

        if response.is_success:
            record = snapshot_response(
                key,
                response,
                ttl_seconds=self.config.ttl_seconds,
                default_content_type=self.config.default_content_type,
            )
            await self.store.set(lookup_key, record, self.config.ttl_seconds)
            logger.info(
                "idempotency.stored",
                key=key,
                status_code=response.status,
                ttl_seconds=self.config.ttl_seconds,
            )
            record_request("stored", response.status)
            record_cached_body(len(response.body))
        else:
            logger.info(
                "idempotency.not_cached",
                key=key,
                status_code=response.status,
            )
            record_request("not_cached", response.status)

        return response

    def extract_key(self, request: Request, policy: IdempotencyPolicy | None) -> str | None:
        """Extract and validate the idempotency key.

        The raw header value is checked as received: blank values and values
        longer than the configured maximum are invalid regardless of policy.

        Args:
            request: The request object
            policy: Policy of the matched route

        Returns:
            The key, or None when the header is absent on an OPTIONAL route

        Raises:
            InvalidIdempotencyKeyError: If the key is missing on a REQUIRED
                route, or present but invalid
        """
        key = get_header_value(request.headers, self.config.header_name)

        if key is None:
            if policy == IdempotencyPolicy.OPTIONAL:
                return None
            raise InvalidIdempotencyKeyError(
                message="Request is missing the idempotency key header",
                reason=InvalidIdempotencyKeyError.MISSING,
                detail=self.missing_key_detail,
            )

        if not key.strip() or len(key) > self.config.max_key_length:
            raise InvalidIdempotencyKeyError(
                message=f"Idempotency key has invalid length {len(key)}",
                reason=InvalidIdempotencyKeyError.INVALID,
                detail=self.invalid_key_detail,
            )

        return key
