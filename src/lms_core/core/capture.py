"""Response capture for the idempotency gate.

The gate must inspect a handler's status, headers and complete body before
anything reaches the client, so that a successful response can be stored for
replay. This module provides the in-memory response type the gate works with
and a helper that drains a Starlette response into it.

Examples:
    Capturing a downstream response::

        response = await call_next(request)
        captured = await capture_response(response)
        captured.status      # 201
        captured.body        # b'{"id": "..."}'
"""

from starlette.responses import Response

from lms_core.utils.headers import collect_headers, get_header_value


class CapturedResponse:
    """A fully buffered HTTP response.

    Attributes:
        status: HTTP status code
        headers: Response headers as key-value pairs
        body: Complete response body
    """

    def __init__(self, status: int, headers: dict[str, str], body: bytes) -> None:
        """Initialize a captured response.

        Args:
            status: HTTP status code
            headers: Response headers
            body: Response body as bytes
        """
        self.status = status
        self.headers = headers
        self.body = body

    @property
    def content_type(self) -> str | None:
        """The Content-Type header, if the handler set one."""
        return get_header_value(self.headers, "content-type")

    @property
    def is_success(self) -> bool:
        """True for 2xx statuses."""
        return 200 <= self.status < 300

    def to_response(self) -> Response:
        """Convert to a Starlette Response for the client."""
        return Response(
            content=self.body,
            status_code=self.status,
            headers=self.headers,
        )


async def capture_response(response: Response) -> CapturedResponse:
    """Drain a Starlette response into a CapturedResponse.

    Streaming responses (as returned by ``call_next`` in a
    BaseHTTPMiddleware) are read chunk by chunk; plain responses expose
    their rendered body directly.

    Args:
        response: The downstream response

    Returns:
        CapturedResponse holding the same status, headers and body bytes
    """
    body = b""
    if hasattr(response, "body_iterator"):
        async for chunk in response.body_iterator:
            if isinstance(chunk, str):
                body += chunk.encode(response.charset)
            else:
                body += bytes(chunk)
    else:
        body = bytes(response.body)

    return CapturedResponse(
        status=response.status_code,
        headers=collect_headers(response.headers.items()),
        body=body,
    )
