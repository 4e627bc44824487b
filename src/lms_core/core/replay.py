"""Snapshot and replay of captured responses.

This module converts between the buffered response produced by a handler
and the write-once record kept in the cache:

1. ``snapshot_response`` keeps the status, content type, every header except
   the Transfer-* family, and the body (base64-encoded).
2. ``replay_response`` rebuilds a response with the stored status, content
   type, headers and body, byte for byte.

Examples:
    Round trip::

        record = snapshot_response("course-123", captured, ttl_seconds=86400)
        replayed = replay_response(record)
        assert replayed.body == captured.body
"""

import base64
from datetime import UTC, datetime, timedelta

from lms_core.core.capture import CapturedResponse
from lms_core.models import IdempotencyRecord
from lms_core.utils.headers import filter_transfer_headers, set_header_value


def snapshot_response(
    key: str,
    response: CapturedResponse,
    ttl_seconds: int,
    default_content_type: str = "application/json",
    now: datetime | None = None,
) -> IdempotencyRecord:
    """Build the cache record for a successful response.

    Args:
        key: The client's idempotency key
        response: The buffered 2xx response
        ttl_seconds: Lifetime of the record
        default_content_type: Used when the response has no Content-Type
        now: Capture time (defaults to the current UTC time)

    Returns:
        A frozen IdempotencyRecord

    Raises:
        ValueError: If the response status is not 2xx
    """
    if not response.is_success:
        raise ValueError(f"Only 2xx responses can be stored, got {response.status}")

    created_at = now or datetime.now(UTC)

    return IdempotencyRecord(
        key=key,
        status_code=response.status,
        content_type=response.content_type or default_content_type,
        headers=filter_transfer_headers(response.headers),
        body_b64=base64.b64encode(response.body).decode("ascii"),
        created_at=created_at,
        expires_at=created_at + timedelta(seconds=ttl_seconds),
    )


def replay_response(record: IdempotencyRecord) -> CapturedResponse:
    """Reconstruct the original response from a stored record.

    Args:
        record: The stored record

    Returns:
        CapturedResponse with the stored status, content type, headers and body

    Examples:
        >>> replayed = replay_response(record)
        >>> replayed.status
        201
        >>> replayed.headers["Content-Type"]
        'application/json'
    """
    headers = set_header_value(dict(record.headers), "Content-Type", record.content_type)

    return CapturedResponse(
        status=record.status_code,
        headers=headers,
        body=record.get_body_bytes(),
    )
