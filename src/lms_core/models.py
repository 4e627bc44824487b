"""Core type definitions for the idempotency gate.

This module provides the route policy enum and the write-once record that
holds a captured response for replay.

Examples:
    Creating an idempotency record::

        from datetime import UTC, datetime, timedelta
        from lms_core.models import IdempotencyRecord

        now = datetime.now(UTC)
        record = IdempotencyRecord(
            key="create-course-123",
            status_code=201,
            content_type="application/json",
            headers={"location": "/api/courses/42"},
            body_b64="eyJpZCI6IDQyfQ==",
            created_at=now,
            expires_at=now + timedelta(hours=24),
        )
"""

import base64
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class IdempotencyPolicy(str, Enum):
    """How strictly a route demands an idempotency key.

    Attributes:
        REQUIRED: Requests without a key are rejected with 400.
        OPTIONAL: Requests without a key run normally and are not cached.
    """

    REQUIRED = "REQUIRED"
    OPTIONAL = "OPTIONAL"


class IdempotencyRecord(BaseModel):
    """A captured successful response, replayable for the lifetime of its TTL.

    Records are frozen: once stored they are never modified, only expired.
    The body is base64-encoded so that the record serializes cleanly for
    any cache backend.

    Attributes:
        key: The idempotency key supplied by the client.
        status_code: HTTP status of the first execution (always 2xx).
        content_type: Content type of the captured response.
        headers: Response headers, minus the Transfer-* family.
        body_b64: Base64-encoded response body.
        created_at: When the response was captured.
        expires_at: When the record stops being replayable.
    """

    key: str = Field(
        ...,
        description="Idempotency key provided by the client",
        min_length=1,
        max_length=255,
        examples=["course-create-abc123"],
    )
    status_code: int = Field(
        ...,
        description="HTTP status code",
        ge=200,
        le=299,
        examples=[200, 201],
    )
    content_type: str = Field(
        ...,
        description="Response content type",
        examples=["application/json"],
    )
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Response headers to re-apply on replay",
    )
    body_b64: str = Field(
        ...,
        description="Base64-encoded response body",
    )
    created_at: datetime = Field(
        ...,
        description="Timestamp when the response was captured",
    )
    expires_at: datetime = Field(
        ...,
        description="Timestamp after which the record is ignored",
    )

    model_config = {"frozen": True}

    @field_validator("body_b64")
    @classmethod
    def validate_base64(cls, v: str) -> str:
        """Validate that the body is properly base64-encoded.

        Raises:
            ValueError: If the string is not valid base64.
        """
        try:
            base64.b64decode(v, validate=True)
        except Exception as e:
            raise ValueError(f"Invalid base64 encoding: {e}") from e
        return v

    @field_validator("expires_at")
    @classmethod
    def validate_expires_after_created(cls, v: datetime, info: Any) -> datetime:
        """Validate that expires_at is after created_at.

        Raises:
            ValueError: If expires_at is not after created_at.
        """
        if "created_at" in info.data and v <= info.data["created_at"]:
            raise ValueError("expires_at must be after created_at")
        return v

    def get_body_bytes(self) -> bytes:
        """Decode and return the response body as bytes.

        Examples:
            >>> record.get_body_bytes()
            b'{"id": 42}'
        """
        return base64.b64decode(self.body_b64)


class ProblemDetails(BaseModel):
    """RFC 7807 problem body returned for rejected requests.

    Examples:
        >>> ProblemDetails(
        ...     type="https://tools.ietf.org/html/rfc7231#section-6.5.1",
        ...     title="Bad Request",
        ...     status=400,
        ...     detail="Idempotency-Key header is required for this operation",
        ... ).model_dump_json(exclude_none=True)
    """

    type: str = Field(default="about:blank", description="Problem type URI")
    title: str = Field(..., description="Short summary of the problem")
    status: int = Field(..., ge=100, le=599, description="HTTP status code")
    detail: str = Field(..., description="Explanation specific to this occurrence")
    instance: str | None = Field(default=None, description="Request path that failed")
