"""Custom exceptions for the LMS request core.

This module defines the exception hierarchy used by the idempotency gate,
the cache store and the demo catalog.

Examples:
    Handling a rejected key::

        from lms_core.exceptions import InvalidIdempotencyKeyError

        try:
            key = gate.extract_key(request, policy)
        except InvalidIdempotencyKeyError as e:
            logger.warning("idempotency.rejected", reason=e.reason)
            return problem_response(e.detail)

    Handling a catalog error::

        from lms_core.exceptions import CatalogError

        try:
            course = catalog.create(payload)
        except CatalogError as e:
            return JSONResponse(status_code=e.status_code, content={"detail": e.message})
"""


class LmsError(Exception):
    """Base exception for all errors raised by this package.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        """Initialize the exception with a message.

        Args:
            message: Human-readable error description.
        """
        self.message = message
        super().__init__(message)


class IdempotencyError(LmsError):
    """Base exception for idempotency-related errors."""


class InvalidIdempotencyKeyError(IdempotencyError):
    """The request carried no usable idempotency key.

    Raised when a REQUIRED route receives no key, or when any annotated route
    receives a key that is empty, blank or too long. The gate turns this into
    a 400 problem response without running the handler.

    Attributes:
        message: Human-readable error description.
        reason: "missing" or "invalid".
        detail: Client-facing problem detail text.
    """

    MISSING = "missing"
    INVALID = "invalid"

    def __init__(self, message: str, reason: str, detail: str) -> None:
        """Initialize the error with details.

        Args:
            message: Human-readable error description.
            reason: "missing" or "invalid".
            detail: Client-facing problem detail text.
        """
        super().__init__(message)
        self.reason = reason
        self.detail = detail


class StorageError(IdempotencyError):
    """Cache backend operation failed.

    Attributes:
        message: Human-readable error description.
        cause: The underlying exception that caused the storage error.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class CatalogError(LmsError):
    """A catalog operation was refused.

    Carries a machine-readable code and the HTTP status the API maps it to.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code, e.g. "course.duplicate_code".
        status_code: Recommended HTTP status.
    """

    status_code = 400

    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.code = code


class NotFoundError(CatalogError):
    """The requested entity does not exist."""

    status_code = 404


class DuplicateError(CatalogError):
    """The entity would violate a uniqueness rule."""

    status_code = 409


class ValidationFailedError(CatalogError):
    """The payload failed a domain validation rule."""

    status_code = 422
