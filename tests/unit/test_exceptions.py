"""Unit tests for custom exceptions.

Tests in this module verify that the exception hierarchy is correctly
defined and that exceptions carry the expected information.
"""

import pytest

from lms_core.exceptions import (
    CatalogError,
    DuplicateError,
    IdempotencyError,
    InvalidIdempotencyKeyError,
    LmsError,
    NotFoundError,
    StorageError,
    ValidationFailedError,
)


class TestLmsError:
    """Test suite for the base LmsError exception."""

    def test_creation(self):
        error = LmsError("Test error message")
        assert str(error) == "Test error message"
        assert error.message == "Test error message"

    def test_all_errors_share_base(self):
        for error_type in (IdempotencyError, StorageError, CatalogError, NotFoundError):
            assert issubclass(error_type, LmsError)


class TestInvalidIdempotencyKeyError:
    """Test suite for InvalidIdempotencyKeyError."""

    def test_carries_reason_and_detail(self):
        error = InvalidIdempotencyKeyError(
            message="missing header",
            reason=InvalidIdempotencyKeyError.MISSING,
            detail="Idempotency-Key header is required for this operation",
        )

        assert error.reason == "missing"
        assert error.detail.startswith("Idempotency-Key")
        assert isinstance(error, IdempotencyError)

    def test_can_be_caught_as_idempotency_error(self):
        with pytest.raises(IdempotencyError):
            raise InvalidIdempotencyKeyError("bad", reason="invalid", detail="too long")


class TestStorageError:
    """Test suite for StorageError."""

    def test_preserves_cause(self):
        cause = ConnectionError("cache unavailable")
        error = StorageError("Failed to read key", cause=cause)

        assert error.cause is cause
        assert error.message == "Failed to read key"

    def test_cause_defaults_to_none(self):
        assert StorageError("boom").cause is None


class TestCatalogErrors:
    """Test suite for catalog error status mapping."""

    @pytest.mark.parametrize(
        ("error_type", "status_code"),
        [
            (CatalogError, 400),
            (NotFoundError, 404),
            (DuplicateError, 409),
            (ValidationFailedError, 422),
        ],
    )
    def test_status_codes(self, error_type, status_code):
        error = error_type("message", code="some.code")

        assert error.status_code == status_code
        assert error.code == "some.code"
        assert isinstance(error, CatalogError)
