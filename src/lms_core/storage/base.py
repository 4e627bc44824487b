"""Cache store protocol for the idempotency gate.

This module defines the small interface the gate needs from a cache: a
lookup that ignores expired records and a write that attaches a TTL.

The store is constructed once at process start and handed to the gate, so
tests can swap in their own implementation.

Examples:
    Implementing a custom store::

        from lms_core.models import IdempotencyRecord
        from lms_core.storage.base import CacheStore

        class DictCacheStore:
            def __init__(self) -> None:
                self.data: dict[str, IdempotencyRecord] = {}

            async def get(self, key: str) -> IdempotencyRecord | None:
                return self.data.get(key)

            async def set(
                self, key: str, record: IdempotencyRecord, ttl_seconds: int
            ) -> None:
                self.data[key] = record

Thread Safety Requirements:
    Implementations MUST allow concurrent get() and set() calls from unrelated
    requests without any locking by the caller. They are NOT required to make
    the gate's check-then-act sequence atomic: two requests carrying the same
    new key may both miss and both execute.
"""

from typing import Protocol, runtime_checkable

from lms_core.models import IdempotencyRecord


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for idempotency record caches.

    Error Handling:
        Methods should raise StorageError for backend failures instead of
        backend-specific exceptions.
    """

    async def get(self, key: str) -> IdempotencyRecord | None:
        """Retrieve a non-expired record by lookup key.

        Args:
            key: The lookup key (prefix + client key).

        Returns:
            The record if present and not expired, None otherwise.
        """
        ...

    async def set(self, key: str, record: IdempotencyRecord, ttl_seconds: int) -> None:
        """Store a record under a lookup key.

        Args:
            key: The lookup key (prefix + client key).
            record: The captured response.
            ttl_seconds: Lifetime of the entry in seconds.
        """
        ...
