"""Process-local cache store with passive TTL expiry.

This module provides a thread-safe in-memory implementation of the
CacheStore protocol.

The MemoryCacheStore is suitable for:
    - Single-process deployments
    - Development and testing

Idempotency guarantees do not survive a restart and do not span several
processes: each process has its own store.

Thread Safety:
    - A threading.Lock guards the entry dictionary
    - The lock is held only for dictionary access, never across awaits
    - Sync endpoints running in a worker thread and async code on the event
      loop can share one store

Expiry:
    - Expired entries are never returned by get()
    - Expired entries are swept during get()/set() at most once per
      scan interval; there is no background eviction task

Examples:
    Basic usage::

        from lms_core.storage.memory import MemoryCacheStore

        store = MemoryCacheStore()
        await store.set("idempotency:abc", record, ttl_seconds=86400)
        cached = await store.get("idempotency:abc")

    Controlling time in tests::

        clock = FakeClock()
        store = MemoryCacheStore(clock=clock)
        await store.set("k", record, ttl_seconds=10)
        clock.advance(seconds=11)
        assert await store.get("k") is None
"""

import threading
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from lms_core.models import IdempotencyRecord
from lms_core.observability.logging import get_logger
from lms_core.storage.base import CacheStore

logger = get_logger(__name__)


def utc_now() -> datetime:
    """Default clock for the store."""
    return datetime.now(UTC)


class MemoryCacheStore(CacheStore):
    """In-memory cache store keyed by lookup key.

    Attributes:
        _entries: Lookup key -> (record, absolute expiry).
        _lock: Lock protecting _entries.
        _clock: Callable returning the current UTC datetime.
        _scan_interval: Minimum time between expiry sweeps.
        _next_scan: When the next sweep may run.
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = utc_now,
        scan_interval_seconds: int = 60,
    ) -> None:
        """Initialize an empty store.

        Args:
            clock: Source of the current time. Override in tests.
            scan_interval_seconds: Minimum seconds between expiry sweeps.
        """
        self._entries: dict[str, tuple[IdempotencyRecord, datetime]] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self._scan_interval = timedelta(seconds=scan_interval_seconds)
        self._next_scan = clock() + self._scan_interval

    async def get(self, key: str) -> IdempotencyRecord | None:
        """Retrieve a record if it exists and has not expired.

        Args:
            key: The lookup key.

        Returns:
            The stored record, or None when absent or expired.
        """
        now = self._clock()
        with self._lock:
            self._maybe_sweep(now)
            entry = self._entries.get(key)
            if entry is None:
                return None

            record, expires_at = entry
            if now >= expires_at:
                del self._entries[key]
                return None

            return record

    async def set(self, key: str, record: IdempotencyRecord, ttl_seconds: int) -> None:
        """Store a record, replacing any entry under the same key.

        Args:
            key: The lookup key.
            record: The captured response.
            ttl_seconds: Lifetime in seconds, counted from now.
        """
        now = self._clock()
        with self._lock:
            self._maybe_sweep(now)
            self._entries[key] = (record, now + timedelta(seconds=ttl_seconds))

    def __len__(self) -> int:
        """Number of entries held, including expired ones not yet swept."""
        with self._lock:
            return len(self._entries)

    def _maybe_sweep(self, now: datetime) -> None:
        # Caller holds self._lock
        if now < self._next_scan:
            return

        expired = [key for key, (_, expires_at) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]

        self._next_scan = now + self._scan_interval

        if expired:
            logger.debug("cache.swept", records_removed=len(expired))
