"""
Pytest configuration and shared fixtures for lms_core tests.
"""

from datetime import UTC, datetime, timedelta

import pytest

from lms_core.config import IdempotencyConfig
from lms_core.storage.memory import MemoryCacheStore


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    """Provide a fake clock starting at 2024-01-01T00:00:00Z."""
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> MemoryCacheStore:
    """Provide an empty cache store driven by the fake clock."""
    return MemoryCacheStore(clock=clock)


@pytest.fixture
def config() -> IdempotencyConfig:
    """Provide the default gate configuration."""
    return IdempotencyConfig()


@pytest.fixture
def sample_idempotency_key() -> str:
    """Provide a sample idempotency key for tests."""
    return "test-key-12345"
