"""Cache stores for the idempotency gate.

All stores implement the CacheStore protocol defined in base.py.

Available Stores:
    - MemoryCacheStore: Process-local store with passive TTL expiry
"""

from lms_core.storage.base import CacheStore
from lms_core.storage.memory import MemoryCacheStore

__all__ = [
    "CacheStore",
    "MemoryCacheStore",
]
