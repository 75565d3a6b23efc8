"""
Cache Proxy - Memory Store

In-process store with LRU eviction and per-key expiry.
Safe for concurrent coroutines and suitable for single-process deployments.
"""

import asyncio
import logging
import time
from collections import OrderedDict
from typing import Any

from ..interface import StoreAdapter

logger = logging.getLogger(__name__)


class MemoryStore(StoreAdapter):
    """
    In-memory store with LRU eviction.

    Features:
    - LRU eviction when max_size is reached
    - Per-key TTL (minutes) or no expiry
    - O(1) has/get/put/forget operations
    """

    backend = "memory"

    def __init__(self, max_size: int = 1000):
        """
        Initialize memory store.

        Args:
            max_size: Maximum number of entries (LRU eviction when exceeded)
        """
        if max_size < 1:
            raise ValueError("max_size must be at least 1")

        self.max_size = max_size

        # Storage: key -> (value, expiry_time)
        self._cache: OrderedDict[str, tuple[Any, float | None]] = OrderedDict()

        # Stats
        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._deletes = 0
        self._evictions = 0

        self._lock = asyncio.Lock()

    def _is_expired(self, expiry: float | None) -> bool:
        """Check if entry is expired."""
        if expiry is None:
            return False
        return time.time() > expiry

    def _lookup(self, key: str) -> tuple[bool, Any]:
        """Find a live entry, dropping it if expired. Caller holds the lock."""
        entry = self._cache.get(key)
        if entry is None:
            return False, None

        value, expiry = entry
        if self._is_expired(expiry):
            del self._cache[key]
            return False, None

        return True, value

    def _store(self, key: str, value: Any, expiry: float | None) -> None:
        """Write an entry, evicting the least recently used one at capacity. Caller holds the lock."""
        if key not in self._cache and len(self._cache) >= self.max_size:
            evicted_key, _ = self._cache.popitem(last=False)
            self._evictions += 1
            logger.debug(f"Evicted key from memory store: {evicted_key}")

        self._cache[key] = (value, expiry)
        self._cache.move_to_end(key)
        self._sets += 1

    async def has(self, key: str) -> bool:
        async with self._lock:
            found, _ = self._lookup(key)
            return found

    async def get(self, key: str, default: Any = None) -> Any:
        async with self._lock:
            found, value = self._lookup(key)
            if not found:
                self._misses += 1
                return default

            self._cache.move_to_end(key)
            self._hits += 1
            return value

    async def pull(self, key: str, default: Any = None) -> Any:
        async with self._lock:
            found, value = self._lookup(key)
            if not found:
                self._misses += 1
                return default

            del self._cache[key]
            self._hits += 1
            self._deletes += 1
            return value

    async def put(self, key: str, value: Any, ttl: int) -> None:
        async with self._lock:
            self._store(key, value, time.time() + ttl * 60)

    async def put_forever(self, key: str, value: Any) -> None:
        async with self._lock:
            self._store(key, value, None)

    async def forget(self, key: str) -> bool:
        async with self._lock:
            found, _ = self._lookup(key)
            if not found:
                return False

            del self._cache[key]
            self._deletes += 1
            return True

    async def flush(self) -> None:
        """Clear all entries from the store."""
        async with self._lock:
            size = len(self._cache)
            self._cache.clear()
            logger.info(f"Cleared {size} entries from memory store")

    async def get_stats(self) -> dict[str, Any]:
        """Get store statistics."""
        async with self._lock:
            total_requests = self._hits + self._misses
            hit_rate = (self._hits / total_requests * 100) if total_requests > 0 else 0.0

            return {
                "backend": self.backend,
                "size": len(self._cache),
                "max_size": self.max_size,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(hit_rate, 2),
                "sets": self._sets,
                "deletes": self._deletes,
                "evictions": self._evictions,
            }
