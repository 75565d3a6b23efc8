"""
Cache Proxy - Store Adapter Interface

Defines the abstract interface that every store adapter and local store
must implement. TTLs are expressed in minutes.
"""

from abc import ABC, abstractmethod
from typing import Any


class StoreAdapter(ABC):
    """
    Abstract base class for cache stores.

    All backends (local stores, Memcached, Redis) implement this interface so
    the operation engine behaves identically whichever one is configured.
    """

    backend: str = "abstract"

    @abstractmethod
    async def has(self, key: str) -> bool:
        """
        Check if a key exists in the store.

        Args:
            key: Cache key to check

        Returns:
            True if key exists and is not expired, False otherwise
        """
        pass

    @abstractmethod
    async def get(self, key: str, default: Any = None) -> Any:
        """
        Retrieve a value from the store.

        Args:
            key: Cache key
            default: Value returned when the key is absent

        Returns:
            Cached value if found and not expired, default otherwise
        """
        pass

    @abstractmethod
    async def pull(self, key: str, default: Any = None) -> Any:
        """
        Retrieve a value and delete it from the store.

        Args:
            key: Cache key
            default: Value returned when the key is absent

        Returns:
            Cached value if found, default otherwise
        """
        pass

    @abstractmethod
    async def put(self, key: str, value: Any, ttl: int) -> None:
        """
        Store a value that expires after a number of minutes.

        Args:
            key: Cache key
            value: Value to cache (must be JSON-serializable)
            ttl: Time-to-live in minutes
        """
        pass

    @abstractmethod
    async def put_forever(self, key: str, value: Any) -> None:
        """
        Store a value with no expiry.

        Args:
            key: Cache key
            value: Value to cache (must be JSON-serializable)
        """
        pass

    @abstractmethod
    async def forget(self, key: str) -> bool:
        """
        Delete a key from the store.

        Args:
            key: Cache key to delete

        Returns:
            True if a value was removed, False if the key didn't exist
        """
        pass

    async def close(self) -> None:
        """
        Close the store and release resources.

        Should be called during graceful shutdown.
        """
        return None
