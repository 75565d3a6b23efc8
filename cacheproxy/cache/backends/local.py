"""
Cache Proxy - Local Cache Adapter

Serves a local cache service from one of the pre-registered local stores.
Construction does no I/O.
"""

import logging
from typing import Any

from ...config import LocalConfig
from ..interface import StoreAdapter
from ..stores import LocalStoreRegistry

logger = logging.getLogger(__name__)


class LocalCacheAdapter(StoreAdapter):
    """Adapter delegating to a named local store."""

    backend = "local"

    def __init__(self, config: LocalConfig, stores: LocalStoreRegistry):
        """
        Select the configured store.

        Args:
            config: Local cache configuration (store name may be unset)
            stores: Registry of available local stores

        Raises:
            ConfigurationError: If the named store is not registered
        """
        self.store_name, self.store = stores.resolve(config.store)
        logger.info(
            f"Local cache using store '{self.store_name}'",
            extra={"store": self.store_name, "store_backend": self.store.backend},
        )

    async def has(self, key: str) -> bool:
        return await self.store.has(key)

    async def get(self, key: str, default: Any = None) -> Any:
        return await self.store.get(key, default)

    async def pull(self, key: str, default: Any = None) -> Any:
        return await self.store.pull(key, default)

    async def put(self, key: str, value: Any, ttl: int) -> None:
        await self.store.put(key, value, ttl)

    async def put_forever(self, key: str, value: Any) -> None:
        await self.store.put_forever(key, value)

    async def forget(self, key: str) -> bool:
        return await self.store.forget(key)

    async def close(self) -> None:
        # Local stores are shared through the registry and outlive the service
        logger.debug(f"Local cache adapter released store '{self.store_name}'")
