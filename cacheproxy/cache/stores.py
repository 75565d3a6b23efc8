"""
Cache Proxy - Local Store Registry

Holds the named in-process/local stores available to local cache services
and the name of the default store. The registry is an explicit object handed
to whatever builds services; there is no process-global instance.
"""

import logging

from ..errors import ConfigurationError
from .interface import StoreAdapter

logger = logging.getLogger(__name__)


class LocalStoreRegistry:
    """Named local stores with a default."""

    def __init__(self, default: str | None = None) -> None:
        self._stores: dict[str, StoreAdapter] = {}
        self._default = default

    @property
    def default(self) -> str | None:
        """Name of the default store (first registered store if never set)."""
        return self._default

    def register(self, name: str, store: StoreAdapter, default: bool = False) -> None:
        """
        Register a store under a name.

        Args:
            name: Store name referenced by local cache configurations
            store: Store instance
            default: Make this the default store
        """
        if not name:
            raise ConfigurationError("Local store name must not be empty")

        if name in self._stores:
            logger.warning("Replacing registered local store: %s", name)

        self._stores[name] = store
        if default or self._default is None:
            self._default = name

        logger.debug("Registered local store '%s'", name, extra={"store": name, "backend": store.backend})

    def resolve(self, name: str | None = None) -> tuple[str, StoreAdapter]:
        """
        Look up a store, falling back to the default when no name is given.

        Returns:
            Tuple of (store name, store)

        Raises:
            ConfigurationError: If the store is not registered
        """
        if not name:
            name = self._default

        if name is None or name not in self._stores:
            raise ConfigurationError(
                f"Invalid cache store provided [{name}]",
                details={"store": name, "available": self.names()},
            )

        return name, self._stores[name]

    def names(self) -> list[str]:
        """List registered store names."""
        return list(self._stores.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._stores

    async def close_all(self) -> None:
        """Close every registered store."""
        for name, store in self._stores.items():
            await store.close()
            logger.debug("Closed local store: %s", name)
