"""
Cache Proxy - Store Adapter Factory

Canonical factory for creating store adapters from a validated configuration.
The builder is selected from a table keyed on the configuration's backend
discriminant.

Key points:
- Local adapters need a LocalStoreRegistry and perform no I/O
- Memcached/Redis adapters are imported lazily and open a connection,
  failing fast with BackendUnavailableError if the server is unreachable

Examples:
    from cacheproxy.cache.factory import create_store_adapter
    from cacheproxy.config import LocalConfig, RedisConfig

    adapter = await create_store_adapter(LocalConfig(), local_stores=stores)
    redis_adapter = await create_store_adapter(RedisConfig(host="localhost"))
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from ..config import BackendKind, LocalConfig, MemcachedConfig, RedisConfig, ServiceConfig
from ..errors import BackendUnavailableError, ConfigurationError
from .backends.local import LocalCacheAdapter
from .interface import StoreAdapter
from .stores import LocalStoreRegistry

logger = logging.getLogger(__name__)

_ConfigT = TypeVar("_ConfigT", bound=ServiceConfig)

_Builder = Callable[[ServiceConfig, LocalStoreRegistry | None], Awaitable[StoreAdapter]]


def _require(config: ServiceConfig, model: type[_ConfigT]) -> _ConfigT:
    """Check the configuration matches the model its backend builder expects."""
    if not isinstance(config, model):
        raise ConfigurationError(
            f"{config.backend.value} backend requires a {model.__name__}, got {type(config).__name__}",
            details={"backend": config.backend.value, "config_type": type(config).__name__},
        )
    return config


async def _create_local_adapter(config: ServiceConfig, stores: LocalStoreRegistry | None) -> StoreAdapter:
    """Internal helper to construct a local adapter."""
    config = _require(config, LocalConfig)
    if stores is None:
        raise ConfigurationError(
            "Local cache selected but no local stores are registered",
            details={"backend": "local"},
        )
    return LocalCacheAdapter(config, stores)


async def _create_memcached_adapter(config: ServiceConfig, stores: LocalStoreRegistry | None) -> StoreAdapter:
    """Internal helper to construct a memcached adapter with lazy import."""
    config = _require(config, MemcachedConfig)
    try:
        from .backends.memcached import MemcachedCacheAdapter
    except ImportError as e:
        logger.error(
            "Memcached backend selected but aiomcache is not installed",
            extra={"package": "aiomcache>=0.8.0", "error": str(e)},
        )
        raise ConfigurationError(
            "Memcached backend selected but memcached client is unavailable. "
            "Install with: pip install 'aiomcache>=0.8.0' or add to dependencies.",
            details={"package": "aiomcache>=0.8.0", "error": str(e), "backend": "memcached"},
        ) from e

    return await MemcachedCacheAdapter.open(config)


async def _create_redis_adapter(config: ServiceConfig, stores: LocalStoreRegistry | None) -> StoreAdapter:
    """Internal helper to construct a redis adapter with lazy import."""
    config = _require(config, RedisConfig)
    try:
        from .backends.redis import RedisCacheAdapter
    except ImportError as e:
        logger.error(
            "Redis backend selected but redis client is not installed",
            extra={"package": "redis>=5.0.0", "error": str(e)},
        )
        raise ConfigurationError(
            "Redis backend selected but redis client is unavailable. "
            "Install with: pip install 'redis>=5.0.0' or add to dependencies.",
            details={"package": "redis>=5.0.0", "error": str(e), "backend": "redis"},
        ) from e

    return await RedisCacheAdapter.open(config)


_BUILDERS: dict[BackendKind, _Builder] = {
    BackendKind.LOCAL: _create_local_adapter,
    BackendKind.MEMCACHED: _create_memcached_adapter,
    BackendKind.REDIS: _create_redis_adapter,
}


async def create_store_adapter(
    config: ServiceConfig,
    local_stores: LocalStoreRegistry | None = None,
) -> StoreAdapter:
    """
    Create a store adapter for a service configuration.

    Args:
        config: Validated service configuration
        local_stores: Registry of local stores (required for local backends)

    Returns:
        Connected store adapter

    Raises:
        ConfigurationError: If the backend is unknown, misconfigured or its client is missing
        BackendUnavailableError: If a network backend cannot be reached
    """
    builder = _BUILDERS.get(config.backend)
    if builder is None:
        raise ConfigurationError(
            f"Unknown cache backend: {config.backend}",
            details={"backend": str(config.backend), "supported": [k.value for k in _BUILDERS]},
        )

    logger.info(
        "Creating %s store adapter",
        config.backend.value,
        extra={"backend": config.backend.value},
    )

    try:
        adapter = await builder(config, local_stores)
    except (ConfigurationError, BackendUnavailableError):
        # Already logged where raised
        raise
    except Exception as e:
        logger.error(
            f"Unexpected error creating {config.backend.value} store adapter: {e}",
            extra={"backend": config.backend.value, "error": str(e)},
            exc_info=True,
        )
        raise ConfigurationError(
            f"Failed to create {config.backend.value} store adapter: {e}",
            details={"backend": config.backend.value, "error": str(e)},
        ) from e

    logger.info(
        "Store adapter created successfully",
        extra={"backend": config.backend.value},
    )
    return adapter
