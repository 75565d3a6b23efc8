"""
Cache Proxy - Store Adapter Factory Integration Tests

Tests adapter creation per backend, local store resolution and
fail-fast behavior for unreachable network backends.
"""

from collections.abc import AsyncGenerator

import pytest

from cacheproxy.cache import LocalCacheAdapter, LocalStoreRegistry, StoreAdapter, create_store_adapter
from cacheproxy.config import BackendKind, LocalConfig, MemcachedConfig, RedisConfig, ServiceConfig
from cacheproxy.errors import BackendUnavailableError, ConfigurationError


class TestCreateStoreAdapter:
    """Test suite for store adapter factory functionality."""

    async def test_local_default_store(self, local_stores: LocalStoreRegistry) -> None:
        """An unset store name selects the registry default."""
        adapter = await create_store_adapter(LocalConfig(), local_stores)

        assert isinstance(adapter, StoreAdapter)
        assert isinstance(adapter, LocalCacheAdapter)
        assert adapter.store_name == "file"

        await adapter.put("key", "value", ttl=5)
        assert await adapter.get("key") == "value"

    async def test_local_named_store(self, local_stores: LocalStoreRegistry) -> None:
        adapter = await create_store_adapter(LocalConfig(store="memory"), local_stores)
        assert isinstance(adapter, LocalCacheAdapter)
        assert adapter.store_name == "memory"

    async def test_local_unknown_store(self, local_stores: LocalStoreRegistry) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            await create_store_adapter(LocalConfig(store="apc"), local_stores)
        assert "Invalid cache store provided [apc]" in exc_info.value.message

    async def test_local_without_registry(self) -> None:
        with pytest.raises(ConfigurationError):
            await create_store_adapter(LocalConfig())

    async def test_adapters_sharing_a_store_see_the_same_data(self, local_stores: LocalStoreRegistry) -> None:
        first = await create_store_adapter(LocalConfig(store="memory"), local_stores)
        second = await create_store_adapter(LocalConfig(store="memory"), local_stores)

        await first.put("shared", "value", ttl=5)
        assert await second.get("shared") == "value"

        await first.close()
        assert await second.get("shared") == "value"

    @pytest.mark.parametrize("backend", list(BackendKind))
    async def test_config_model_must_match_backend(self, backend: BackendKind, local_stores: LocalStoreRegistry) -> None:
        """A bare ServiceConfig is rejected instead of reaching a backend builder."""
        with pytest.raises(ConfigurationError) as exc_info:
            await create_store_adapter(ServiceConfig(backend=backend), local_stores)
        assert exc_info.value.details["config_type"] == "ServiceConfig"

    async def test_redis_unreachable(self) -> None:
        config = RedisConfig(host="127.0.0.1", port=1, options={"socket_connect_timeout": 0.5})
        with pytest.raises(BackendUnavailableError) as exc_info:
            await create_store_adapter(config)
        assert exc_info.value.status_code == 503
        assert exc_info.value.backend == "redis"

    async def test_memcached_unreachable(self) -> None:
        with pytest.raises(BackendUnavailableError) as exc_info:
            await create_store_adapter(MemcachedConfig(host="127.0.0.1", port=1))
        assert exc_info.value.backend == "memcached"


class TestRedisFactory:
    @pytest.fixture
    async def adapter(self, require_redis: None, test_redis_database: int) -> AsyncGenerator[StoreAdapter, None]:
        adapter = await create_store_adapter(RedisConfig(host="localhost", database_index=test_redis_database))
        yield adapter
        await adapter.forget("factory.key")
        await adapter.close()

    async def test_create_redis_adapter(self, adapter: StoreAdapter) -> None:
        assert adapter.backend == "redis"
        await adapter.put("factory.key", {"a": 1}, ttl=1)
        assert await adapter.get("factory.key") == {"a": 1}
