"""
Cache Proxy - Test Configuration and Shared Fixtures

Provides pytest configuration and shared fixtures for unit and integration tests.
"""

import os
import socket
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

import pytest

from cacheproxy.cache import FileStore, LocalStoreRegistry, MemoryStore
from cacheproxy.config import LocalConfig
from cacheproxy.service import CacheProxyService


# Redis availability checker
def is_redis_available(host: str = "localhost", port: int = 6379) -> bool:
    """Check if Redis server is available for testing."""
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.settimeout(1)
        result = sock.connect_ex((host, port))
        sock.close()
        return result == 0
    except OSError:
        return False


@pytest.fixture
def require_redis() -> None:
    """Skip the requesting test when no Redis server is listening locally."""
    if not is_redis_available():
        pytest.skip("Redis server not available")


@pytest.fixture
def test_redis_database() -> int:
    """Redis database index used for testing (15 for isolation)."""
    return int(os.environ.get("TEST_REDIS_DB", "15"))


@pytest.fixture
def temp_cache_dir(tmp_path: Path) -> Path:
    """Create a temporary directory for file store testing."""
    cache_dir = tmp_path / "cache"
    cache_dir.mkdir()
    return cache_dir


@pytest.fixture
def memory_store() -> MemoryStore:
    """A fresh in-memory store."""
    return MemoryStore(max_size=100)


@pytest.fixture
def file_store(temp_cache_dir: Path) -> FileStore:
    """A file store rooted in a temporary directory."""
    return FileStore(temp_cache_dir)


@pytest.fixture
def local_stores(memory_store: MemoryStore, file_store: FileStore) -> LocalStoreRegistry:
    """Local store registry with "file" as the default store and "memory" available."""
    stores = LocalStoreRegistry()
    stores.register("file", file_store, default=True)
    stores.register("memory", memory_store)
    return stores


@pytest.fixture
async def local_service(local_stores: LocalStoreRegistry) -> AsyncGenerator[CacheProxyService, None]:
    """Cache service backed by the in-memory local store."""
    service = await CacheProxyService.open("test_cache", LocalConfig(store="memory", default_ttl=10), local_stores)
    yield service
    await service.close()


@pytest.fixture
def sample_cache_data() -> dict[str, Any]:
    """Sample data for cache testing."""
    return {
        "simple_string": "hello",
        "simple_int": 42,
        "simple_float": 3.14,
        "simple_bool": True,
        "complex_dict": {
            "nested": {
                "key": "value",
                "number": 123,
                "list": [1, 2, 3],
            }
        },
        "complex_list": [
            {"id": 1, "name": "Alice"},
            {"id": 2, "name": "Bob"},
        ],
    }
