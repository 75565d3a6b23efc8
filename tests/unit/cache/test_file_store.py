"""
Cache Proxy - File Store Tests
"""

import time
from pathlib import Path
from typing import Any

import pytest

from cacheproxy.cache.backends.file import FileStore


class TestFileStore:
    """Test suite for FileStore."""

    async def test_put_and_get(self, file_store: FileStore) -> None:
        await file_store.put("foo.bar", "hello", ttl=10)
        assert await file_store.get("foo.bar") == "hello"
        assert await file_store.has("foo.bar") is True

    async def test_missing_key(self, file_store: FileStore) -> None:
        assert await file_store.has("missing") is False
        assert await file_store.get("missing", "x") == "x"
        assert await file_store.forget("missing") is False

    async def test_structured_values(self, file_store: FileStore, sample_cache_data: dict[str, Any]) -> None:
        for key, value in sample_cache_data.items():
            await file_store.put_forever(key, value)

        for key, expected in sample_cache_data.items():
            assert await file_store.get(key) == expected

    async def test_survives_new_instance(self, temp_cache_dir: Path) -> None:
        """Entries are read back by another store on the same directory."""
        await FileStore(temp_cache_dir).put_forever("persisted", {"a": 1})
        assert await FileStore(temp_cache_dir).get("persisted") == {"a": 1}

    async def test_pull(self, file_store: FileStore) -> None:
        await file_store.put("key1", [1, 2], ttl=10)
        assert await file_store.pull("key1") == [1, 2]
        assert await file_store.has("key1") is False

    async def test_forget(self, file_store: FileStore) -> None:
        await file_store.put("key1", "value1", ttl=10)
        assert await file_store.forget("key1") is True
        assert await file_store.get("key1") is None

    async def test_expiry(self, file_store: FileStore, monkeypatch: pytest.MonkeyPatch) -> None:
        now = time.time()
        monkeypatch.setattr(time, "time", lambda: now)
        await file_store.put("key1", "value1", ttl=1)

        monkeypatch.setattr(time, "time", lambda: now + 61)
        assert await file_store.has("key1") is False

    async def test_forget_expired_entry(self, file_store: FileStore, monkeypatch: pytest.MonkeyPatch) -> None:
        """Forgetting an expired entry removes its document but reports nothing was removed."""
        now = time.time()
        monkeypatch.setattr(time, "time", lambda: now)
        await file_store.put("key1", "value1", ttl=1)
        path = file_store._path("key1")
        assert path.exists()

        monkeypatch.setattr(time, "time", lambda: now + 120)
        assert await file_store.forget("key1") is False
        assert not path.exists()

    async def test_flush(self, file_store: FileStore) -> None:
        await file_store.put_forever("a", 1)
        await file_store.put_forever("b", 2)
        await file_store.flush()
        assert await file_store.has("a") is False
        assert await file_store.has("b") is False
