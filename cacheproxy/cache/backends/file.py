"""
Cache Proxy - File Store

Local store that keeps one JSON document per key under a directory.
Entries survive process restarts; expiry is checked on read.

File layout: <directory>/<sha1[:2]>/<sha1>.json
"""

import asyncio
import hashlib
import json
import logging
import time
from pathlib import Path
from typing import Any

from ..codec import encode_value
from ..interface import StoreAdapter

logger = logging.getLogger(__name__)


class FileStore(StoreAdapter):
    """File-backed store with per-key expiry."""

    backend = "file"

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)
        self._lock = asyncio.Lock()

    def _path(self, key: str) -> Path:
        digest = hashlib.sha1(key.encode("utf-8")).hexdigest()
        return self.directory / digest[:2] / f"{digest}.json"

    def _read(self, key: str) -> tuple[bool, Any]:
        path = self._path(key)
        if not path.exists():
            return False, None

        document = json.loads(path.read_text(encoding="utf-8"))
        expires_at = document.get("expires_at")
        if expires_at is not None and time.time() > expires_at:
            path.unlink(missing_ok=True)
            return False, None

        return True, document["value"]

    def _write(self, key: str, value: Any, expires_at: float | None) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        document = '{"key":%s,"expires_at":%s,"value":%s}' % (
            json.dumps(key),
            json.dumps(expires_at),
            encode_value(value),
        )
        # Write then rename so readers never see a partial document
        tmp = path.with_suffix(".tmp")
        tmp.write_text(document, encoding="utf-8")
        tmp.replace(path)

    def _delete(self, key: str) -> bool:
        # _read unlinks an expired document and reports it absent
        found, _ = self._read(key)
        if not found:
            return False
        self._path(key).unlink(missing_ok=True)
        return True

    async def has(self, key: str) -> bool:
        async with self._lock:
            found, _ = await asyncio.to_thread(self._read, key)
            return found

    async def get(self, key: str, default: Any = None) -> Any:
        async with self._lock:
            found, value = await asyncio.to_thread(self._read, key)
            return value if found else default

    async def pull(self, key: str, default: Any = None) -> Any:
        async with self._lock:
            found, value = await asyncio.to_thread(self._read, key)
            if not found:
                return default
            await asyncio.to_thread(self._delete, key)
            return value

    async def put(self, key: str, value: Any, ttl: int) -> None:
        async with self._lock:
            await asyncio.to_thread(self._write, key, value, time.time() + ttl * 60)

    async def put_forever(self, key: str, value: Any) -> None:
        async with self._lock:
            await asyncio.to_thread(self._write, key, value, None)

    async def forget(self, key: str) -> bool:
        async with self._lock:
            return await asyncio.to_thread(self._delete, key)

    async def flush(self) -> None:
        """Remove every cached document."""
        async with self._lock:
            removed = await asyncio.to_thread(self._flush)
            logger.info(f"Cleared {removed} entries from file store at {self.directory}")

    def _flush(self) -> int:
        removed = 0
        if not self.directory.exists():
            return removed
        for path in self.directory.glob("*/*.json"):
            path.unlink(missing_ok=True)
            removed += 1
        return removed
