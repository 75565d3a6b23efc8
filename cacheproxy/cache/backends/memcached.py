"""
Cache Proxy - Memcached Store Adapter

Asynchronous Memcached adapter with:
- A single-server descriptor built from host/port merged with free-form options
- JSON serialization for values
- TTL in minutes converted to Memcached expiration times

Requires: aiomcache

Example:
    adapter = await MemcachedCacheAdapter.open(MemcachedConfig(host="10.0.0.5"))
    await adapter.put("greeting", {"msg": "hello"}, ttl=10)
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

from ...config import MemcachedConfig
from ...errors import BackendUnavailableError, InvalidRequestError
from ..codec import decode_value, encode_value
from ..interface import StoreAdapter

logger = logging.getLogger(__name__)

try:
    import aiomcache
except ImportError as e:  # pragma: no cover
    raise ImportError(
        "Memcached async client is required but not installed. "
        "Install with: pip install 'aiomcache>=0.8.0' or add 'aiomcache' to your dependencies."
    ) from e

DEFAULT_PORT = 11211
DEFAULT_WEIGHT = 100
MAX_KEY_LENGTH = 250

# Memcached reads expirations above 30 days as absolute unix timestamps
_MAX_RELATIVE_EXPTIME = 60 * 60 * 24 * 30

_CLIENT_OPTIONS = {
    "pool_size": int,
    "pool_minsize": int,
}


def build_server_descriptor(config: MemcachedConfig) -> dict[str, Any]:
    """
    Build the single-server pool descriptor for a configuration.

    Options are merged over the base descriptor and win on key collision.
    """
    server: dict[str, Any] = {
        "host": config.host,
        "port": config.port or DEFAULT_PORT,
        "weight": DEFAULT_WEIGHT,
    }
    server.update(config.options)
    return server


def _client_options(server: dict[str, Any]) -> dict[str, Any]:
    """Pick the descriptor entries understood by the client, coerced to their types."""
    options = {}
    for name, convert in _CLIENT_OPTIONS.items():
        if name in server and server[name] is not None:
            options[name] = convert(server[name])
    return options


def _exptime(ttl: int) -> int:
    seconds = max(1, int(ttl) * 60)
    if seconds > _MAX_RELATIVE_EXPTIME:
        return int(time.time()) + seconds
    return seconds


class MemcachedCacheAdapter(StoreAdapter):
    """
    Memcached store adapter.

    Notes:
    - Values are stored as UTF-8 JSON.
    - put() converts minutes to seconds; put_forever() uses exptime 0.
    - pull() is a get followed by a delete.
    """

    backend = "memcached"

    def __init__(self, config: MemcachedConfig, client: Any | None = None) -> None:
        """
        Initialize the adapter. No connection is made until connect().

        Args:
            config: Memcached configuration
            client: Pre-built client (defaults to an aiomcache.Client for the descriptor)
        """
        self.server = build_server_descriptor(config)
        self.host = str(self.server["host"])
        self.port = int(self.server["port"])

        if client is None:
            client = aiomcache.Client(self.host, self.port, **_client_options(self.server))
        self._client = client

    @classmethod
    async def open(cls, config: MemcachedConfig) -> MemcachedCacheAdapter:
        """Create an adapter and verify the server is reachable."""
        adapter = cls(config)
        await adapter.connect()
        return adapter

    async def connect(self) -> None:
        """
        Verify the connection by asking the server for its version.

        Raises:
            BackendUnavailableError: If the server cannot be reached
        """
        try:
            version = await self._client.version()
        except (OSError, asyncio.TimeoutError, aiomcache.ClientException) as e:
            logger.error(
                f"Failed to connect to Memcached at {self.host}:{self.port}: {e}",
                extra={"host": self.host, "port": self.port, "error": str(e)},
            )
            await self._client.close()
            raise BackendUnavailableError(
                "memcached",
                details={"host": self.host, "port": self.port, "error": str(e)},
            ) from e

        logger.info(
            f"Connected to Memcached at {self.host}:{self.port}",
            extra={"host": self.host, "port": self.port, "version": str(version)},
        )

    @staticmethod
    def _key(key: str) -> bytes:
        """Encode a key, rejecting ones Memcached cannot store."""
        raw = key.encode("utf-8")
        if len(raw) > MAX_KEY_LENGTH or any(b <= 32 or b == 127 for b in raw):
            raise InvalidRequestError(
                f"Invalid Memcached key '{key}': keys must be at most {MAX_KEY_LENGTH} bytes "
                "without whitespace or control characters.",
                details={"key": key},
            )
        return raw

    async def has(self, key: str) -> bool:
        return await self._client.get(self._key(key)) is not None

    async def get(self, key: str, default: Any = None) -> Any:
        data = await self._client.get(self._key(key))
        if data is None:
            return default
        return decode_value(data)

    async def pull(self, key: str, default: Any = None) -> Any:
        raw_key = self._key(key)
        data = await self._client.get(raw_key)
        if data is None:
            return default
        await self._client.delete(raw_key)
        return decode_value(data)

    async def put(self, key: str, value: Any, ttl: int) -> None:
        payload = encode_value(value).encode("utf-8")
        await self._client.set(self._key(key), payload, exptime=_exptime(ttl))

    async def put_forever(self, key: str, value: Any) -> None:
        payload = encode_value(value).encode("utf-8")
        await self._client.set(self._key(key), payload, exptime=0)

    async def forget(self, key: str) -> bool:
        return bool(await self._client.delete(self._key(key)))

    async def close(self) -> None:
        """Close the client connection pool."""
        await self._client.close()
        logger.info(f"Closed Memcached adapter for {self.host}:{self.port}")
