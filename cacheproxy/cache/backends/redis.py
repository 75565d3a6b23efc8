"""
Cache Proxy - Redis Store Adapter

Asynchronous Redis adapter with:
- A single-node descriptor {host, port, database, password} merged with options
- JSON serialization for values
- TTL in minutes applied via EX seconds
- Atomic pull via GETDEL

Requires: redis>=5.0 with asyncio support

Example:
    adapter = await RedisCacheAdapter.open(RedisConfig(host="localhost", database_index=1))
    await adapter.put("greeting", {"msg": "hello"}, ttl=10)
    val = await adapter.get("greeting")
"""

from __future__ import annotations

import logging
from typing import Any

from ...config import RedisConfig, SealedSecret
from ...errors import BackendUnavailableError
from ..codec import decode_value, encode_value
from ..interface import StoreAdapter

logger = logging.getLogger(__name__)

try:
    # redis-py asyncio client (v4+)
    from redis.asyncio import Redis
    from redis.exceptions import RedisError
except ImportError as e:  # pragma: no cover
    raise ImportError(
        "Redis async client is required but not installed. "
        "Install with: pip install 'redis>=5.0.0' or add 'redis' to your dependencies."
    ) from e

DEFAULT_PORT = 6379
DEFAULT_DATABASE = 0


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


_CLIENT_OPTIONS = {
    "socket_timeout": float,
    "socket_connect_timeout": float,
    "max_connections": int,
    "health_check_interval": int,
    "username": str,
    "client_name": str,
}

# PHP stream-context style ssl options as stored by existing configurations
_SSL_OPTIONS = {
    "cafile": "ssl_ca_certs",
    "local_cert": "ssl_certfile",
    "local_pk": "ssl_keyfile",
}


def build_server_descriptor(config: RedisConfig) -> dict[str, Any]:
    """
    Build the single-node descriptor for a configuration.

    Options are merged over the base descriptor and win on key collision.
    """
    server: dict[str, Any] = {
        "host": config.host,
        "port": config.port or DEFAULT_PORT,
        "database": config.database_index if config.database_index is not None else DEFAULT_DATABASE,
        "password": config.password,
    }
    server.update(config.options)
    return server


def _client_kwargs(server: dict[str, Any]) -> dict[str, Any]:
    """Translate a descriptor into keyword arguments for the Redis client."""
    password = server.get("password")
    if isinstance(password, SealedSecret):
        password = password.reveal()

    kwargs: dict[str, Any] = {
        "host": str(server["host"]),
        "port": int(server["port"]),
        "db": int(server["database"]),
        "password": password or None,
    }

    for name, convert in _CLIENT_OPTIONS.items():
        if server.get(name) is not None:
            kwargs[name] = convert(server[name])

    ssl = server.get("ssl")
    if isinstance(ssl, dict):
        kwargs["ssl"] = True
        for name, client_name in _SSL_OPTIONS.items():
            if ssl.get(name):
                kwargs[client_name] = ssl[name]
        if "verify_peer" in ssl and not _to_bool(ssl["verify_peer"]):
            kwargs["ssl_cert_reqs"] = "none"
    elif ssl is not None:
        kwargs["ssl"] = _to_bool(ssl)

    return kwargs


class RedisCacheAdapter(StoreAdapter):
    """
    Redis store adapter with JSON serialization and TTL.

    Notes:
    - Values are stored as UTF-8 JSON strings.
    - put() applies EX = ttl minutes * 60; put_forever() sets no expiry.
    - pull() uses GETDEL (Redis 6.2+) so read-and-delete is atomic.
    """

    backend = "redis"

    def __init__(self, config: RedisConfig, client: Any | None = None) -> None:
        """
        Initialize the adapter. No connection is made until connect().

        Args:
            config: Redis configuration
            client: Pre-built client (defaults to a redis.asyncio.Redis for the descriptor)
        """
        self.server = build_server_descriptor(config)
        self.host = str(self.server["host"])
        self.port = int(self.server["port"])
        self.database = int(self.server["database"])

        if client is None:
            # The password is revealed here, at connection time only
            client = Redis(decode_responses=True, **_client_kwargs(self.server))
        self._client = client

    @classmethod
    async def open(cls, config: RedisConfig) -> RedisCacheAdapter:
        """Create an adapter and verify the server is reachable."""
        adapter = cls(config)
        await adapter.connect()
        return adapter

    async def connect(self) -> None:
        """
        Verify the connection with PING.

        Raises:
            BackendUnavailableError: If the server cannot be reached or rejects the client
        """
        details = {"host": self.host, "port": self.port, "database": self.database}
        try:
            await self._client.ping()
        except (RedisError, OSError) as e:
            logger.error(
                f"Failed to connect to Redis at {self.host}:{self.port}: {e}",
                extra={**details, "error": str(e)},
            )
            await self._client.aclose()
            raise BackendUnavailableError("redis", details={**details, "error": str(e)}) from e

        logger.info(f"Connected to Redis at {self.host}:{self.port}/{self.database}", extra=details)

    async def has(self, key: str) -> bool:
        return bool(await self._client.exists(key))

    async def get(self, key: str, default: Any = None) -> Any:
        data = await self._client.get(key)
        if data is None:
            return default
        return decode_value(data)

    async def pull(self, key: str, default: Any = None) -> Any:
        data = await self._client.getdel(key)
        if data is None:
            return default
        return decode_value(data)

    async def put(self, key: str, value: Any, ttl: int) -> None:
        await self._client.set(name=key, value=encode_value(value), ex=max(1, int(ttl) * 60))

    async def put_forever(self, key: str, value: Any) -> None:
        await self._client.set(name=key, value=encode_value(value))

    async def forget(self, key: str) -> bool:
        return bool(await self._client.delete(key))

    async def close(self) -> None:
        """Close the Redis client and release resources."""
        try:
            await self._client.aclose()
            logger.info(f"Closed Redis adapter for {self.host}:{self.port}/{self.database}")
        finally:
            await self._client.connection_pool.disconnect()
