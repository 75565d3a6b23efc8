"""
Cache Proxy - Operation Engine

Implements fetch, upsert, create, partial update and delete against one
store adapter. A service owns its adapter for its whole lifetime.

Single-key mode applies when the resource path maps to a key; otherwise the
request is in batch mode and the payload must be a key/value mapping.

Batch writes are sequential and not transactional: if the store fails part
way, earlier entries stay written. Create checks existence before writing;
two concurrent creates of the same key may both pass the check.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from ..cache import LocalStoreRegistry, StoreAdapter, create_store_adapter
from ..config import ServiceConfig
from ..errors import ConflictError, InvalidRequestError, NotFoundError
from ..keys import to_store_key
from .models import HTTP_CREATED, HTTP_OK, CacheRequest, Operation, OperationResult
from .payload import interpret_payload

logger = logging.getLogger(__name__)

_MISSING: Any = object()


def _is_empty(payload: Any) -> bool:
    if payload is None:
        return True
    if isinstance(payload, (str, bytes, Mapping, list, tuple)):
        return len(payload) == 0
    return False


class CacheProxyService:
    """
    A cache service bound to one backend.

    Build with CacheProxyService.open() so the adapter is created (and, for
    network backends, connected) once at service start.
    """

    def __init__(self, name: str, config: ServiceConfig, store: StoreAdapter) -> None:
        self.name = name
        self.config = config
        self.store = store

    @classmethod
    async def open(
        cls,
        name: str,
        config: ServiceConfig,
        local_stores: LocalStoreRegistry | None = None,
    ) -> CacheProxyService:
        """
        Create a service and its store adapter.

        Raises:
            ConfigurationError: If the local store is unknown or config is invalid
            BackendUnavailableError: If a network backend cannot be reached
        """
        store = await create_store_adapter(config, local_stores)
        logger.info(
            f"Cache service '{name}' ready",
            extra={"service": name, "backend": config.backend.value},
        )
        return cls(name, config, store)

    async def close(self) -> None:
        """Release the store adapter."""
        await self.store.close()
        logger.debug(f"Cache service '{self.name}' closed")

    async def __aenter__(self) -> CacheProxyService:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @property
    def default_ttl(self) -> int:
        """Configured TTL in minutes."""
        return self.config.default_ttl

    # ------------ Operations ------------

    async def fetch(self, resource_path: str | None, default: Any = _MISSING, pull: bool = False) -> Any:
        """
        Read a key.

        Args:
            resource_path: Resource path of the key
            default: Returned when the key is absent (omit to get NotFoundError)
            pull: Delete the key after reading it

        Raises:
            InvalidRequestError: If no key is given
            NotFoundError: If the key is absent and no default is given
        """
        key = to_store_key(resource_path)
        if key is None:
            raise InvalidRequestError("No key/resource provided. Please provide a cache key to retrieve.")

        has_default = default is not _MISSING
        if not has_default and not await self.store.has(key):
            raise NotFoundError(key)

        fallback = default if has_default else None
        if pull:
            logger.debug("Pulling key from cache", extra={"service": self.name, "key": key})
            return await self.store.pull(key, fallback)
        return await self.store.get(key, fallback)

    async def upsert(
        self,
        resource_path: str | None,
        payload: Any,
        ttl: int | None = None,
        forever: bool = False,
    ) -> dict[str, Any]:
        """
        Write one key, or every entry of a key/value mapping in batch mode.

        Args:
            resource_path: Resource path of the key (empty for batch mode)
            payload: Value to store, or mapping of key -> value in batch mode
            ttl: TTL in minutes (service default if None)
            forever: Store without expiry

        Returns:
            {key: value} in single-key mode, {"success": True} in batch mode

        Raises:
            InvalidRequestError: If the payload is empty, the batch payload is
                not a mapping, or the ttl is not a positive integer
        """
        key = to_store_key(resource_path)
        effective_ttl = self._effective_ttl(ttl)

        if _is_empty(payload):
            raise InvalidRequestError("No value/payload provided to store in cache.")

        if key is not None:
            await self._write(key, payload, effective_ttl, forever)
            return {key: payload}

        if not isinstance(payload, Mapping):
            raise InvalidRequestError("Invalid payload provided. Please provide a key/value pair.")

        for item_key, value in payload.items():
            await self._write(str(item_key), value, effective_ttl, forever)

        logger.debug(
            "Stored batch of %d key(s)",
            len(payload),
            extra={"service": self.name, "key_count": len(payload), "forever": forever},
        )
        return {"success": True}

    async def create(
        self,
        resource_path: str | None,
        payload: Any,
        ttl: int | None = None,
        forever: bool = False,
    ) -> dict[str, Any]:
        """
        Write like upsert(), but only if none of the keys exist yet.

        In batch mode every key is checked before anything is written; if any
        exists the whole batch is rejected.

        Raises:
            ConflictError: Listing every key that already exists
        """
        key = to_store_key(resource_path)

        if key is not None:
            if await self.store.has(key):
                raise ConflictError([key])
        elif isinstance(payload, Mapping):
            existing = [str(k) for k in payload if await self.store.has(str(k))]
            if existing:
                logger.info(
                    "Rejected batch create, keys already exist",
                    extra={"service": self.name, "keys": existing},
                )
                raise ConflictError(existing)

        return await self.upsert(resource_path, payload, ttl=ttl, forever=forever)

    async def partial_update(
        self,
        resource_path: str | None,
        payload: Any,
        ttl: int | None = None,
        forever: bool = False,
    ) -> dict[str, Any]:
        """Same as upsert(); cached values are opaque and cannot be merged."""
        return await self.upsert(resource_path, payload, ttl=ttl, forever=forever)

    async def delete(self, resource_path: str | None) -> dict[str, bool]:
        """
        Delete a key.

        Returns:
            {"success": True} if a value was removed, {"success": False} otherwise

        Raises:
            InvalidRequestError: If no key is given
        """
        key = to_store_key(resource_path)
        if key is None:
            raise InvalidRequestError("No key/resource provided. Please provide a cache key to delete.")

        return {"success": await self.store.forget(key)}

    # ------------ Request dispatch ------------

    async def handle(self, request: CacheRequest) -> OperationResult:
        """
        Perform a request and report the status a transport should use.

        Create reports 201 on success; every other operation reports 200.
        """
        handler = self._handlers()[request.operation]
        logger.debug(
            "Handling %s request",
            request.operation.value,
            extra={"service": self.name, "operation": request.operation.value, "path": request.resource_path},
        )
        return await handler(request)

    def _handlers(self) -> dict[Operation, Callable[[CacheRequest], Awaitable[OperationResult]]]:
        return {
            Operation.FETCH: self._handle_fetch,
            Operation.UPSERT: self._handle_write(self.upsert, HTTP_OK),
            Operation.CREATE: self._handle_write(self.create, HTTP_CREATED),
            Operation.PARTIAL_UPDATE: self._handle_write(self.partial_update, HTTP_OK),
            Operation.DELETE: self._handle_delete,
        }

    async def _handle_fetch(self, request: CacheRequest) -> OperationResult:
        default = request.default if request.default is not None else _MISSING
        value = await self.fetch(request.resource_path, default=default, pull=request.clear or request.pull)
        return OperationResult(value)

    def _handle_write(
        self,
        operation: Callable[..., Awaitable[dict[str, Any]]],
        status_code: int,
    ) -> Callable[[CacheRequest], Awaitable[OperationResult]]:
        async def handler(request: CacheRequest) -> OperationResult:
            payload = interpret_payload(request.body, request.content_type)
            content = await operation(request.resource_path, payload, ttl=request.ttl, forever=request.forever)
            return OperationResult(content, status_code)

        return handler

    async def _handle_delete(self, request: CacheRequest) -> OperationResult:
        return OperationResult(await self.delete(request.resource_path))

    # ------------ Helpers ------------

    def _effective_ttl(self, ttl: int | None) -> int:
        if ttl is None:
            return self.default_ttl
        if isinstance(ttl, bool) or not isinstance(ttl, int) or ttl <= 0:
            raise InvalidRequestError(
                "Invalid ttl provided. Please provide a positive number of minutes.",
                details={"ttl": ttl},
            )
        return ttl

    async def _write(self, key: str, value: Any, ttl: int, forever: bool) -> None:
        # A configured default TTL of 0 means entries never expire
        if forever or ttl == 0:
            await self.store.put_forever(key, value)
        else:
            await self.store.put(key, value, ttl)
