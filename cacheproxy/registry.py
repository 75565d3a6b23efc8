"""
Cache Proxy - Service Registry

Maps service type names (cache_local, cache_memcached, cache_redis) to the
backend they configure, and keeps the services created from them.

The registry is an explicit object: build one at startup with
create_default_registry(), pass it to whatever constructs services, and call
close_all() on shutdown.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .cache import LocalStoreRegistry
from .config import BackendKind, ConfigurationResolver
from .errors import ConfigurationError
from .service import CacheProxyService

logger = logging.getLogger(__name__)

CACHE_GROUP = "Cache"


@dataclass(frozen=True)
class ServiceType:
    """A named kind of cache service."""

    name: str
    label: str
    description: str
    backend: BackendKind
    group: str = CACHE_GROUP


DEFAULT_SERVICE_TYPES = (
    ServiceType("cache_local", "Local Cache", "Local Cache service.", BackendKind.LOCAL),
    ServiceType("cache_memcached", "Memcached", "Memcached Cache service.", BackendKind.MEMCACHED),
    ServiceType("cache_redis", "Redis", "Redis Cache service.", BackendKind.REDIS),
)


class ServiceRegistry:
    """
    Registry of service types and live service instances.

    Each service instance owns its own store adapter; instances are never
    shared between names.
    """

    def __init__(
        self,
        local_stores: LocalStoreRegistry | None = None,
        resolver: ConfigurationResolver | None = None,
    ) -> None:
        self.local_stores = local_stores or LocalStoreRegistry()
        self.resolver = resolver or ConfigurationResolver()
        self._types: dict[str, ServiceType] = {}
        self._services: dict[str, CacheProxyService] = {}
        # Serializes creation so one name never opens two backend connections
        self._create_lock = asyncio.Lock()

    def add_type(self, service_type: ServiceType) -> None:
        """Register a service type."""
        if service_type.name in self._types:
            logger.warning("Replacing registered service type: %s", service_type.name)
        self._types[service_type.name] = service_type

    def get_type(self, name: str) -> ServiceType:
        """
        Look up a service type.

        Raises:
            ConfigurationError: If the type is not registered
        """
        try:
            return self._types[name]
        except KeyError as e:
            raise ConfigurationError(
                f"Unknown service type: {name}",
                details={"type": name, "supported": list(self._types)},
            ) from e

    def list_types(self) -> list[ServiceType]:
        """List registered service types."""
        return list(self._types.values())

    async def create_service(
        self,
        name: str,
        type_name: str,
        record: Mapping[str, Any],
    ) -> CacheProxyService:
        """
        Create a service from a persisted configuration record.

        Returns the existing instance if a service with this name was already created.

        Args:
            name: Service name
            type_name: Registered service type name
            record: Raw configuration record

        Raises:
            ConfigurationError: If the type is unknown or the record is invalid
            BackendUnavailableError: If a network backend cannot be reached
        """
        async with self._create_lock:
            if name in self._services:
                logger.debug("Returning existing cache service: %s", name)
                return self._services[name]

            service_type = self.get_type(type_name)
            config = self.resolver.resolve(service_type.backend, record)

            logger.info(
                "Creating cache service '%s' of type %s",
                name,
                service_type.name,
                extra={"service": name, "type": service_type.name, "backend": service_type.backend.value},
            )
            service = await CacheProxyService.open(name, config, self.local_stores)
            self._services[name] = service
            return service

    def get_service(self, name: str) -> CacheProxyService | None:
        """Get a created service by name."""
        return self._services.get(name)

    def list_services(self) -> list[str]:
        """List created service names."""
        return list(self._services.keys())

    async def close_all(self) -> None:
        """
        Close every service, then the local stores the services shared.

        Errors closing one service are logged and do not stop the others.
        """
        logger.info("Closing %d cache service(s)...", len(self._services))

        for name, service in list(self._services.items()):
            try:
                await service.close()
                logger.info("Closed cache service: %s", name)
            except Exception as e:
                logger.error(
                    "Error closing cache service '%s': %s",
                    name,
                    e,
                    extra={"service": name, "error": str(e)},
                    exc_info=True,
                )

        self._services.clear()
        await self.local_stores.close_all()


def create_default_registry(
    local_stores: LocalStoreRegistry | None = None,
    resolver: ConfigurationResolver | None = None,
) -> ServiceRegistry:
    """Create a registry with the local, memcached and redis service types."""
    registry = ServiceRegistry(local_stores=local_stores, resolver=resolver)
    for service_type in DEFAULT_SERVICE_TYPES:
        registry.add_type(service_type)
    return registry
