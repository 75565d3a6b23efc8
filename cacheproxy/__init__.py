"""
Cache Proxy - Uniform key/value access over pluggable cache backends

Read, write, conditional-create and delete with TTL and "forever" semantics,
single-key or batch, over a local store, Memcached or Redis.
"""

__version__ = "1.0.0"

from .cache import LocalStoreRegistry, StoreAdapter, create_store_adapter
from .config import BackendKind, ConfigurationResolver
from .errors import (
    BackendUnavailableError,
    CacheProxyError,
    ConfigurationError,
    ConflictError,
    InvalidRequestError,
    NotFoundError,
)
from .keys import to_store_key
from .registry import ServiceRegistry, create_default_registry
from .service import CacheProxyService, CacheRequest, Operation, OperationResult

__all__ = [
    "BackendKind",
    "BackendUnavailableError",
    "CacheProxyError",
    "CacheProxyService",
    "CacheRequest",
    "ConfigurationError",
    "ConfigurationResolver",
    "ConflictError",
    "InvalidRequestError",
    "LocalStoreRegistry",
    "NotFoundError",
    "Operation",
    "OperationResult",
    "ServiceRegistry",
    "StoreAdapter",
    "create_default_registry",
    "create_store_adapter",
    "to_store_key",
]
