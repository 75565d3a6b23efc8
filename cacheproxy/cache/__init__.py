"""
Cache Proxy - Cache Module

Store adapters behind a single interface.

- interface.py: Abstract adapter interface all backends implement
- factory.py: Single source of truth for adapter creation
- stores.py: Registry of named local stores
- backends/: Local stores and Local/Memcached/Redis adapters

Usage:
    from cacheproxy.cache import LocalStoreRegistry, MemoryStore, create_store_adapter

    stores = LocalStoreRegistry()
    stores.register("memory", MemoryStore(), default=True)
    adapter = await create_store_adapter(LocalConfig(), local_stores=stores)
"""

from .backends import FileStore, LocalCacheAdapter, MemoryStore
from .factory import create_store_adapter
from .interface import StoreAdapter
from .stores import LocalStoreRegistry

__all__ = [
    "create_store_adapter",
    "StoreAdapter",
    "LocalStoreRegistry",
    "LocalCacheAdapter",
    "MemoryStore",
    "FileStore",
]
