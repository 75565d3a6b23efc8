"""
Cache Proxy - Store Backends

Exports the local stores and the local adapter.

Memcached and Redis adapters are lazy-loaded via factory.py to avoid
requiring their client libraries when unused.
"""

from .file import FileStore
from .local import LocalCacheAdapter
from .memory import MemoryStore

__all__ = [
    "FileStore",
    "LocalCacheAdapter",
    "MemoryStore",
]
