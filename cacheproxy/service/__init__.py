"""
Cache Proxy - Service Module

The operation engine and the request/result models it exchanges with
transport layers.
"""

from .engine import CacheProxyService
from .models import HTTP_CREATED, HTTP_OK, CacheRequest, Operation, OperationResult
from .payload import interpret_payload, looks_structured

__all__ = [
    "CacheProxyService",
    "CacheRequest",
    "Operation",
    "OperationResult",
    "HTTP_OK",
    "HTTP_CREATED",
    "interpret_payload",
    "looks_structured",
]
