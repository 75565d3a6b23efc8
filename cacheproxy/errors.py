"""
Cache Proxy - Core Error Types

Defines the exception hierarchy for the cache proxy.
All exceptions inherit from CacheProxyError for consistent error handling.

Every error carries an HTTP-equivalent status code and an ErrorCode so that a
collaborating transport layer can render it without knowing the error type.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standard error codes for cache proxy responses."""

    INVALID_REQUEST = "INVALID_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    BACKEND_UNAVAILABLE = "BACKEND_UNAVAILABLE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class CacheProxyError(Exception):
    """Base exception for all cache proxy errors."""

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.__class__.__name__,
            "error_code": self.error_code.value,
            "message": self.message,
            "details": self.details,
        }


class InvalidRequestError(CacheProxyError):
    """Raised when a request is missing its key, has an empty payload, or is malformed."""

    error_code = ErrorCode.INVALID_REQUEST

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, details, status_code=400)


class NotFoundError(CacheProxyError):
    """Raised when a key is absent from the store and no default was supplied."""

    error_code = ErrorCode.NOT_FOUND

    def __init__(self, key: str):
        message = f"No value found for key '{key}'."
        super().__init__(message, {"key": key}, status_code=404)
        self.key = key


class ConflictError(CacheProxyError):
    """Raised when a create targets one or more keys that already exist."""

    error_code = ErrorCode.CONFLICT

    def __init__(self, keys: list[str], message: str | None = None):
        if message is None:
            if len(keys) == 1:
                message = f"Key '{keys[0]}' already exists in cache. Use replace to update existing key."
            else:
                message = f"Nothing was stored in cache. One or more key(s) already exists ({','.join(keys)})"
        super().__init__(message, {"keys": list(keys)}, status_code=409)
        self.keys = list(keys)


class ConfigurationError(CacheProxyError):
    """Raised when service configuration is invalid or references an unknown store."""

    error_code = ErrorCode.CONFIGURATION_ERROR

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, details, status_code=500)


class BackendUnavailableError(CacheProxyError):
    """Raised when a network cache backend cannot be reached at service start."""

    error_code = ErrorCode.BACKEND_UNAVAILABLE

    def __init__(self, backend: str, details: dict[str, Any] | None = None):
        message = f"Failed to connect to cache backend: {backend}"
        super().__init__(message, details, status_code=503)
        self.backend = backend


def error_response(error: Exception) -> tuple[dict[str, Any], int]:
    """
    Build a response body and status code for an error.

    Cache proxy errors render through their own to_dict(); anything else is
    reported as an internal error without leaking its message.

    Args:
        error: Exception raised while handling a request

    Returns:
        Tuple of (response body, status code)
    """
    if isinstance(error, CacheProxyError):
        body = error.to_dict()
        body["success"] = False
        return body, error.status_code

    return (
        {
            "success": False,
            "error": "InternalError",
            "error_code": ErrorCode.INTERNAL_ERROR.value,
            "message": "Internal error while handling cache request",
            "details": {},
        },
        500,
    )
