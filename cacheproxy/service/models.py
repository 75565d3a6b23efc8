"""
Cache Proxy - Request/Result Models

Backend-agnostic description of an inbound cache request and its outcome,
as exchanged with a collaborating transport layer.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

HTTP_OK = 200
HTTP_CREATED = 201


class Operation(str, Enum):
    """Operation kinds understood by the cache proxy."""

    FETCH = "fetch"
    UPSERT = "upsert"
    CREATE = "create"
    PARTIAL_UPDATE = "partial_update"
    DELETE = "delete"

    @classmethod
    def from_http_method(cls, method: str) -> "Operation":
        """Map an HTTP verb to its operation (GET, PUT, POST, PATCH, DELETE)."""
        try:
            return _HTTP_METHODS[method.upper()]
        except KeyError as e:
            raise ValueError(f"Unsupported HTTP method: {method}") from e


_HTTP_METHODS = {
    "GET": Operation.FETCH,
    "PUT": Operation.UPSERT,
    "POST": Operation.CREATE,
    "PATCH": Operation.PARTIAL_UPDATE,
    "DELETE": Operation.DELETE,
}


class CacheRequest(BaseModel):
    """An inbound cache operation request."""

    model_config = ConfigDict(frozen=True)

    operation: Operation = Field(description="Operation to perform")
    resource_path: str | None = Field(default=None, description="Hierarchical resource path (empty = batch)")
    ttl: int | None = Field(default=None, description="TTL in minutes overriding the service default")
    forever: bool = Field(default=False, description="Store without expiry")
    default: Any = Field(default=None, description="Value returned by fetch when the key is absent")
    clear: bool = Field(default=False, description="Delete the key after reading it")
    pull: bool = Field(default=False, description="Alias of clear")
    body: Any = Field(default=None, description="Raw request body or already-decoded payload")
    content_type: str | None = Field(default=None, description="Declared body content type")


@dataclass(frozen=True)
class OperationResult:
    """Result of an operation and the status a transport should report."""

    content: Any
    status_code: int = HTTP_OK

    @property
    def created(self) -> bool:
        return self.status_code == HTTP_CREATED
