"""
Cache Proxy - Configuration Schemas

Typed per-service configuration models using Pydantic for validation.
One model per backend kind; every model carries a `backend` discriminant so
that the adapter factory can select its builder without type inspection.

All TTL values are expressed in minutes.
"""

import json
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .secrets import SealedSecret

DEFAULT_TTL_MINUTES = 300
DEFAULT_HOST = "127.0.0.1"


class BackendKind(str, Enum):
    """Supported cache backends."""

    LOCAL = "local"
    MEMCACHED = "memcached"
    REDIS = "redis"


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ServiceConfig(BaseModel):
    """Configuration shared by every cache service."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    backend: BackendKind
    default_ttl: int = Field(
        default=DEFAULT_TTL_MINUTES,
        ge=0,
        description="Time To Live - time in minutes before a cached value expires",
    )

    @field_validator("default_ttl", mode="before")
    @classmethod
    def default_ttl_when_unset(cls, v: Any) -> Any:
        """Treat a null/empty TTL from a persisted record as the default."""
        if v is None or v == "":
            return DEFAULT_TTL_MINUTES
        return v


class LocalConfig(ServiceConfig):
    """Local cache configuration: selects one of the registered in-process stores."""

    backend: Literal[BackendKind.LOCAL] = BackendKind.LOCAL
    store: str | None = Field(
        default=None,
        description="Name of the local store to use (defaults to the process default store)",
    )

    @field_validator("store")
    @classmethod
    def blank_store_is_unset(cls, v: str | None) -> str | None:
        """Normalize an empty store name to None."""
        if v is None:
            return None
        v = v.strip()
        return v or None


class NetworkConfig(ServiceConfig):
    """Configuration for backends reached over the network."""

    host: str = Field(default=DEFAULT_HOST, min_length=1, description="IP address/hostname of the server")
    port: int | None = Field(default=None, ge=1, le=65535, description="Server port (backend default if unset)")
    options: dict[str, Any] = Field(
        default_factory=dict,
        description="Free-form connection options merged over the server descriptor",
    )

    @field_validator("port", mode="before")
    @classmethod
    def blank_port_is_unset(cls, v: Any) -> Any:
        if v == "":
            return None
        return v

    @field_validator("options", mode="before")
    @classmethod
    def parse_options(cls, v: Any) -> Any:
        """Accept null or a JSON-encoded object as stored by the config record."""
        if v is None or v == "":
            return {}
        if isinstance(v, str):
            try:
                return json.loads(v)
            except ValueError as e:
                raise ValueError(f"options must be a JSON object: {e}") from e
        return v


class MemcachedConfig(NetworkConfig):
    """Memcached cache configuration."""

    backend: Literal[BackendKind.MEMCACHED] = BackendKind.MEMCACHED


class RedisConfig(NetworkConfig):
    """Redis cache configuration."""

    backend: Literal[BackendKind.REDIS] = BackendKind.REDIS
    password: SealedSecret | None = Field(default=None, description="Redis password (sealed)")
    database_index: int | None = Field(default=None, ge=0, description="Redis database index (0 if unset)")

    @field_validator("password", mode="before")
    @classmethod
    def seal_password(cls, v: Any) -> Any:
        """Seal a plaintext password passed directly to the model."""
        if v is None or v == "":
            return None
        if isinstance(v, str):
            return SealedSecret.from_plaintext(v)
        return v

    @field_validator("database_index", mode="before")
    @classmethod
    def blank_database_is_unset(cls, v: Any) -> Any:
        if v == "":
            return None
        return v

    @field_validator("options")
    @classmethod
    def decode_ssl_option(cls, v: dict[str, Any]) -> dict[str, Any]:
        """The ssl option may be stored as a nested JSON string."""
        ssl = v.get("ssl")
        if isinstance(ssl, str) and ssl.strip().startswith("{"):
            v = dict(v)
            v["ssl"] = json.loads(ssl)
        return v


CONFIG_MODELS: dict[BackendKind, type[ServiceConfig]] = {
    BackendKind.LOCAL: LocalConfig,
    BackendKind.MEMCACHED: MemcachedConfig,
    BackendKind.REDIS: RedisConfig,
}
