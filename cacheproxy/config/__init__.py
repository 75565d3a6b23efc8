"""
Cache Proxy - Configuration Module

Provides typed configuration models, secret sealing and record resolution.
"""

from .loader import load_service_config
from .resolver import ConfigurationResolver
from .schemas import (
    CONFIG_MODELS,
    DEFAULT_HOST,
    DEFAULT_TTL_MINUTES,
    BackendKind,
    LocalConfig,
    LogLevel,
    MemcachedConfig,
    NetworkConfig,
    RedisConfig,
    ServiceConfig,
)
from .secrets import SealedSecret, SecretCipher

__all__ = [
    # Loader / resolver
    "load_service_config",
    "ConfigurationResolver",
    # Enums
    "BackendKind",
    "LogLevel",
    # Config models
    "ServiceConfig",
    "LocalConfig",
    "NetworkConfig",
    "MemcachedConfig",
    "RedisConfig",
    "CONFIG_MODELS",
    "DEFAULT_HOST",
    "DEFAULT_TTL_MINUTES",
    # Secrets
    "SealedSecret",
    "SecretCipher",
]
