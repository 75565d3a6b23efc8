"""
Cache Proxy - Configuration Loader

Loads a service configuration from environment variables and .env files.

Environment Variables:
    CACHE_BACKEND: local | memcached | redis (default: local)
    CACHE_STORE: Local store name (default: process default store)
    CACHE_HOST: Server host (network backends)
    CACHE_PORT: Server port (network backends)
    CACHE_PASSWORD: Redis password (encrypted when CACHE_ENCRYPTION_KEY is set)
    CACHE_DATABASE_INDEX: Redis database index
    CACHE_OPTIONS: JSON object of connection options
    CACHE_DEFAULT_TTL: Default TTL in minutes (default: 300)
    CACHE_ENCRYPTION_KEY: Passphrase that sealed CACHE_PASSWORD
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from ..errors import ConfigurationError
from .resolver import ConfigurationResolver
from .schemas import BackendKind, ServiceConfig
from .secrets import SecretCipher

logger = logging.getLogger(__name__)

_ENV_FIELDS = {
    "CACHE_STORE": "store",
    "CACHE_HOST": "host",
    "CACHE_PORT": "port",
    "CACHE_PASSWORD": "password",
    "CACHE_DATABASE_INDEX": "database_index",
    "CACHE_OPTIONS": "options",
    "CACHE_DEFAULT_TTL": "default_ttl",
}

_LOCAL_FIELDS = {"store", "default_ttl"}


def load_service_config(
    env_file: str | None = None,
    lookups: Mapping[str, Any] | None = None,
) -> ServiceConfig:
    """
    Load a cache service configuration from the environment.

    Args:
        env_file: Path to .env file (default: .env in the working directory)
        lookups: Values substituted for "{name}" placeholders

    Returns:
        Validated ServiceConfig instance

    Raises:
        ConfigurationError: If configuration is invalid
    """
    env_path = Path(env_file) if env_file else Path.cwd() / ".env"

    if env_path.exists():
        logger.info(f"Loading environment from {env_path}")
        try:
            load_dotenv(env_path, override=True)
        except Exception as e:
            logger.error(
                f"Failed to load .env file from {env_path}: {e}",
                extra={"path": str(env_path), "error": str(e)},
                exc_info=True,
            )
            raise ConfigurationError(
                f"Failed to load environment file: {e}",
                details={"path": str(env_path), "error": str(e)},
            ) from e
    else:
        logger.debug("No .env file found, using environment variables only")

    backend = os.getenv("CACHE_BACKEND", BackendKind.LOCAL.value).strip().lower()

    record: dict[str, Any] = {}
    for env_name, field in _ENV_FIELDS.items():
        value = os.getenv(env_name)
        if value is None:
            continue
        if backend == BackendKind.LOCAL.value and field not in _LOCAL_FIELDS:
            continue
        record[field] = value

    encryption_key = os.getenv("CACHE_ENCRYPTION_KEY")
    cipher = SecretCipher(encryption_key) if encryption_key else None

    resolver = ConfigurationResolver(lookups=lookups, cipher=cipher)
    # An empty record is valid here: every field falls back to its default
    config = resolver.resolve(backend, record or {"default_ttl": None})

    logger.info(
        f"Configuration loaded successfully (backend: {config.backend.value})",
        extra={"backend": config.backend.value},
    )
    return config
