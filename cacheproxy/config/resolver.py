"""
Cache Proxy - Configuration Resolver

Turns a persisted per-service configuration record into a validated
ServiceConfig. Lookup placeholders such as "{redis_host}" are replaced from
the resolver's lookup table, and the password is unsealed only long enough
to substitute lookups before being sealed again.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from ..errors import ConfigurationError
from .schemas import CONFIG_MODELS, BackendKind, ServiceConfig
from .secrets import SealedSecret, SecretCipher

logger = logging.getLogger(__name__)

_LOOKUP_PATTERN = re.compile(r"\{([A-Za-z0-9_.\-]+)\}")


class ConfigurationResolver:
    """
    Validates and normalizes configuration records.

    Args:
        lookups: Values substituted for "{name}" placeholders
        cipher: Cipher that encrypted stored passwords. When omitted, stored
            passwords are plaintext and get sealed with an ephemeral cipher.
    """

    def __init__(
        self,
        lookups: Mapping[str, Any] | None = None,
        cipher: SecretCipher | None = None,
    ) -> None:
        self.lookups = dict(lookups or {})
        self.cipher = cipher

    def replace_lookups(self, value: Any) -> Any:
        """Substitute lookup placeholders in strings, recursing into mappings and lists."""
        if isinstance(value, str):
            # A value that is exactly one placeholder takes the lookup's own type
            whole = _LOOKUP_PATTERN.fullmatch(value)
            if whole and whole.group(1) in self.lookups:
                return self.lookups[whole.group(1)]
            return _LOOKUP_PATTERN.sub(self._lookup_or_keep, value)
        if isinstance(value, Mapping):
            return {k: self.replace_lookups(v) for k, v in value.items()}
        if isinstance(value, list):
            return [self.replace_lookups(v) for v in value]
        return value

    def _lookup_or_keep(self, match: re.Match[str]) -> str:
        name = match.group(1)
        if name in self.lookups:
            return str(self.lookups[name])
        return match.group(0)

    def _seal_password(self, record: dict[str, Any]) -> None:
        password = record.get("password")
        if password is None or password == "" or isinstance(password, SealedSecret):
            return

        if self.cipher is not None:
            plaintext = self.cipher.decrypt(str(password))
        else:
            plaintext = str(password)

        plaintext = str(self.replace_lookups(plaintext))
        record["password"] = SealedSecret.from_plaintext(plaintext, self.cipher)

    def resolve(self, backend: BackendKind | str, record: Mapping[str, Any]) -> ServiceConfig:
        """
        Build a validated configuration for the given backend.

        Args:
            backend: Backend kind the record belongs to
            record: Raw configuration record (as persisted)

        Returns:
            Validated, immutable ServiceConfig subclass instance

        Raises:
            ConfigurationError: If the backend is unknown or the record is invalid
        """
        try:
            kind = BackendKind(backend)
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown cache backend: {backend}",
                details={"backend": str(backend), "supported": [k.value for k in BackendKind]},
            ) from e

        if not record:
            raise ConfigurationError(
                "No service configuration found for cache service.",
                details={"backend": kind.value},
            )

        data = {k: v for k, v in record.items() if k != "password"}
        data = self.replace_lookups(data)
        if "password" in record:
            data["password"] = record["password"]
            self._seal_password(data)
        data["backend"] = kind

        model = CONFIG_MODELS[kind]
        try:
            config = model.model_validate(data)
        except ValidationError as e:
            logger.error(
                f"Configuration validation failed for {kind.value} cache: {e}",
                extra={"backend": kind.value, "validation_errors": e.errors(include_input=False)},
            )
            raise ConfigurationError(
                f"Invalid {kind.value} cache configuration.",
                details={"backend": kind.value, "validation_errors": e.errors(include_input=False)},
            ) from e

        logger.debug(
            "Resolved %s cache configuration",
            kind.value,
            extra={"backend": kind.value, "default_ttl": config.default_ttl},
        )
        return config
