"""
Cache Proxy - Sealed Secrets

Secrets such as backend passwords are stored encrypted and only decrypted
when a connection is opened. SealedSecret keeps the ciphertext and exposes
the plaintext solely through reveal(), so every decryption point is explicit.

Encryption uses Fernet with a key derived from a passphrase via PBKDF2.
"""

from __future__ import annotations

import base64
import logging
import secrets

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

_SALT = b"cacheproxy-secrets"
_ITERATIONS = 100_000
_MASK = "**********"


class SecretCipher:
    """Fernet cipher derived from a passphrase."""

    def __init__(self, passphrase: str):
        if not passphrase:
            raise ConfigurationError("Encryption passphrase must not be empty")

        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=_SALT,
            iterations=_ITERATIONS,
        )
        key = base64.urlsafe_b64encode(kdf.derive(passphrase.encode("utf-8")))
        self._fernet = Fernet(key)

    @classmethod
    def ephemeral(cls) -> SecretCipher:
        """Create a cipher with a random, process-local passphrase."""
        return cls(secrets.token_urlsafe(32))

    def encrypt(self, plaintext: str) -> str:
        """Encrypt plaintext and return a URL-safe token."""
        return self._fernet.encrypt(plaintext.encode("utf-8")).decode("utf-8")

    def decrypt(self, token: str) -> str:
        """
        Decrypt a token produced by encrypt().

        Raises:
            ConfigurationError: If the token is malformed or was sealed with another key
        """
        try:
            return self._fernet.decrypt(token.encode("utf-8")).decode("utf-8")
        except InvalidToken as e:
            logger.error("Failed to decrypt sealed secret (invalid token or wrong key)")
            raise ConfigurationError(
                "Failed to decrypt secret: invalid token or wrong encryption key",
                details={"error": "InvalidToken"},
            ) from e


class SealedSecret:
    """
    An encrypted secret value.

    sealed() returns the ciphertext, which is safe to persist or log.
    reveal() decrypts and returns the plaintext.
    """

    __slots__ = ("_token", "_cipher")

    def __init__(self, token: str, cipher: SecretCipher):
        self._token = token
        self._cipher = cipher

    @classmethod
    def from_plaintext(cls, plaintext: str, cipher: SecretCipher | None = None) -> SealedSecret:
        """Seal a plaintext secret. Uses an ephemeral cipher when none is given."""
        cipher = cipher or SecretCipher.ephemeral()
        return cls(cipher.encrypt(plaintext), cipher)

    @classmethod
    def from_ciphertext(cls, token: str, cipher: SecretCipher) -> SealedSecret:
        """Wrap an already-encrypted token, verifying that the cipher can open it."""
        cipher.decrypt(token)
        return cls(token, cipher)

    def sealed(self) -> str:
        """Return the encrypted token."""
        return self._token

    def reveal(self) -> str:
        """Decrypt and return the plaintext."""
        return self._cipher.decrypt(self._token)

    def __repr__(self) -> str:
        return f"SealedSecret('{_MASK}')"

    __str__ = __repr__
