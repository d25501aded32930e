"""Password hashing for local credentials."""

import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass
from typing import Protocol

_logger = logging.getLogger(__name__)


class PasswordHasher(Protocol):
    """Deterministic one-way hash of a salted password."""

    def hash(self, value: str) -> str:
        """Return the digest of ``value``."""


@dataclass
class Sha256Hasher(PasswordHasher):
    """SHA-256 hex digest."""

    def hash(self, value: str) -> str:
        return hashlib.sha256(value.encode("utf-8")).hexdigest()


@dataclass
class PlaintextHasher(PasswordHasher):
    """Degraded hasher that stores its input unchanged.

    Credentials written through it are effectively plaintext. It exists only
    for parity with devices that had no digest available.
    """

    def __post_init__(self) -> None:
        _logger.error(
            "Plaintext password hashing is enabled; local credentials are not protected"
        )

    def hash(self, value: str) -> str:
        _logger.warning("Storing password digest without hashing")
        return value


def generate_salt() -> str:
    """Return a fresh random salt."""
    return secrets.token_hex(16)


def hash_password(hasher: PasswordHasher, salt: str, password: str) -> str:
    return hasher.hash(salt + password)


def verify_password(
    hasher: PasswordHasher, salt: str, password: str, expected_hash: str
) -> bool:
    """Check a password against a stored salt and digest."""
    actual = hash_password(hasher, salt, password)
    return hmac.compare_digest(actual.encode("utf-8"), expected_hash.encode("utf-8"))
