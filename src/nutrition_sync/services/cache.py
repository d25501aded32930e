"""Local key-value cache abstractions."""

import json
import logging
from dataclasses import dataclass
from typing import Protocol

LOGS_KEY = "logs"
CUSTOM_MEALS_KEY = "customMeals"
LOCAL_USERS_KEY = "local_users"
LOCAL_SESSION_KEY = "local_session"
BACKEND_TOKEN_KEY = "backend_token"
PROFILE_KEY_PREFIX = "user:"

_logger = logging.getLogger(__name__)


def profile_key(uid: str) -> str:
    """Return the cache key holding a user's profile."""
    return f"{PROFILE_KEY_PREFIX}{uid}"


class CacheStore(Protocol):
    """On-device store of serialized values keyed by string."""

    async def get(self, key: str) -> str | None:
        """Return the stored value, if present."""

    async def set(self, key: str, value: str) -> None:
        """Store a value under a key."""

    async def remove(self, key: str) -> None:
        """Remove a key if present."""

    async def remove_all(self, prefix: str) -> None:
        """Remove every key starting with ``prefix``."""

    async def list_keys(self) -> list[str]:
        """Return all stored keys."""


@dataclass
class InMemoryCacheStore(CacheStore):
    """Process-local cache store."""

    _values: dict[str, str]

    def __init__(self, values: dict[str, str] | None = None) -> None:
        self._values = dict(values or {})

    async def get(self, key: str) -> str | None:
        return self._values.get(key)

    async def set(self, key: str, value: str) -> None:
        self._values[key] = value

    async def remove(self, key: str) -> None:
        self._values.pop(key, None)

    async def remove_all(self, prefix: str) -> None:
        for key in [key for key in self._values if key.startswith(prefix)]:
            self._values.pop(key, None)

    async def list_keys(self) -> list[str]:
        return list(self._values)


async def load_json(store: CacheStore, key: str, default: object = None) -> object:
    """Read and decode a JSON value, returning ``default`` when absent or corrupt."""
    raw = await store.get(key)
    if raw is None:
        return default
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        _logger.warning("Discarding unreadable cache value for key=%s", key)
        return default


async def store_json(store: CacheStore, key: str, value: object) -> None:
    """Encode and store a JSON value."""
    await store.set(key, json.dumps(value))


async def load_list(store: CacheStore, key: str) -> list[dict[str, object]]:
    """Read a JSON array of objects, skipping anything that is not an object."""
    value = await load_json(store, key, default=[])
    if not isinstance(value, list):
        return []
    return [row for row in value if isinstance(row, dict)]
