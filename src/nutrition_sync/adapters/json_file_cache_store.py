"""Cache store persisted to a single JSON file."""

import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from nutrition_sync.services.cache import CacheStore

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileCacheStore(CacheStore):
    """File-backed cache store.

    The file holds one JSON object mapping keys to serialized values. It is
    read once, then rewritten through a temporary file and an atomic rename
    after every mutation.
    """

    path: Path
    _values: dict[str, str] | None = field(default=None, init=False, repr=False)

    @classmethod
    def create(cls, path: str | Path) -> "JsonFileCacheStore":
        """Create a store, making the parent directory if needed."""
        resolved = Path(path).expanduser()
        resolved.parent.mkdir(parents=True, exist_ok=True)
        return cls(path=resolved)

    async def get(self, key: str) -> str | None:
        return self._load().get(key)

    async def set(self, key: str, value: str) -> None:
        values = self._load()
        values[key] = value
        self._flush(values)

    async def remove(self, key: str) -> None:
        values = self._load()
        if values.pop(key, None) is not None:
            self._flush(values)

    async def remove_all(self, prefix: str) -> None:
        values = self._load()
        matching = [key for key in values if key.startswith(prefix)]
        for key in matching:
            values.pop(key)
        if matching:
            self._flush(values)

    async def list_keys(self) -> list[str]:
        return list(self._load())

    def _load(self) -> dict[str, str]:
        if self._values is not None:
            return self._values
        values: dict[str, str] = {}
        if self.path.exists():
            try:
                raw = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as error:
                _logger.warning(
                    "Ignoring unreadable cache file %s: %s", self.path, error
                )
            else:
                if isinstance(raw, dict):
                    values = {
                        str(key): value
                        for key, value in raw.items()
                        if isinstance(value, str)
                    }
        self._values = values
        return values

    def _flush(self, values: dict[str, str]) -> None:
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(values, handle)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
