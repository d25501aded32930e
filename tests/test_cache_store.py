"""Tests for cache stores."""

import asyncio
from pathlib import Path

from nutrition_sync.adapters.json_file_cache_store import JsonFileCacheStore
from nutrition_sync.services.cache import (
    InMemoryCacheStore,
    load_json,
    load_list,
    profile_key,
    store_json,
)


def test_in_memory_store_remove_all_by_prefix() -> None:
    store = InMemoryCacheStore({"user:a": "{}", "user:b": "{}", "logs": "[]"})

    asyncio.run(store.remove_all("user:"))

    assert asyncio.run(store.list_keys()) == ["logs"]


def test_load_json_discards_corrupt_values() -> None:
    store = InMemoryCacheStore({"logs": "{not json"})

    assert asyncio.run(load_json(store, "logs", default=[])) == []
    assert asyncio.run(load_list(store, "logs")) == []


def test_load_list_skips_non_objects() -> None:
    store = InMemoryCacheStore()
    asyncio.run(store_json(store, "logs", [{"id": "a"}, "junk", 3]))

    assert asyncio.run(load_list(store, "logs")) == [{"id": "a"}]


def test_profile_key() -> None:
    assert profile_key("abc") == "user:abc"


def test_json_file_store_persists_between_instances(tmp_path: Path) -> None:
    path = tmp_path / "cache" / "store.json"
    store = JsonFileCacheStore.create(path)

    asyncio.run(store.set("logs", "[]"))
    asyncio.run(store.set("user:a", "{}"))
    asyncio.run(store.remove("user:a"))
    reopened = JsonFileCacheStore.create(path)

    assert asyncio.run(reopened.get("logs")) == "[]"
    assert asyncio.run(reopened.get("user:a")) is None
    assert list(path.parent.iterdir()) == [path]


def test_json_file_store_ignores_unreadable_file(tmp_path: Path) -> None:
    path = tmp_path / "store.json"
    path.write_text("garbage", encoding="utf-8")
    store = JsonFileCacheStore(path)

    assert asyncio.run(store.list_keys()) == []
    asyncio.run(store.set("logs", "[]"))

    assert asyncio.run(JsonFileCacheStore(path).get("logs")) == "[]"
