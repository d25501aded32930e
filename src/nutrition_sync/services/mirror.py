"""Remote-first document collections mirrored into the local cache."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Generic, Protocol, TypeVar

from nutrition_sync.domain.outcome import LocalFallback, Outcome, Remote
from nutrition_sync.services.cache import CacheStore, load_list, store_json
from nutrition_sync.services.context import SyncContext
from nutrition_sync.services.gateway import RemoteGateway

_logger = logging.getLogger(__name__)


class Document(Protocol):
    """Entity with a caller-assigned id owned by a single user."""

    id: str
    uid: str


D = TypeVar("D", bound=Document)


@dataclass
class MirroredCollection(Generic[D]):
    """Document collection that prefers the remote backend.

    Successful remote reads replace the local mirror; remote writes are
    mirrored before returning. Any remote exception makes the call run
    against the mirror instead.
    """

    collection: str
    cache_key: str
    store: CacheStore
    gateway: RemoteGateway
    context: SyncContext
    parse: Callable[[dict[str, object]], D]
    dump: Callable[[D], dict[str, object]]

    async def fetch_all(self) -> Outcome[list[D]]:
        """Return the session user's documents."""
        uid = self.context.uid
        if await self.gateway.initialize():
            try:
                rows = await self.gateway.list_documents(self.collection, uid)
                items = [self.parse(row) for row in rows]
            except Exception as error:  # noqa: BLE001
                _logger.warning(
                    "fetch %s from remote failed, using local: %s",
                    self.collection,
                    error,
                )
            else:
                await store_json(
                    self.store, self.cache_key, [self.dump(item) for item in items]
                )
                return Remote(items)
        return LocalFallback(await self._local_items(uid))

    async def save(self, item: D) -> Outcome[D]:
        """Upsert a document by id, stamped with the session uid."""
        stamped = replace(item, uid=self.context.uid)
        if await self.gateway.initialize():
            try:
                await self.gateway.set_document(
                    self.collection, stamped.id, self.dump(stamped)
                )
            except Exception as error:  # noqa: BLE001
                _logger.warning(
                    "save %s id=%s to remote failed, saving local: %s",
                    self.collection,
                    stamped.id,
                    error,
                )
            else:
                await self._mirror_upsert(stamped)
                return Remote(stamped)
        await self._mirror_upsert(stamped)
        return LocalFallback(stamped)

    async def delete(self, item_id: str) -> Outcome[bool]:
        """Delete a document by id; the local mirror is always updated."""
        if await self.gateway.initialize():
            try:
                await self.gateway.delete_document(self.collection, item_id)
            except Exception as error:  # noqa: BLE001
                _logger.warning(
                    "delete %s id=%s on remote failed, deleting local: %s",
                    self.collection,
                    item_id,
                    error,
                )
            else:
                await self._mirror_remove(item_id)
                return Remote(True)
        await self._mirror_remove(item_id)
        return LocalFallback(True)

    async def _local_items(self, uid: str) -> list[D]:
        items = [self.parse(row) for row in await load_list(self.store, self.cache_key)]
        return [item for item in items if item.uid == uid]

    async def _mirror_upsert(self, item: D) -> None:
        rows = await load_list(self.store, self.cache_key)
        payload = self.dump(item)
        for index, row in enumerate(rows):
            if str(row.get("id")) == item.id:
                rows[index] = payload
                break
        else:
            rows.append(payload)
        await store_json(self.store, self.cache_key, rows)

    async def _mirror_remove(self, item_id: str) -> None:
        rows = await load_list(self.store, self.cache_key)
        kept = [row for row in rows if str(row.get("id")) != item_id]
        await store_json(self.store, self.cache_key, kept)
