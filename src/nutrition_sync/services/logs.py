"""Log repository with live subscriptions."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from nutrition_sync.domain.logs import Log, dump_log, parse_log
from nutrition_sync.domain.outcome import Outcome
from nutrition_sync.services.cache import LOGS_KEY, CacheStore
from nutrition_sync.services.context import SyncContext
from nutrition_sync.services.gateway import LOGS_COLLECTION, RemoteGateway
from nutrition_sync.services.mirror import MirroredCollection

LogsCallback = Callable[[list[Log]], None]


@dataclass
class LogRepository:
    """Reads and writes logs, broadcasting the full list after each change."""

    store: CacheStore
    gateway: RemoteGateway
    context: SyncContext
    _collection: MirroredCollection[Log] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._collection = MirroredCollection(
            collection=LOGS_COLLECTION,
            cache_key=LOGS_KEY,
            store=self.store,
            gateway=self.gateway,
            context=self.context,
            parse=parse_log,
            dump=dump_log,
        )

    async def fetch_all(self) -> list[Log]:
        """Return every log of the session user."""
        return (await self.fetch_all_outcome()).value

    async def fetch_by_date(self, day: date | str) -> list[Log]:
        """Return the session user's logs for one calendar date."""
        key = day.isoformat() if isinstance(day, date) else day
        return [log for log in await self.fetch_all() if log.date == key]

    async def save(self, log: Log) -> Log:
        """Insert or replace a log by id."""
        return (await self.save_outcome(log)).value

    async def delete(self, log_id: str) -> bool:
        """Delete a log by id."""
        return (await self.delete_outcome(log_id)).value

    async def subscribe(self, callback: LogsCallback) -> Callable[[], None]:
        """Register a listener and emit the current list to it."""
        unsubscribe = self.context.log_listeners.add(callback)
        self.context.log_listeners.deliver(callback, await self.fetch_all())
        return unsubscribe

    async def fetch_all_outcome(self) -> Outcome[list[Log]]:
        return await self._collection.fetch_all()

    async def save_outcome(self, log: Log) -> Outcome[Log]:
        outcome = await self._collection.save(log)
        await self._broadcast()
        return outcome

    async def delete_outcome(self, log_id: str) -> Outcome[bool]:
        outcome = await self._collection.delete(log_id)
        await self._broadcast()
        return outcome

    async def _broadcast(self) -> None:
        if not len(self.context.log_listeners):
            return
        self.context.log_listeners.broadcast(await self.fetch_all())
