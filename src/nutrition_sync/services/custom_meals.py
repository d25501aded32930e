"""Custom meal repository."""

from dataclasses import dataclass, field

from nutrition_sync.domain.custom_meals import (
    CustomMeal,
    dump_custom_meal,
    parse_custom_meal,
)
from nutrition_sync.domain.outcome import Outcome
from nutrition_sync.services.cache import CUSTOM_MEALS_KEY, CacheStore
from nutrition_sync.services.context import SyncContext
from nutrition_sync.services.gateway import CUSTOM_MEALS_COLLECTION, RemoteGateway
from nutrition_sync.services.mirror import MirroredCollection


@dataclass
class CustomMealRepository:
    """Reads and writes the session user's custom meals."""

    store: CacheStore
    gateway: RemoteGateway
    context: SyncContext
    _collection: MirroredCollection[CustomMeal] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._collection = MirroredCollection(
            collection=CUSTOM_MEALS_COLLECTION,
            cache_key=CUSTOM_MEALS_KEY,
            store=self.store,
            gateway=self.gateway,
            context=self.context,
            parse=parse_custom_meal,
            dump=dump_custom_meal,
        )

    async def fetch_all(self) -> list[CustomMeal]:
        return (await self.fetch_all_outcome()).value

    async def save(self, meal: CustomMeal) -> CustomMeal:
        return (await self.save_outcome(meal)).value

    async def delete(self, meal_id: str) -> bool:
        return (await self.delete_outcome(meal_id)).value

    async def fetch_all_outcome(self) -> Outcome[list[CustomMeal]]:
        return await self._collection.fetch_all()

    async def save_outcome(self, meal: CustomMeal) -> Outcome[CustomMeal]:
        return await self._collection.save(meal)

    async def delete_outcome(self, meal_id: str) -> Outcome[bool]:
        return await self._collection.delete(meal_id)
