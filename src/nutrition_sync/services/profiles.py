"""User profile persistence."""

import logging
from dataclasses import dataclass

from nutrition_sync.domain.errors import NotAuthenticated
from nutrition_sync.services.cache import CacheStore, load_json, profile_key, store_json
from nutrition_sync.services.context import SyncContext
from nutrition_sync.services.gateway import RemoteGateway

_logger = logging.getLogger(__name__)


@dataclass
class ProfileService:
    """Stores a free-form profile object per user."""

    store: CacheStore
    gateway: RemoteGateway
    context: SyncContext

    async def save_profile(self, profile: dict[str, object]) -> bool:
        """Save the session user's profile, stamped with their uid."""
        session = self.context.session
        if session is None:
            raise NotAuthenticated()
        payload = {**profile, "uid": session.uid}
        if await self.gateway.initialize():
            try:
                await self.gateway.set_profile(session.uid, payload)
            except Exception as error:  # noqa: BLE001
                _logger.warning(
                    "save profile on remote failed, saving local: %s", error
                )
            else:
                return True
        await store_json(self.store, profile_key(session.uid), payload)
        return True

    async def fetch_profile(self, uid: str | None = None) -> dict[str, object] | None:
        """Return a user's profile, defaulting to the session user."""
        if uid is None:
            if self.context.session is None:
                raise NotAuthenticated()
            uid = self.context.session.uid
        if await self.gateway.initialize():
            try:
                return await self.gateway.get_profile(uid)
            except Exception as error:  # noqa: BLE001
                _logger.warning(
                    "fetch profile from remote failed, using local: %s", error
                )
        value = await load_json(self.store, profile_key(uid))
        return value if isinstance(value, dict) else None
