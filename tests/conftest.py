"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from nutrition_sync.config import Settings
from nutrition_sync.domain.errors import RemoteAuthRejected
from nutrition_sync.domain.models import Session
from nutrition_sync.services.auth import AuthService
from nutrition_sync.services.cache import InMemoryCacheStore
from nutrition_sync.services.context import SyncContext
from nutrition_sync.services.custom_meals import CustomMealRepository
from nutrition_sync.services.gateway import (
    EMAIL_ALREADY_IN_USE,
    INVALID_EMAIL,
    USER_NOT_FOUND,
    WEAK_PASSWORD,
    WRONG_PASSWORD,
    LocalOnlyGateway,
    RemoteGateway,
)
from nutrition_sync.services.hashing import Sha256Hasher
from nutrition_sync.services.logs import LogRepository
from nutrition_sync.services.profiles import ProfileService


@dataclass
class FakeRemoteGateway(RemoteGateway):
    """In-memory remote backend that can be taken offline."""

    configured: bool = True
    online: bool = True
    accounts: dict[str, tuple[str, str]] = field(default_factory=dict)
    documents: dict[str, dict[str, dict[str, object]]] = field(default_factory=dict)
    profiles: dict[str, dict[str, object]] = field(default_factory=dict)
    user: Session | None = None
    calls: list[str] = field(default_factory=list)

    def _check(self, action: str) -> None:
        self.calls.append(action)
        if not self.online:
            raise ConnectionError("network unreachable")

    async def initialize(self) -> bool:
        return self.configured

    def cached_user(self) -> Session | None:
        return self.user

    async def current_user(self) -> Session | None:
        self._check("current_user")
        return self.user

    async def create_account(self, email: str, password: str) -> Session:
        self._check("create_account")
        if "@" not in email:
            raise RemoteAuthRejected("Invalid email", code=INVALID_EMAIL)
        if len(password) < 6:
            raise RemoteAuthRejected("Weak password", code=WEAK_PASSWORD)
        if email in self.accounts:
            raise RemoteAuthRejected("Email in use", code=EMAIL_ALREADY_IN_USE)
        uid = f"remote-{len(self.accounts) + 1}"
        self.accounts[email] = (uid, password)
        self.user = Session(uid=uid, email=email)
        return self.user

    async def sign_in(self, email: str, password: str) -> Session:
        self._check("sign_in")
        if email not in self.accounts:
            raise RemoteAuthRejected("Not found", code=USER_NOT_FOUND)
        uid, stored = self.accounts[email]
        if stored != password:
            raise RemoteAuthRejected("Wrong password", code=WRONG_PASSWORD)
        self.user = Session(uid=uid, email=email)
        return self.user

    async def sign_out(self) -> None:
        self._check("sign_out")
        self.user = None

    async def list_documents(
        self, collection: str, uid: str
    ) -> list[dict[str, object]]:
        self._check(f"list:{collection}")
        rows = self.documents.get(collection, {}).values()
        return [dict(row) for row in rows if row.get("uid") == uid]

    async def get_document(
        self, collection: str, doc_id: str
    ) -> dict[str, object] | None:
        self._check(f"get:{collection}")
        return self.documents.get(collection, {}).get(doc_id)

    async def set_document(
        self, collection: str, doc_id: str, payload: dict[str, object]
    ) -> None:
        self._check(f"set:{collection}")
        self.documents.setdefault(collection, {})[doc_id] = dict(payload)

    async def delete_document(self, collection: str, doc_id: str) -> None:
        self._check(f"delete:{collection}")
        self.documents.get(collection, {}).pop(doc_id, None)

    async def get_profile(self, uid: str) -> dict[str, object] | None:
        self._check("get_profile")
        return self.profiles.get(uid)

    async def set_profile(self, uid: str, profile: dict[str, object]) -> None:
        self._check("set_profile")
        self.profiles[uid] = {**self.profiles.get(uid, {}), **profile}

    async def close(self) -> None:
        return None


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url=None,
        supabase_key=None,
        backend_url=None,
        remote_backend=None,
        cache_path=None,
    )


@pytest.fixture
def store() -> InMemoryCacheStore:
    return InMemoryCacheStore()


@pytest.fixture
def context() -> SyncContext:
    return SyncContext()


@pytest.fixture
def remote() -> FakeRemoteGateway:
    return FakeRemoteGateway()


@pytest.fixture
def local_auth(store: InMemoryCacheStore, context: SyncContext) -> AuthService:
    return AuthService(store, LocalOnlyGateway(), Sha256Hasher(), context)


@pytest.fixture
def remote_auth(
    store: InMemoryCacheStore, remote: FakeRemoteGateway, context: SyncContext
) -> AuthService:
    return AuthService(store, remote, Sha256Hasher(), context)


@pytest.fixture
def local_logs(store: InMemoryCacheStore, context: SyncContext) -> LogRepository:
    return LogRepository(store, LocalOnlyGateway(), context)


@pytest.fixture
def remote_logs(
    store: InMemoryCacheStore, remote: FakeRemoteGateway, context: SyncContext
) -> LogRepository:
    return LogRepository(store, remote, context)


@pytest.fixture
def local_meals(
    store: InMemoryCacheStore, context: SyncContext
) -> CustomMealRepository:
    return CustomMealRepository(store, LocalOnlyGateway(), context)


@pytest.fixture
def remote_meals(
    store: InMemoryCacheStore, remote: FakeRemoteGateway, context: SyncContext
) -> CustomMealRepository:
    return CustomMealRepository(store, remote, context)


@pytest.fixture
def remote_profiles(
    store: InMemoryCacheStore, remote: FakeRemoteGateway, context: SyncContext
) -> ProfileService:
    return ProfileService(store, remote, context)
