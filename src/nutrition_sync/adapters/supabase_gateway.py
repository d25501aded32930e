"""Supabase implementation of the remote gateway."""

import logging
from dataclasses import dataclass, field

from supabase import AuthError as SupabaseAuthError
from supabase import Client, create_client

from nutrition_sync.domain.errors import RemoteAuthRejected, RemoteUnavailable
from nutrition_sync.domain.models import Session
from nutrition_sync.services.gateway import (
    EMAIL_ALREADY_IN_USE,
    INVALID_EMAIL,
    USER_NOT_FOUND,
    WEAK_PASSWORD,
    WRONG_PASSWORD,
    RemoteGateway,
)

PROFILES_TABLE = "users"

_AUTH_CODES = {
    "user_already_exists": EMAIL_ALREADY_IN_USE,
    "email_exists": EMAIL_ALREADY_IN_USE,
    "email_address_invalid": INVALID_EMAIL,
    "validation_failed": INVALID_EMAIL,
    "weak_password": WEAK_PASSWORD,
    "user_not_found": USER_NOT_FOUND,
    # Supabase does not tell an unknown email from a bad password.
    "invalid_credentials": WRONG_PASSWORD,
}

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseGateway(RemoteGateway):
    """Gateway backed by Supabase auth and tables.

    Each collection is a table keyed by ``id`` with a ``uid`` column; profiles
    live in the ``users`` table keyed by ``uid``.

    The client is the synchronous Supabase client, so every call blocks the
    event loop until the request completes.

    Supabase answers a sign-in for an unregistered email and one with a bad
    password with the same ``invalid_credentials`` code, so both surface as
    ``wrong-password``; ``user-not-found`` is never reported on this backend.
    """

    url: str | None
    key: str | None
    client: Client | None = None
    _user: Session | None = field(default=None, init=False, repr=False)

    async def initialize(self) -> bool:
        """Create the Supabase client on first use."""
        if self.client is not None:
            return True
        if not self.url or not self.key:
            return False
        try:
            self.client = create_client(self.url, self.key)
        except Exception as error:  # noqa: BLE001
            _logger.warning(
                "Supabase init failed, falling back to local storage: %s", error
            )
            return False
        return True

    def cached_user(self) -> Session | None:
        return self._user

    async def current_user(self) -> Session | None:
        """Return the user of the client's stored auth session."""
        session = self._require_client().auth.get_session()
        if session is None or session.user is None:
            self._user = None
            return None
        self._user = Session(uid=session.user.id, email=session.user.email or "")
        return self._user

    async def create_account(self, email: str, password: str) -> Session:
        """Register a user with email and password."""
        try:
            response = self._require_client().auth.sign_up(
                {"email": email, "password": password}
            )
        except SupabaseAuthError as error:
            code = _AUTH_CODES.get(str(error.code or ""))
            if code is None:
                raise
            raise RemoteAuthRejected(error.message, code=code) from error
        return self._remember(response.user, email)

    async def sign_in(self, email: str, password: str) -> Session:
        """Sign in with email and password."""
        try:
            response = self._require_client().auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except SupabaseAuthError as error:
            code = _AUTH_CODES.get(str(error.code or ""))
            if code is None:
                raise
            raise RemoteAuthRejected(error.message, code=code) from error
        return self._remember(response.user, email)

    async def sign_out(self) -> None:
        self._user = None
        self._require_client().auth.sign_out()

    async def list_documents(
        self, collection: str, uid: str
    ) -> list[dict[str, object]]:
        """Return every row of a collection owned by ``uid``."""
        response = (
            self._require_client()
            .table(collection)
            .select("*")
            .eq("uid", uid)
            .execute()
        )
        return list(response.data or [])

    async def get_document(
        self, collection: str, doc_id: str
    ) -> dict[str, object] | None:
        """Return a row by id, if present."""
        response = (
            self._require_client()
            .table(collection)
            .select("*")
            .eq("id", doc_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0]

    async def set_document(
        self, collection: str, doc_id: str, payload: dict[str, object]
    ) -> None:
        """Insert or replace a row keyed by id."""
        self._require_client().table(collection).upsert(
            {**payload, "id": doc_id}, on_conflict="id"
        ).execute()

    async def delete_document(self, collection: str, doc_id: str) -> None:
        self._require_client().table(collection).delete().eq("id", doc_id).execute()

    async def get_profile(self, uid: str) -> dict[str, object] | None:
        """Return a user's profile row, if present."""
        response = (
            self._require_client()
            .table(PROFILES_TABLE)
            .select("*")
            .eq("uid", uid)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0]

    async def set_profile(self, uid: str, profile: dict[str, object]) -> None:
        """Merge the given fields into a user's profile row."""
        self._require_client().table(PROFILES_TABLE).upsert(
            {**profile, "uid": uid}, on_conflict="uid"
        ).execute()

    async def close(self) -> None:
        return None

    def _require_client(self) -> Client:
        if self.client is None:
            raise RemoteUnavailable("Supabase client is not initialized")
        return self.client

    def _remember(self, user: object, email: str) -> Session:
        if user is None:
            raise RuntimeError("Supabase returned no user")
        self._user = Session(uid=str(user.id), email=user.email or email)
        return self._user

