"""Remote persistence gateway interface."""

from dataclasses import dataclass
from typing import Protocol

from nutrition_sync.domain.errors import RemoteUnavailable
from nutrition_sync.domain.models import Session

LOGS_COLLECTION = "logs"
CUSTOM_MEALS_COLLECTION = "customMeals"

USER_NOT_FOUND = "user-not-found"
WRONG_PASSWORD = "wrong-password"
EMAIL_ALREADY_IN_USE = "email-already-in-use"
INVALID_EMAIL = "invalid-email"
WEAK_PASSWORD = "weak-password"


class RemoteGateway(Protocol):
    """Identity and document operations offered by a remote backend.

    Identity rejections raise ``RemoteAuthRejected``; any other exception
    means the backend could not serve the call.
    """

    async def initialize(self) -> bool:
        """Return True when the backend is configured and ready for use."""

    def cached_user(self) -> Session | None:
        """Return the signed-in user known to the client, without I/O."""

    async def current_user(self) -> Session | None:
        """Resolve the signed-in user, if any."""

    async def create_account(self, email: str, password: str) -> Session:
        """Create an account and sign it in."""

    async def sign_in(self, email: str, password: str) -> Session:
        """Sign in with email and password."""

    async def sign_out(self) -> None:
        """Sign the current user out."""

    async def list_documents(
        self, collection: str, uid: str
    ) -> list[dict[str, object]]:
        """Return every document in a collection owned by ``uid``."""

    async def get_document(
        self, collection: str, doc_id: str
    ) -> dict[str, object] | None:
        """Return a document by id, if present."""

    async def set_document(
        self, collection: str, doc_id: str, payload: dict[str, object]
    ) -> None:
        """Create or replace a document."""

    async def delete_document(self, collection: str, doc_id: str) -> None:
        """Delete a document by id."""

    async def get_profile(self, uid: str) -> dict[str, object] | None:
        """Return a user's profile, if present."""

    async def set_profile(self, uid: str, profile: dict[str, object]) -> None:
        """Merge fields into a user's profile."""

    async def close(self) -> None:
        """Release network resources."""


@dataclass
class LocalOnlyGateway(RemoteGateway):
    """Gateway used when no remote backend is configured."""

    async def initialize(self) -> bool:
        return False

    def cached_user(self) -> Session | None:
        return None

    async def current_user(self) -> Session | None:
        return None

    async def create_account(self, email: str, password: str) -> Session:
        raise RemoteUnavailable("No remote backend configured")

    async def sign_in(self, email: str, password: str) -> Session:
        raise RemoteUnavailable("No remote backend configured")

    async def sign_out(self) -> None:
        return None

    async def list_documents(
        self, collection: str, uid: str
    ) -> list[dict[str, object]]:
        raise RemoteUnavailable("No remote backend configured")

    async def get_document(
        self, collection: str, doc_id: str
    ) -> dict[str, object] | None:
        raise RemoteUnavailable("No remote backend configured")

    async def set_document(
        self, collection: str, doc_id: str, payload: dict[str, object]
    ) -> None:
        raise RemoteUnavailable("No remote backend configured")

    async def delete_document(self, collection: str, doc_id: str) -> None:
        raise RemoteUnavailable("No remote backend configured")

    async def get_profile(self, uid: str) -> dict[str, object] | None:
        raise RemoteUnavailable("No remote backend configured")

    async def set_profile(self, uid: str, profile: dict[str, object]) -> None:
        raise RemoteUnavailable("No remote backend configured")

    async def close(self) -> None:
        return None
