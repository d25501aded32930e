"""Authentication with remote-first routing and local credential fallback."""

import hmac
import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from uuid import uuid4

from nutrition_sync.domain.errors import (
    AuthError,
    AuthErrorCode,
    RemoteAuthRejected,
    RemoteUnavailable,
)
from nutrition_sync.domain.models import (
    LocalCredential,
    Session,
    dump_credential,
    dump_session,
    parse_credential,
    parse_session,
)
from nutrition_sync.services.cache import (
    LOCAL_SESSION_KEY,
    LOCAL_USERS_KEY,
    CacheStore,
    load_json,
    load_list,
    store_json,
)
from nutrition_sync.services.context import SyncContext
from nutrition_sync.services.gateway import (
    EMAIL_ALREADY_IN_USE,
    INVALID_EMAIL,
    USER_NOT_FOUND,
    WEAK_PASSWORD,
    WRONG_PASSWORD,
    RemoteGateway,
)
from nutrition_sync.services.hashing import (
    PasswordHasher,
    generate_salt,
    hash_password,
    verify_password,
)

MIN_PASSWORD_LENGTH = 6

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

_REMOTE_CODES = {
    EMAIL_ALREADY_IN_USE: AuthErrorCode.EMAIL_IN_USE,
    USER_NOT_FOUND: AuthErrorCode.ACCOUNT_NOT_FOUND,
    WRONG_PASSWORD: AuthErrorCode.WRONG_PASSWORD,
    INVALID_EMAIL: AuthErrorCode.INVALID_EMAIL,
    WEAK_PASSWORD: AuthErrorCode.WEAK_PASSWORD,
}

_logger = logging.getLogger(__name__)

SessionCallback = Callable[[Session | None], None]


@dataclass
class AuthService:
    """Coordinates sign-up, sign-in and session state.

    Each call decides once, on entry, whether the remote backend is usable;
    otherwise it runs entirely against the local credential store.
    """

    store: CacheStore
    gateway: RemoteGateway
    hasher: PasswordHasher
    context: SyncContext

    async def sign_up(self, email: str, password: str) -> Session:
        """Create an account and make it the active session."""
        if await self.gateway.initialize():
            _logger.info("sign_up: using remote backend")
            session = await self._call_remote(
                "sign_up", self.gateway.create_account, email, password
            )
        else:
            _logger.info("sign_up: using local fallback")
            session = await self._local_sign_up(email, password)
        self._set_session(session)
        return session

    async def sign_in(self, email: str, password: str) -> Session:
        """Authenticate and make the account the active session."""
        if await self.gateway.initialize():
            _logger.info("sign_in: using remote backend")
            session = await self._call_remote(
                "sign_in", self.gateway.sign_in, email, password
            )
        else:
            _logger.info("sign_in: using local fallback")
            session = await self._local_sign_in(email, password)
        self._set_session(session)
        return session

    async def sign_out(self) -> None:
        """Clear the active session and notify subscribers."""
        if await self.gateway.initialize():
            try:
                await self.gateway.sign_out()
            except Exception as error:  # noqa: BLE001
                _logger.warning("Remote sign-out failed: %s", error)
        await self.store.remove(LOCAL_SESSION_KEY)
        self._set_session(None)

    async def subscribe(self, callback: SessionCallback) -> Callable[[], None]:
        """Register a session listener and emit the current session to it."""
        unsubscribe = self.context.auth_listeners.add(callback)
        self.context.auth_listeners.deliver(callback, self.current_session())
        return unsubscribe

    def current_session(self) -> Session | None:
        """Return the active session without performing I/O."""
        remote_user = self.gateway.cached_user()
        if remote_user is not None:
            return remote_user
        return self.context.session

    async def restore_session(self) -> Session | None:
        """Load the persisted session into the context at startup."""
        if await self.gateway.initialize():
            try:
                session = await self.gateway.current_user()
            except Exception as error:  # noqa: BLE001
                _logger.warning("Could not resolve remote user: %s", error)
                session = None
        else:
            session = parse_session(await load_json(self.store, LOCAL_SESSION_KEY))
        if session != self.context.session:
            self._set_session(session)
        return session

    def _set_session(self, session: Session | None) -> None:
        self.context.session = session
        self.context.auth_listeners.broadcast(session)

    async def _call_remote(
        self,
        action: str,
        call: Callable[[str, str], Awaitable[Session]],
        email: str,
        password: str,
    ) -> Session:
        try:
            return await call(email, password)
        except RemoteAuthRejected as error:
            code = _REMOTE_CODES.get(error.code)
            if code is None:
                raise RemoteUnavailable(
                    f"Remote {action} rejected with {error.code}"
                ) from error
            raise AuthError(code) from error
        except Exception as error:
            _logger.warning("Remote %s failed: %s", action, error)
            raise RemoteUnavailable(f"Remote {action} failed") from error

    async def _local_sign_up(self, email: str, password: str) -> Session:
        normalized = _normalize_email(email)
        if not _EMAIL_PATTERN.match(normalized):
            raise AuthError(AuthErrorCode.INVALID_EMAIL)
        if len(password) < MIN_PASSWORD_LENGTH:
            raise AuthError(AuthErrorCode.WEAK_PASSWORD)

        users = await load_list(self.store, LOCAL_USERS_KEY)
        if _find_user(users, normalized) is not None:
            raise AuthError(AuthErrorCode.EMAIL_IN_USE)

        salt = generate_salt()
        credential = LocalCredential(
            uid=uuid4().hex,
            email=normalized,
            password_hash=hash_password(self.hasher, salt, password),
            salt=salt,
        )
        users.append(dump_credential(credential))
        await store_json(self.store, LOCAL_USERS_KEY, users)
        return await self._persist_local_session(credential)

    async def _local_sign_in(self, email: str, password: str) -> Session:
        users = await load_list(self.store, LOCAL_USERS_KEY)
        index = _find_user(users, _normalize_email(email))
        if index is None:
            raise AuthError(AuthErrorCode.ACCOUNT_NOT_FOUND)

        credential = parse_credential(users[index])
        if not credential.is_legacy:
            if not verify_password(
                self.hasher, credential.salt, password, credential.password_hash
            ):
                raise AuthError(AuthErrorCode.WRONG_PASSWORD)
        elif credential.password is not None and hmac.compare_digest(
            credential.password.encode("utf-8"), password.encode("utf-8")
        ):
            credential = await self._upgrade_legacy(users, index, credential, password)
        else:
            raise AuthError(AuthErrorCode.WRONG_PASSWORD)
        return await self._persist_local_session(credential)

    async def _upgrade_legacy(
        self,
        users: list[dict[str, object]],
        index: int,
        credential: LocalCredential,
        password: str,
    ) -> LocalCredential:
        salt = generate_salt()
        upgraded = replace(
            credential,
            password_hash=hash_password(self.hasher, salt, password),
            salt=salt,
            password=None,
        )
        row = {key: value for key, value in users[index].items() if key != "password"}
        row.update(dump_credential(upgraded))
        users[index] = row
        await store_json(self.store, LOCAL_USERS_KEY, users)
        _logger.info("Upgraded legacy local credential uid=%s", credential.uid)
        return upgraded

    async def _persist_local_session(self, credential: LocalCredential) -> Session:
        session = Session(uid=credential.uid, email=credential.email)
        await store_json(self.store, LOCAL_SESSION_KEY, dump_session(session))
        return session


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _find_user(users: list[dict[str, object]], email: str) -> int | None:
    for index, row in enumerate(users):
        if _normalize_email(str(row.get("email", ""))) == email:
            return index
    return None
