"""REST backend implementation of the remote gateway."""

from dataclasses import dataclass, field
from urllib.parse import quote

import httpx

from nutrition_sync.domain.errors import RemoteAuthRejected
from nutrition_sync.domain.models import Session
from nutrition_sync.services.cache import BACKEND_TOKEN_KEY, CacheStore
from nutrition_sync.services.gateway import (
    EMAIL_ALREADY_IN_USE,
    INVALID_EMAIL,
    USER_NOT_FOUND,
    WRONG_PASSWORD,
    RemoteGateway,
)

HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401
HTTP_NOT_FOUND = 404
HTTP_CONFLICT = 409

_SIGNUP_CODES = {
    HTTP_BAD_REQUEST: INVALID_EMAIL,
    HTTP_CONFLICT: EMAIL_ALREADY_IN_USE,
}

_LOGIN_CODES = {
    HTTP_BAD_REQUEST: INVALID_EMAIL,
    HTTP_UNAUTHORIZED: WRONG_PASSWORD,
    HTTP_NOT_FOUND: USER_NOT_FOUND,
}


@dataclass
class HttpxRestGateway(RemoteGateway):
    """Gateway for the bearer-token REST backend.

    The session token returned by ``/auth/login`` and ``/auth/signup`` is kept
    in the cache store so it survives restarts.
    """

    base_url: str | None
    store: CacheStore
    http_client: httpx.AsyncClient
    timeout_seconds: float = 10
    _user: Session | None = field(default=None, init=False, repr=False)

    @classmethod
    def create(
        cls, base_url: str | None, store: CacheStore, timeout_seconds: float = 10
    ) -> "HttpxRestGateway":
        """Create a gateway with a managed httpx session."""
        return cls(
            base_url=base_url,
            store=store,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def initialize(self) -> bool:
        return bool(self.base_url)

    def cached_user(self) -> Session | None:
        return self._user

    async def current_user(self) -> Session | None:
        """Resolve the user of the stored token via ``GET /users/me``."""
        if self._user is not None:
            return self._user
        if await self.store.get(BACKEND_TOKEN_KEY) is None:
            return None
        try:
            payload = await self._request("GET", "/users/me")
        except httpx.HTTPStatusError as error:
            if error.response.status_code != HTTP_UNAUTHORIZED:
                raise
            await self.store.remove(BACKEND_TOKEN_KEY)
            return None
        self._user = _parse_user(payload)
        return self._user

    async def create_account(self, email: str, password: str) -> Session:
        return await self._authenticate("/auth/signup", email, password, _SIGNUP_CODES)

    async def sign_in(self, email: str, password: str) -> Session:
        return await self._authenticate("/auth/login", email, password, _LOGIN_CODES)

    async def sign_out(self) -> None:
        self._user = None
        await self.store.remove(BACKEND_TOKEN_KEY)

    async def list_documents(
        self, collection: str, uid: str
    ) -> list[dict[str, object]]:
        """Return the token owner's documents; the server scopes by token."""
        payload = await self._request("GET", f"/{collection}")
        if not isinstance(payload, list):
            raise ValueError(f"Unexpected {collection} payload")
        return [row for row in payload if isinstance(row, dict)]

    async def get_document(
        self, collection: str, doc_id: str
    ) -> dict[str, object] | None:
        for row in await self.list_documents(collection, uid=""):
            if str(row.get("id")) == doc_id:
                return row
        return None

    async def set_document(
        self, collection: str, doc_id: str, payload: dict[str, object]
    ) -> None:
        await self._request("POST", f"/{collection}", json={**payload, "id": doc_id})

    async def delete_document(self, collection: str, doc_id: str) -> None:
        await self._request("DELETE", f"/{collection}/{quote(doc_id, safe='')}")

    async def get_profile(self, uid: str) -> dict[str, object] | None:
        """Return the token owner's profile."""
        payload = await self._request("GET", "/users/me")
        return payload if isinstance(payload, dict) else None

    async def set_profile(self, uid: str, profile: dict[str, object]) -> None:
        await self._request("PUT", "/users/me", json=profile)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _authenticate(
        self, path: str, email: str, password: str, codes: dict[int, str]
    ) -> Session:
        try:
            payload = await self._request(
                "POST", path, json={"email": email, "password": password}
            )
        except httpx.HTTPStatusError as error:
            code = codes.get(error.response.status_code)
            if code is None:
                raise
            message = _error_message(error.response)
            raise RemoteAuthRejected(message, code=code) from error
        if not isinstance(payload, dict) or not payload.get("token"):
            raise ValueError("Authentication response carried no token")
        await self.store.set(BACKEND_TOKEN_KEY, str(payload["token"]))
        self._user = _parse_user(payload.get("user"))
        return self._user

    async def _request(
        self, method: str, path: str, json: object | None = None
    ) -> object:
        if not self.base_url:
            raise RuntimeError("No backend configured")
        url = f"{self.base_url.rstrip('/')}{path}"
        headers = {}
        token = await self.store.get(BACKEND_TOKEN_KEY)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        response = await self.http_client.request(
            method, url, json=json, headers=headers, timeout=self.timeout_seconds
        )
        response.raise_for_status()
        if not response.content:
            return None
        return response.json()


def _parse_user(payload: object) -> Session:
    if not isinstance(payload, dict) or not payload.get("uid"):
        raise ValueError("Response carried no user")
    return Session(uid=str(payload["uid"]), email=str(payload.get("email") or ""))


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"Request failed: {response.status_code}"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"Request failed: {response.status_code}"
