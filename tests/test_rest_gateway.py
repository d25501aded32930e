"""Tests for the REST gateway."""

import asyncio
import json

import httpx
import pytest

from nutrition_sync.adapters.rest_gateway import HttpxRestGateway
from nutrition_sync.domain.errors import RemoteAuthRejected
from nutrition_sync.domain.models import Session
from nutrition_sync.services.cache import BACKEND_TOKEN_KEY, InMemoryCacheStore
from nutrition_sync.services.gateway import (
    EMAIL_ALREADY_IN_USE,
    USER_NOT_FOUND,
    WRONG_PASSWORD,
)


def _gateway(  # type: ignore[no-untyped-def]
    handler, store: InMemoryCacheStore
) -> HttpxRestGateway:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpxRestGateway(
        base_url="https://api.example.com/", store=store, http_client=client
    )


def test_initialize_requires_base_url(store: InMemoryCacheStore) -> None:
    gateway = HttpxRestGateway.create(None, store)

    assert asyncio.run(gateway.initialize()) is False
    asyncio.run(gateway.close())


def test_signup_stores_token_and_authorizes_requests(
    store: InMemoryCacheStore,
) -> None:
    seen: list[tuple[str, str, str | None]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(
            (request.method, request.url.path, request.headers.get("Authorization"))
        )
        if request.url.path == "/auth/signup":
            body = json.loads(request.content.decode())
            user = {"uid": "r1", "email": body["email"]}
            return httpx.Response(200, json={"token": "t1", "user": user})
        return httpx.Response(200, json=[{"id": "L1", "uid": "r1"}, "junk"])

    gateway = _gateway(handler, store)

    session = asyncio.run(gateway.create_account("bob@example.com", "secret1"))
    rows = asyncio.run(gateway.list_documents("logs", "r1"))

    assert session == Session(uid="r1", email="bob@example.com")
    assert asyncio.run(store.get(BACKEND_TOKEN_KEY)) == "t1"
    assert rows == [{"id": "L1", "uid": "r1"}]
    assert seen == [
        ("POST", "/auth/signup", None),
        ("GET", "/logs", "Bearer t1"),
    ]


@pytest.mark.parametrize(
    ("path", "status", "expected"),
    [
        ("/auth/login", 401, WRONG_PASSWORD),
        ("/auth/login", 404, USER_NOT_FOUND),
        ("/auth/signup", 409, EMAIL_ALREADY_IN_USE),
    ],
)
def test_auth_status_codes_are_mapped(
    store: InMemoryCacheStore, path: str, status: int, expected: str
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"error": "rejected"})

    gateway = _gateway(handler, store)
    call = gateway.sign_in if path == "/auth/login" else gateway.create_account

    with pytest.raises(RemoteAuthRejected) as excinfo:
        asyncio.run(call("bob@example.com", "secret1"))

    assert excinfo.value.code == expected
    assert excinfo.value.message == "rejected"


def test_server_error_is_not_an_auth_rejection(store: InMemoryCacheStore) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    gateway = _gateway(handler, store)

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(gateway.sign_in("bob@example.com", "secret1"))


def test_current_user_clears_rejected_token(store: InMemoryCacheStore) -> None:
    asyncio.run(store.set(BACKEND_TOKEN_KEY, "expired"))

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": "Invalid token"})

    gateway = _gateway(handler, store)

    assert asyncio.run(gateway.current_user()) is None
    assert asyncio.run(store.get(BACKEND_TOKEN_KEY)) is None


def test_current_user_resolves_stored_token(store: InMemoryCacheStore) -> None:
    asyncio.run(store.set(BACKEND_TOKEN_KEY, "t1"))

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/users/me"
        return httpx.Response(200, json={"uid": "r1", "email": "bob@example.com"})

    gateway = _gateway(handler, store)

    assert asyncio.run(gateway.current_user()) == Session("r1", "bob@example.com")
    assert gateway.cached_user() == Session("r1", "bob@example.com")


def test_document_writes(store: InMemoryCacheStore) -> None:
    requests: list[tuple[str, str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content.decode()) if request.content else None
        requests.append((request.method, request.url.raw_path.decode(), body))
        return httpx.Response(204)

    gateway = _gateway(handler, store)

    asyncio.run(gateway.set_document("customMeals", "m1", {"name": "Shake"}))
    asyncio.run(gateway.delete_document("logs", "a/b"))
    asyncio.run(gateway.set_profile("r1", {"weight": 80}))

    assert requests == [
        ("POST", "/customMeals", {"name": "Shake", "id": "m1"}),
        ("DELETE", "/logs/a%2Fb", None),
        ("PUT", "/users/me", {"weight": 80}),
    ]


def test_sign_out_forgets_token(store: InMemoryCacheStore) -> None:
    asyncio.run(store.set(BACKEND_TOKEN_KEY, "t1"))
    gateway = _gateway(lambda request: httpx.Response(200), store)

    asyncio.run(gateway.sign_out())

    assert asyncio.run(store.get(BACKEND_TOKEN_KEY)) is None
    assert gateway.cached_user() is None
