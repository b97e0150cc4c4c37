from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from food_order.auth import AuthError
from food_order.identity import SupabaseIdentityProvider

URL = "https://example.supabase.co"
NOW = 1_700_000_000


def token_body(email: str = "ann@example.com", access: str = "at-1", refresh: str = "rt-1") -> dict:
    return {
        "access_token": access,
        "token_type": "bearer",
        "expires_in": 3600,
        "refresh_token": refresh,
        "user": {"id": "u-1", "email": email, "user_metadata": {"full_name": "Ann"}},
    }


def make_provider(handler, storage=None, now=NOW) -> SupabaseIdentityProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SupabaseIdentityProvider(URL, "anon-key", storage=storage, client=client, clock=lambda: now)


def test_sign_in_stores_session_and_notifies():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=token_body())

    provider = make_provider(handler)
    events = []
    provider.on_auth_state_change(lambda event, session: events.append((event, session.user.email)))

    session = asyncio.run(provider.sign_in_with_password("ann@example.com", "pw"))

    request = requests[0]
    assert request.url.path == "/auth/v1/token"
    assert request.url.params["grant_type"] == "password"
    assert request.headers["apikey"] == "anon-key"
    assert json.loads(request.content) == {"email": "ann@example.com", "password": "pw"}
    assert session.expires_at == NOW + 3600
    assert events == [("SIGNED_IN", "ann@example.com")]


@pytest.mark.parametrize(
    "body",
    [
        {"error": "invalid_grant", "error_description": "Invalid login credentials"},
        {"code": 400, "msg": "Invalid login credentials"},
    ],
)
def test_error_body_becomes_auth_error(body):
    provider = make_provider(lambda request: httpx.Response(400, json=body))

    with pytest.raises(AuthError, match="Invalid login credentials"):
        asyncio.run(provider.sign_in_with_password("ann@example.com", "bad"))


def test_transport_failure_becomes_auth_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    provider = make_provider(handler)

    with pytest.raises(AuthError, match="Network error"):
        asyncio.run(provider.sign_in_with_password("ann@example.com", "pw"))


def test_non_json_success_body_becomes_auth_error():
    provider = make_provider(lambda request: httpx.Response(200, text="<html>proxy login</html>"))

    with pytest.raises(AuthError, match="Malformed response"):
        asyncio.run(provider.sign_in_with_password("ann@example.com", "pw"))


def test_sign_up_without_session_when_confirmation_required():
    def handler(request):
        assert json.loads(request.content)["data"] == {"full_name": "Ann"}
        return httpx.Response(200, json={"id": "u-1", "email": "ann@example.com"})

    provider = make_provider(handler)

    assert asyncio.run(provider.sign_up("ann@example.com", "pw", {"full_name": "Ann"})) is None
    assert asyncio.run(provider.get_session()) is None


def test_session_is_persisted_and_reloaded(storage):
    provider = make_provider(lambda request: httpx.Response(200, json=token_body()), storage=storage)
    asyncio.run(provider.sign_in_with_password("ann@example.com", "pw"))

    def fail(request):
        raise AssertionError("no network call expected")

    reloaded = make_provider(fail, storage=storage)
    session = asyncio.run(reloaded.get_session())

    assert session.access_token == "at-1"
    assert session.user.email == "ann@example.com"


def test_expired_session_is_refreshed(storage):
    provider = make_provider(lambda request: httpx.Response(200, json=token_body()), storage=storage)
    asyncio.run(provider.sign_in_with_password("ann@example.com", "pw"))

    seen = []

    def handler(request):
        seen.append((request.url.params["grant_type"], json.loads(request.content)))
        return httpx.Response(200, json=token_body(access="at-2", refresh="rt-2"))

    later = make_provider(handler, storage=storage, now=NOW + 7200)
    session = asyncio.run(later.get_session())

    assert seen == [("refresh_token", {"refresh_token": "rt-1"})]
    assert session.access_token == "at-2"


def test_failed_refresh_signs_out(storage):
    provider = make_provider(lambda request: httpx.Response(200, json=token_body()), storage=storage)
    asyncio.run(provider.sign_in_with_password("ann@example.com", "pw"))

    later = make_provider(lambda request: httpx.Response(400, json={"msg": "Invalid Refresh Token"}), storage=storage, now=NOW + 7200)

    assert asyncio.run(later.get_session()) is None
    assert storage.load("supabase-session") == {"session": None}


def test_non_json_refresh_response_signs_out(storage):
    provider = make_provider(lambda request: httpx.Response(200, json=token_body()), storage=storage)
    asyncio.run(provider.sign_in_with_password("ann@example.com", "pw"))

    later = make_provider(lambda request: httpx.Response(200, text="<html>proxy login</html>"), storage=storage, now=NOW + 7200)

    assert asyncio.run(later.get_session()) is None


def test_sign_out_calls_logout_with_access_token():
    paths = []

    def handler(request):
        paths.append((request.url.path, request.headers["authorization"]))
        if request.url.path == "/auth/v1/logout":
            return httpx.Response(204)
        return httpx.Response(200, json=token_body())

    provider = make_provider(handler)
    asyncio.run(provider.sign_in_with_password("ann@example.com", "pw"))
    asyncio.run(provider.sign_out())

    assert paths[-1] == ("/auth/v1/logout", "Bearer at-1")
    assert asyncio.run(provider.get_session()) is None


def test_update_user_requires_session():
    provider = make_provider(lambda request: httpx.Response(200, json={}))

    with pytest.raises(AuthError, match="session missing"):
        asyncio.run(provider.update_user({"phone": "1"}))


def test_update_user_returns_updated_record():
    def handler(request):
        if request.method == "PUT":
            assert json.loads(request.content) == {"data": {"phone": "555"}}
            return httpx.Response(200, json={"id": "u-1", "email": "ann@example.com", "user_metadata": {"phone": "555"}})
        return httpx.Response(200, json=token_body())

    provider = make_provider(handler)
    asyncio.run(provider.sign_in_with_password("ann@example.com", "pw"))

    user = asyncio.run(provider.update_user({"phone": "555"}))

    assert user.user_metadata == {"phone": "555"}
