"""Supabase Auth binding over its REST API."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

import httpx

from food_order.auth import AuthError, Session, SessionCallback
from food_order.config import IDENTITY_TIMEOUT_SECONDS, SESSION_STORAGE_KEY, SUPABASE_KEY, SUPABASE_URL
from food_order.models import UserRecord
from food_order.persistence import KeyValueStorage, user_from_dict, user_to_dict

logger = logging.getLogger(__name__)

# Refresh a little before the token actually expires.
_EXPIRY_MARGIN_SECONDS = 30


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("error_description", "msg", "message", "error"):
            value = body.get(key)
            if value:
                return str(value)
    return f"Request failed with status {response.status_code}"


def _user_from_payload(payload: dict[str, Any]) -> UserRecord:
    return UserRecord(
        id=str(payload["id"]),
        email=str(payload.get("email") or ""),
        user_metadata=dict(payload.get("user_metadata") or {}),
    )


def session_to_dict(session: Session) -> dict[str, Any]:
    return {
        "access_token": session.access_token,
        "refresh_token": session.refresh_token,
        "expires_at": session.expires_at,
        "user": user_to_dict(session.user),
    }


def session_from_dict(data: dict[str, Any]) -> Session:
    return Session(
        access_token=str(data["access_token"]),
        refresh_token=str(data["refresh_token"]),
        expires_at=int(data["expires_at"]),
        user=user_from_dict(data["user"]),
    )


class SupabaseIdentityProvider:
    """Signs users in and out against Supabase Auth and keeps the session.

    The session lives in the provider's own storage namespace, separate
    from the app's ``auth-storage`` record, and is refreshed on read once
    the access token is close to expiry.
    """

    def __init__(
        self,
        url: str = SUPABASE_URL,
        api_key: str = SUPABASE_KEY,
        storage: KeyValueStorage | None = None,
        client: httpx.AsyncClient | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.url = url.rstrip("/")
        self.api_key = api_key
        self.storage = storage
        self.client = client or httpx.AsyncClient(timeout=IDENTITY_TIMEOUT_SECONDS)
        self.clock = clock
        self._session: Session | None = None
        self._loaded = False
        self._callbacks: list[SessionCallback] = []

    async def get_session(self) -> Session | None:
        self._load_stored_session()
        session = self._session
        if session is None:
            return None
        if session.expires_at - _EXPIRY_MARGIN_SECONDS > self.clock():
            return session
        try:
            body = await self._request(
                "POST",
                "/auth/v1/token",
                params={"grant_type": "refresh_token"},
                json={"refresh_token": session.refresh_token},
            )
            refreshed = self._session_from_body(body)
        except AuthError as exc:
            logger.warning("session_refresh_failed error=%s", exc)
            self._set_session(None, "SIGNED_OUT")
            return None
        self._set_session(refreshed, "TOKEN_REFRESHED")
        return refreshed

    async def sign_up(self, email: str, password: str, metadata: dict[str, Any]) -> Session | None:
        body = await self._request(
            "POST",
            "/auth/v1/signup",
            json={"email": email, "password": password, "data": metadata},
        )
        # Without email confirmation enabled the signup response is already a session.
        if "access_token" not in body:
            return None
        session = self._session_from_body(body)
        self._set_session(session, "SIGNED_IN")
        return session

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        body = await self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        session = self._session_from_body(body)
        self._set_session(session, "SIGNED_IN")
        return session

    async def sign_out(self) -> None:
        self._load_stored_session()
        session = self._session
        if session is not None:
            await self._request("POST", "/auth/v1/logout", access_token=session.access_token)
        self._set_session(None, "SIGNED_OUT")

    async def update_user(self, metadata: dict[str, Any]) -> UserRecord:
        self._load_stored_session()
        session = self._session
        if session is None:
            raise AuthError("Auth session missing!")
        body = await self._request(
            "PUT",
            "/auth/v1/user",
            json={"data": metadata},
            access_token=session.access_token,
        )
        user = _user_from_payload(body)
        self._set_session(
            Session(session.access_token, session.refresh_token, session.expires_at, user),
            "USER_UPDATED",
        )
        return user

    def on_auth_state_change(self, callback: SessionCallback) -> Callable[[], None]:
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        access_token: str | None = None,
    ) -> dict[str, Any]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {access_token or self.api_key}",
        }
        try:
            response = await self.client.request(method, f"{self.url}{path}", params=params, json=json, headers=headers)
        except httpx.HTTPError as exc:
            raise AuthError(f"Network error: {exc}") from exc

        if response.status_code >= 400:
            raise AuthError(_error_message(response))
        if response.status_code == 204 or not response.content:
            return {}
        try:
            body = response.json()
        except ValueError as exc:
            raise AuthError(f"Malformed response from identity service (status {response.status_code})") from exc
        return body if isinstance(body, dict) else {}

    def _session_from_body(self, body: dict[str, Any]) -> Session:
        try:
            expires_at = body.get("expires_at") or int(self.clock()) + int(body["expires_in"])
            return Session(
                access_token=str(body["access_token"]),
                refresh_token=str(body["refresh_token"]),
                expires_at=int(expires_at),
                user=_user_from_payload(body["user"]),
            )
        except (KeyError, TypeError) as exc:
            raise AuthError(f"Malformed session response: missing {exc}") from exc

    def _load_stored_session(self) -> None:
        if self._loaded:
            return
        self._loaded = True
        if self.storage is None:
            return
        record = self.storage.load(SESSION_STORAGE_KEY)
        if not record or record.get("session") is None:
            return
        try:
            self._session = session_from_dict(record["session"])
        except (KeyError, TypeError, ValueError):
            logger.warning("stored_session_unreadable")

    def _set_session(self, session: Session | None, event: str) -> None:
        self._loaded = True
        self._session = session
        if self.storage is not None:
            self.storage.save(
                SESSION_STORAGE_KEY,
                {"session": session_to_dict(session) if session is not None else None},
            )
        for callback in list(self._callbacks):
            callback(event, session)
