"""Session and user state over an external identity provider."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Protocol

from food_order.models import UserRecord

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class AuthError(Exception):
    """An identity provider call failed; ``str(err)`` is the provider's message."""


@dataclass(frozen=True)
class Session:
    """Tokens issued by the identity provider for one signed-in user."""

    access_token: str
    refresh_token: str
    expires_at: int
    user: UserRecord


SessionCallback = Callable[[str, "Session | None"], None]


class IdentityProvider(Protocol):
    async def get_session(self) -> Session | None: ...

    async def sign_up(self, email: str, password: str, metadata: dict[str, Any]) -> Session | None: ...

    async def sign_in_with_password(self, email: str, password: str) -> Session: ...

    async def sign_out(self) -> None: ...

    async def update_user(self, metadata: dict[str, Any]) -> UserRecord: ...

    def on_auth_state_change(self, callback: SessionCallback) -> Callable[[], None]: ...

    async def aclose(self) -> None: ...


PROFILE_FIELDS = ("full_name", "phone", "address1", "address2")


class AuthStore:
    """Tracks who is signed in; every identity call is delegated to the provider."""

    def __init__(self, provider: IdentityProvider) -> None:
        self.provider = provider
        self._user: UserRecord | None = None
        self._is_authenticated = False
        self.is_loading = True
        self._listeners: list[Listener] = []
        self._unsubscribe_provider: Callable[[], None] | None = None

    @property
    def user(self) -> UserRecord | None:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._is_authenticated

    async def initialize(self) -> None:
        """Load any existing session and follow the provider's session changes."""
        session = await self.provider.get_session()
        self.is_loading = False
        self._set_user(session.user if session is not None else None)
        if self._unsubscribe_provider is None:
            self._unsubscribe_provider = self.provider.on_auth_state_change(self._on_session_change)

    async def sign_up(self, email: str, password: str, full_name: str | None = None) -> None:
        try:
            await self.provider.sign_up(email, password, {"full_name": full_name} if full_name else {})
        except AuthError as exc:
            logger.error("Sign up error: %s", exc)
            raise

    async def sign_in(self, email: str, password: str) -> None:
        try:
            await self.provider.sign_in_with_password(email, password)
        except AuthError as exc:
            logger.error("Sign in error: %s", exc)
            raise

    async def sign_out(self) -> None:
        try:
            await self.provider.sign_out()
        except AuthError as exc:
            logger.error("Sign out error: %s", exc)
            raise
        self._set_user(None)

    async def update_profile(self, **fields: Any) -> None:
        unknown = set(fields) - set(PROFILE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown profile fields: {', '.join(sorted(unknown))}")
        try:
            await self.provider.update_user(fields)
        except AuthError as exc:
            logger.error("Update profile error: %s", exc)
            raise

        if self._user is not None:
            merged = {**self._user.user_metadata, **fields}
            self._set_user(replace(self._user, user_metadata=merged))

    def hydrate(self, user: UserRecord | None, is_authenticated: bool) -> None:
        """Load persisted state without notifying listeners."""
        self._user = user
        self._is_authenticated = is_authenticated

    def close(self) -> None:
        if self._unsubscribe_provider is not None:
            self._unsubscribe_provider()
            self._unsubscribe_provider = None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _on_session_change(self, event: str, session: Session | None) -> None:
        logger.debug("auth_state_change event=%s signed_in=%s", event, session is not None)
        self._set_user(session.user if session is not None else None)

    def _set_user(self, user: UserRecord | None) -> None:
        self._user = user
        self._is_authenticated = user is not None
        for listener in list(self._listeners):
            listener()
