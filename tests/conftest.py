from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable

import pytest

from food_order.auth import AuthError, Session, SessionCallback
from food_order.context import create_context
from food_order.models import CartItemDraft, MenuModifier, UserRecord
from food_order.persistence import KeyValueStorage

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_draft(**overrides: Any) -> CartItemDraft:
    fields: dict[str, Any] = {
        "menu_item_id": "1-1",
        "restaurant_id": "1",
        "restaurant_name": "Burger Palace",
        "name": "Classic Beef Burger",
        "price": Decimal("10.00"),
        "quantity": 1,
    }
    fields.update(overrides)
    return CartItemDraft(**fields)


def modifier(name: str, price: str) -> MenuModifier:
    return MenuModifier(name=name, price=Decimal(price))


class FakeIdentityProvider:
    """In-memory identity provider; ``fail_with`` makes the next call raise."""

    def __init__(self, session: Session | None = None) -> None:
        self.session = session
        self.fail_with: str | None = None
        self.calls: list[str] = []
        self.closed = False
        self._callbacks: list[SessionCallback] = []

    def _maybe_fail(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_with is not None:
            message, self.fail_with = self.fail_with, None
            raise AuthError(message)

    def _emit(self, event: str) -> None:
        for callback in list(self._callbacks):
            callback(event, self.session)

    async def get_session(self) -> Session | None:
        self._maybe_fail("get_session")
        return self.session

    async def sign_up(self, email: str, password: str, metadata: dict[str, Any]) -> Session | None:
        self._maybe_fail("sign_up")
        self.session = Session("access", "refresh", 9999999999, UserRecord("u-new", email, dict(metadata)))
        self._emit("SIGNED_IN")
        return self.session

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        self._maybe_fail("sign_in")
        self.session = Session("access", "refresh", 9999999999, UserRecord("u-1", email, {}))
        self._emit("SIGNED_IN")
        return self.session

    async def sign_out(self) -> None:
        self._maybe_fail("sign_out")
        self.session = None
        self._emit("SIGNED_OUT")

    async def update_user(self, metadata: dict[str, Any]) -> UserRecord:
        self._maybe_fail("update_user")
        assert self.session is not None
        user = replace(self.session.user, user_metadata={**self.session.user.user_metadata, **metadata})
        self.session = replace(self.session, user=user)
        return user

    def on_auth_state_change(self, callback: SessionCallback) -> Callable[[], None]:
        self._callbacks.append(callback)
        return lambda: self._callbacks.remove(callback)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "food_order.db"


@pytest.fixture
def storage(db_path):
    storage = KeyValueStorage(db_path)
    storage.bootstrap_schema()
    return storage


@pytest.fixture
def provider():
    return FakeIdentityProvider()


@pytest.fixture
def context(db_path, provider):
    context = create_context(db_path, provider=provider, background_writes=False)
    yield context
    context.close()
