from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest

from food_order.cart import CartStore
from food_order.models import OrderDraft
from food_order.orders import InvalidStatusTransition, OrderStore

from conftest import FIXED_NOW, make_draft


def order_draft(cart: CartStore, subtotal: str = "5.00") -> OrderDraft:
    sub = Decimal(subtotal)
    return OrderDraft(
        items=cart.items,
        subtotal=sub,
        delivery_fee=Decimal("2.99"),
        service_fee=Decimal("1.99"),
        total=sub + Decimal("2.99") + Decimal("1.99"),
        delivery_address="1 Main St",
        payment_method="Credit Card",
    )


@pytest.fixture
def cart():
    cart = CartStore()
    cart.add_item(make_draft(price=Decimal("5"), quantity=1))
    return cart


@pytest.fixture
def store():
    return OrderStore(clock=lambda: FIXED_NOW)


def test_add_order_builds_confirmed_order(store, cart):
    order = store.add_order(order_draft(cart))

    assert order.id.startswith("ORDER-")
    assert order.status == "confirmed"
    assert order.subtotal == Decimal("5.00")
    assert order.total == Decimal("9.98")
    assert order.created_at == FIXED_NOW
    assert order.estimated_delivery_time - order.created_at == timedelta(minutes=30)
    assert order.items == cart.items
    assert store.current_order == order


def test_order_items_are_isolated_from_later_cart_changes(store, cart):
    order = store.add_order(order_draft(cart))
    line_id = cart.items[0].id

    cart.update_quantity(line_id, 7)
    cart.add_item(make_draft(menu_item_id="other"))

    stored = store.get_order_by_id(order.id)
    assert len(stored.items) == 1
    assert stored.items[0].quantity == 1


def test_orders_are_newest_first(cart):
    times = iter([FIXED_NOW, FIXED_NOW + timedelta(minutes=5)])
    store = OrderStore(clock=lambda: next(times))

    first = store.add_order(order_draft(cart))
    second = store.add_order(order_draft(cart, subtotal="12.00"))

    assert [o.id for o in store.orders] == [second.id, first.id]
    assert store.current_order == second
    assert first.id < second.id


def test_update_status_changes_only_status(store, cart):
    order = store.add_order(order_draft(cart))

    store.update_order_status(order.id, "preparing")

    updated = store.get_order_by_id(order.id)
    assert updated.status == "preparing"
    assert updated.items == order.items
    assert updated.total == order.total
    assert updated.created_at == order.created_at
    assert updated.estimated_delivery_time == order.estimated_delivery_time
    assert store.current_order.status == "preparing"


def test_update_status_unknown_id_is_noop(store, cart):
    store.add_order(order_draft(cart))
    before = store.orders
    calls = []
    store.subscribe(lambda: calls.append(True))

    store.update_order_status("ORDER-missing", "delivered")

    assert store.orders == before
    assert calls == []


def test_update_status_unknown_id_ignores_status_value(store):
    store.update_order_status("ORDER-missing", "lost")

    assert store.orders == ()


def test_any_transition_allowed_by_default(store, cart):
    order = store.add_order(order_draft(cart))

    store.update_order_status(order.id, "delivered")
    store.update_order_status(order.id, "pending")

    assert store.get_order_by_id(order.id).status == "pending"


def test_unknown_status_value_is_rejected(store, cart):
    order = store.add_order(order_draft(cart))

    with pytest.raises(ValueError):
        store.update_order_status(order.id, "lost")


def test_strict_store_rejects_illegal_transition(cart):
    store = OrderStore(clock=lambda: FIXED_NOW, strict_transitions=True)
    order = store.add_order(order_draft(cart))

    store.update_order_status(order.id, "preparing")
    store.update_order_status(order.id, "on-the-way")
    store.update_order_status(order.id, "delivered")

    with pytest.raises(InvalidStatusTransition) as excinfo:
        store.update_order_status(order.id, "cancelled")
    assert excinfo.value.current == "delivered"
    assert store.get_order_by_id(order.id).status == "delivered"


def test_get_order_by_id_missing_returns_none(store):
    assert store.get_order_by_id("nope") is None
