from __future__ import annotations

import asyncio
from decimal import Decimal

from food_order.checkout import place_order
from food_order.context import create_context

from conftest import FakeIdentityProvider, make_draft, modifier


def test_cart_survives_restart(context, db_path):
    context.cart.add_item(make_draft(quantity=2, selected_toppings=(modifier("Cheese", "1.00"),)))
    line = context.cart.items[0]
    context.close()

    restarted = create_context(db_path, provider=FakeIdentityProvider(), background_writes=False)
    try:
        assert restarted.cart.items == (line,)
        assert restarted.cart.get_cart_total() == Decimal("22.00")
    finally:
        restarted.close()


def test_orders_and_current_order_survive_restart(context, db_path):
    context.cart.add_item(make_draft())
    order = place_order(context.cart, context.orders, "1 Main St", "cash")
    context.orders.update_order_status(order.id, "preparing")
    context.close()

    restarted = create_context(db_path, provider=FakeIdentityProvider(), background_writes=False)
    try:
        assert restarted.cart.items == ()
        assert [o.id for o in restarted.orders.orders] == [order.id]
        assert restarted.orders.current_order.id == order.id
        assert restarted.orders.current_order.status == "preparing"
        assert restarted.orders.orders[0].payment_method == "Cash on Delivery"
    finally:
        restarted.close()


def test_auth_state_is_persisted(context, storage):
    asyncio.run(context.auth.initialize())
    asyncio.run(context.auth.sign_up("a@example.com", "secret", "Ann"))

    record = storage.load("auth-storage")
    assert record == {
        "user": {"id": "u-new", "email": "a@example.com", "user_metadata": {"full_name": "Ann"}},
        "isAuthenticated": True,
    }


def test_reset_empties_stores_and_storage(context, storage):
    context.cart.add_item(make_draft())
    place_order(context.cart, context.orders, "1 Main St", "credit-card")
    context.cart.add_item(make_draft())

    context.reset()

    assert context.cart.items == ()
    assert context.orders.orders == ()
    assert context.orders.current_order is None
    assert storage.load("cart-storage") is None
    assert storage.load("order-storage") is None


def test_unreadable_cart_record_starts_empty(db_path, storage):
    storage.save("cart-storage", {"items": [{"id": "x"}]})

    context = create_context(db_path, provider=FakeIdentityProvider(), background_writes=False)
    try:
        assert context.cart.items == ()
    finally:
        context.close()


def test_background_context_flushes_on_close(db_path, storage):
    context = create_context(db_path, provider=FakeIdentityProvider(), background_writes=True)
    context.cart.add_item(make_draft())
    context.close()

    record = storage.load("cart-storage")
    assert len(record["items"]) == 1
