"""Composition root: owns the stores and wires them to storage."""

from __future__ import annotations

import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from food_order.auth import AuthStore, IdentityProvider
from food_order.cart import CartStore
from food_order.config import AUTH_STORAGE_KEY, CART_STORAGE_KEY, DB_PATH, ORDER_STORAGE_KEY
from food_order.identity import SupabaseIdentityProvider
from food_order.orders import OrderStore
from food_order.persistence import (
    KeyValueStorage,
    PersistenceAdapter,
    auth_record,
    cart_record,
    line_item_from_dict,
    order_from_dict,
    order_record,
    user_from_dict,
)

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """One instance per running app; tests build their own."""

    storage: KeyValueStorage
    cart: CartStore
    orders: OrderStore
    auth: AuthStore
    adapters: list[PersistenceAdapter] = field(default_factory=list)
    executor: Executor | None = None
    _unsubscribers: list[Callable[[], None]] = field(default_factory=list)

    def flush(self) -> None:
        """Wait for queued background writes."""
        for adapter in self.adapters:
            adapter.flush()

    def reset(self) -> None:
        """Empty every store and its persisted record."""
        self.cart.clear_cart()
        self.orders.clear()
        self.auth.hydrate(None, False)
        self.flush()
        for namespace in (CART_STORAGE_KEY, ORDER_STORAGE_KEY, AUTH_STORAGE_KEY):
            self.storage.delete(namespace)

    def close(self) -> None:
        self.flush()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self.auth.close()
        if self.executor is not None:
            self.executor.shutdown(wait=True)
            self.executor = None


def _load_state(storage: KeyValueStorage, cart: CartStore, orders: OrderStore, auth: AuthStore) -> None:
    record = storage.load(CART_STORAGE_KEY)
    if record:
        try:
            cart.hydrate(line_item_from_dict(item) for item in record.get("items") or [])
        except (KeyError, TypeError, ValueError, ArithmeticError) as exc:
            logger.warning("cart_state_unreadable error=%r", exc)

    record = storage.load(ORDER_STORAGE_KEY)
    if record:
        try:
            current = record.get("currentOrder")
            orders.hydrate(
                [order_from_dict(o) for o in record.get("orders") or []],
                order_from_dict(current) if current else None,
            )
        except (KeyError, TypeError, ValueError, ArithmeticError) as exc:
            logger.warning("order_state_unreadable error=%r", exc)

    record = storage.load(AUTH_STORAGE_KEY)
    if record:
        try:
            user = record.get("user")
            auth.hydrate(user_from_dict(user) if user else None, bool(record.get("isAuthenticated")))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("auth_state_unreadable error=%r", exc)


def create_context(
    db_path: str | Path = DB_PATH,
    provider: IdentityProvider | None = None,
    background_writes: bool = True,
    strict_transitions: bool = False,
) -> AppContext:
    """Build the stores, load persisted state, and persist every later change."""
    storage = KeyValueStorage(db_path)
    storage.bootstrap_schema()

    cart = CartStore()
    orders = OrderStore(strict_transitions=strict_transitions)
    auth = AuthStore(provider or SupabaseIdentityProvider(storage=storage))
    _load_state(storage, cart, orders, auth)

    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="food-order-storage") if background_writes else None
    adapters = [
        PersistenceAdapter(storage, CART_STORAGE_KEY, lambda: cart_record(cart.items), executor),
        PersistenceAdapter(storage, ORDER_STORAGE_KEY, lambda: order_record(orders.orders, orders.current_order), executor),
        PersistenceAdapter(storage, AUTH_STORAGE_KEY, lambda: auth_record(auth.user, auth.is_authenticated), executor),
    ]
    unsubscribers = [
        cart.subscribe(adapters[0]),
        orders.subscribe(adapters[1]),
        auth.subscribe(adapters[2]),
    ]
    logger.info(
        "context_ready db=%s cart_items=%d orders=%d",
        storage.db_path,
        len(cart.items),
        len(orders.orders),
    )
    return AppContext(
        storage=storage,
        cart=cart,
        orders=orders,
        auth=auth,
        adapters=adapters,
        executor=executor,
        _unsubscribers=unsubscribers,
    )
