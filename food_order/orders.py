"""Order history: creation from a cart snapshot and status changes."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable

from food_order.config import ESTIMATED_DELIVERY_MINUTES
from food_order.ids import new_order_id
from food_order.models import ORDER_STATUSES, Order, OrderDraft, OrderStatus

logger = logging.getLogger(__name__)

Listener = Callable[[], None]

# Conventional lifecycle, only checked when a store is built with strict_transitions=True.
ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    "pending": frozenset({"confirmed", "cancelled"}),
    "confirmed": frozenset({"preparing", "cancelled"}),
    "preparing": frozenset({"on-the-way", "cancelled"}),
    "on-the-way": frozenset({"delivered"}),
    "delivered": frozenset(),
    "cancelled": frozenset(),
}


class InvalidStatusTransition(Exception):
    """Raised by a strict store when a status change is not in ALLOWED_TRANSITIONS."""

    def __init__(self, order_id: str, current: str, requested: str) -> None:
        super().__init__(f"Order {order_id} cannot move from {current!r} to {requested!r}")
        self.order_id = order_id
        self.current = current
        self.requested = requested


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def create_order(draft: OrderDraft, created_at: datetime, order_id: str) -> Order:
    """Freeze a checkout draft into a confirmed order."""
    return Order(
        id=order_id,
        items=tuple(draft.items),
        subtotal=draft.subtotal,
        delivery_fee=draft.delivery_fee,
        service_fee=draft.service_fee,
        total=draft.total,
        delivery_address=draft.delivery_address,
        payment_method=draft.payment_method,
        status="confirmed",
        created_at=created_at,
        estimated_delivery_time=created_at + timedelta(minutes=ESTIMATED_DELIVERY_MINUTES),
    )


def check_status(status: str) -> None:
    if status not in ORDER_STATUSES:
        raise ValueError(f"Unknown order status: {status!r}")


class OrderStore:
    """Owns the order history (newest first) and the current order."""

    def __init__(
        self,
        clock: Callable[[], datetime] = _utc_now,
        strict_transitions: bool = False,
    ) -> None:
        self._orders: tuple[Order, ...] = ()
        self._current_order: Order | None = None
        self._clock = clock
        self.strict_transitions = strict_transitions
        self._listeners: list[Listener] = []

    @property
    def orders(self) -> tuple[Order, ...]:
        return self._orders

    @property
    def current_order(self) -> Order | None:
        return self._current_order

    def add_order(self, draft: OrderDraft) -> Order:
        created_at = self._clock()
        order = create_order(draft, created_at, new_order_id(created_at))
        self._orders = (order,) + self._orders
        self._current_order = order
        logger.info("order_added id=%s total=%s items=%d", order.id, order.total, len(order.items))
        self._notify()
        return order

    def update_order_status(self, order_id: str, status: OrderStatus) -> None:
        order = self.get_order_by_id(order_id)
        if order is None:
            return
        check_status(status)
        if self.strict_transitions and status not in ALLOWED_TRANSITIONS[order.status]:
            raise InvalidStatusTransition(order_id, order.status, status)

        updated = replace(order, status=status)
        self._orders = tuple(updated if o.id == order_id else o for o in self._orders)
        if self._current_order is not None and self._current_order.id == order_id:
            self._current_order = updated
        logger.info("order_status id=%s %s->%s", order_id, order.status, status)
        self._notify()

    def get_order_by_id(self, order_id: str) -> Order | None:
        for order in self._orders:
            if order.id == order_id:
                return order
        return None

    def hydrate(self, orders: Iterable[Order], current_order: Order | None) -> None:
        """Load persisted history without notifying listeners."""
        self._orders = tuple(orders)
        self._current_order = current_order

    def clear(self) -> None:
        self._orders = ()
        self._current_order = None
        self._notify()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()
