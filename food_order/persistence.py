"""SQLite key/value persistence for store snapshots."""

from __future__ import annotations

import json
import logging
import sqlite3
from concurrent.futures import Executor, Future
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from time import sleep
from typing import Any, Callable

from food_order.config import DB_PATH, STORAGE_RETRY_DELAY_SECONDS, STORAGE_WRITE_RETRIES
from food_order.models import CartLineItem, MenuModifier, Order, UserRecord

logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class KeyValueStorage:
    """One JSON record per namespace in a single SQLite table."""

    def __init__(self, db_path: str | Path = DB_PATH) -> None:
        self.db_path = Path(db_path)

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        return sqlite3.connect(self.db_path)

    def bootstrap_schema(self) -> None:
        """Create the storage table if it does not already exist."""
        with self._connect() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS storage (
                    namespace TEXT PRIMARY KEY,
                    payload TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
                """
            )

    def load(self, namespace: str) -> dict[str, Any] | None:
        """Return the stored record, or None when missing or unreadable."""
        with self._connect() as conn:
            row = conn.execute("SELECT payload FROM storage WHERE namespace = ?", (namespace,)).fetchone()
        if row is None:
            return None
        try:
            record = json.loads(row[0])
        except json.JSONDecodeError:
            logger.warning("storage_corrupt namespace=%s", namespace)
            return None
        if not isinstance(record, dict):
            logger.warning("storage_corrupt namespace=%s type=%s", namespace, type(record).__name__)
            return None
        return record

    def save(self, namespace: str, record: dict[str, Any]) -> None:
        payload = json.dumps(record, separators=(",", ":"))
        with self._connect() as conn:
            with conn:
                conn.execute(
                    """
                    INSERT INTO storage (namespace, payload, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(namespace) DO UPDATE SET payload = excluded.payload, updated_at = excluded.updated_at
                    """,
                    (namespace, payload, _utc_now_iso()),
                )

    def delete(self, namespace: str) -> None:
        with self._connect() as conn:
            with conn:
                conn.execute("DELETE FROM storage WHERE namespace = ?", (namespace,))


# Serialization. Keys follow the persisted camelCase shape; decimals travel as strings.


def modifier_to_dict(modifier: MenuModifier) -> dict[str, str]:
    return {"name": modifier.name, "price": str(modifier.price)}


def modifier_from_dict(data: dict[str, Any]) -> MenuModifier:
    return MenuModifier(name=str(data["name"]), price=Decimal(str(data["price"])))


def line_item_to_dict(item: CartLineItem) -> dict[str, Any]:
    return {
        "id": item.id,
        "menuItemId": item.menu_item_id,
        "restaurantId": item.restaurant_id,
        "restaurantName": item.restaurant_name,
        "name": item.name,
        "image": item.image,
        "price": str(item.price),
        "quantity": item.quantity,
        "selectedToppings": [modifier_to_dict(m) for m in item.selected_toppings],
        "selectedSides": [modifier_to_dict(m) for m in item.selected_sides],
        "specialInstructions": item.special_instructions,
        "size": item.size,
    }


def line_item_from_dict(data: dict[str, Any]) -> CartLineItem:
    return CartLineItem(
        id=str(data["id"]),
        menu_item_id=str(data["menuItemId"]),
        restaurant_id=str(data["restaurantId"]),
        restaurant_name=str(data.get("restaurantName", "")),
        name=str(data["name"]),
        image=str(data.get("image") or ""),
        price=Decimal(str(data["price"])),
        quantity=int(data["quantity"]),
        selected_toppings=tuple(modifier_from_dict(m) for m in data.get("selectedToppings") or []),
        selected_sides=tuple(modifier_from_dict(m) for m in data.get("selectedSides") or []),
        special_instructions=data.get("specialInstructions"),
        size=data.get("size"),
    )


def order_to_dict(order: Order) -> dict[str, Any]:
    return {
        "id": order.id,
        "items": [line_item_to_dict(item) for item in order.items],
        "subtotal": str(order.subtotal),
        "deliveryFee": str(order.delivery_fee),
        "serviceFee": str(order.service_fee),
        "total": str(order.total),
        "deliveryAddress": order.delivery_address,
        "paymentMethod": order.payment_method,
        "status": order.status,
        "createdAt": order.created_at.isoformat(),
        "estimatedDeliveryTime": order.estimated_delivery_time.isoformat(),
    }


def order_from_dict(data: dict[str, Any]) -> Order:
    return Order(
        id=str(data["id"]),
        items=tuple(line_item_from_dict(item) for item in data.get("items") or []),
        subtotal=Decimal(str(data["subtotal"])),
        delivery_fee=Decimal(str(data["deliveryFee"])),
        service_fee=Decimal(str(data["serviceFee"])),
        total=Decimal(str(data["total"])),
        delivery_address=str(data.get("deliveryAddress", "")),
        payment_method=str(data.get("paymentMethod", "")),
        status=data["status"],
        created_at=datetime.fromisoformat(data["createdAt"]),
        estimated_delivery_time=datetime.fromisoformat(data["estimatedDeliveryTime"]),
    )


def user_to_dict(user: UserRecord) -> dict[str, Any]:
    return {"id": user.id, "email": user.email, "user_metadata": dict(user.user_metadata)}


def user_from_dict(data: dict[str, Any]) -> UserRecord:
    return UserRecord(
        id=str(data["id"]),
        email=str(data.get("email") or ""),
        user_metadata=dict(data.get("user_metadata") or {}),
    )


def cart_record(items: tuple[CartLineItem, ...]) -> dict[str, Any]:
    return {"items": [line_item_to_dict(item) for item in items]}


def order_record(orders: tuple[Order, ...], current_order: Order | None) -> dict[str, Any]:
    return {
        "orders": [order_to_dict(order) for order in orders],
        "currentOrder": order_to_dict(current_order) if current_order is not None else None,
    }


def auth_record(user: UserRecord | None, is_authenticated: bool) -> dict[str, Any]:
    return {"user": user_to_dict(user) if user is not None else None, "isAuthenticated": is_authenticated}


class PersistenceAdapter:
    """Writes a store's snapshot to storage whenever the store notifies.

    The snapshot is serialized on the caller's thread so later mutations
    cannot leak into it. With an executor the write happens in the background
    (a single worker keeps writes in order); without one it happens inline.
    Write failures are retried, then logged; they never reach the store.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        namespace: str,
        snapshot: Callable[[], dict[str, Any]],
        executor: Executor | None = None,
        retries: int = STORAGE_WRITE_RETRIES,
        retry_delay: float = STORAGE_RETRY_DELAY_SECONDS,
    ) -> None:
        self.storage = storage
        self.namespace = namespace
        self.snapshot = snapshot
        self.executor = executor
        self.retries = retries
        self.retry_delay = retry_delay
        self._pending: list[Future] = []

    def __call__(self) -> None:
        record = self.snapshot()
        if self.executor is None:
            self._write(record)
            return
        self._pending = [f for f in self._pending if not f.done()]
        self._pending.append(self.executor.submit(self._write, record))

    def flush(self) -> None:
        """Block until queued background writes have finished."""
        for future in self._pending:
            future.result()
        self._pending = []

    def _write(self, record: dict[str, Any]) -> bool:
        attempts = max(1, self.retries)
        for attempt in range(1, attempts + 1):
            try:
                self.storage.save(self.namespace, record)
                return True
            except (sqlite3.Error, OSError) as exc:
                logger.warning(
                    "storage_write_failed namespace=%s attempt=%d/%d error=%r",
                    self.namespace,
                    attempt,
                    attempts,
                    exc,
                )
                if attempt < attempts:
                    sleep(self.retry_delay)
        logger.error("storage_write_gave_up namespace=%s", self.namespace)
        return False
