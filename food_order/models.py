"""Domain models for food-order."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Literal

OrderStatus = Literal["pending", "confirmed", "preparing", "on-the-way", "delivered", "cancelled"]

ORDER_STATUSES: tuple[str, ...] = ("pending", "confirmed", "preparing", "on-the-way", "delivered", "cancelled")


@dataclass(frozen=True)
class MenuModifier:
    """A priced topping or side."""

    name: str
    price: Decimal


@dataclass(frozen=True)
class MenuSize:
    """A size option and its surcharge over the base price."""

    name: str
    price: Decimal


@dataclass(frozen=True)
class MenuItem:
    """A dish on a restaurant menu."""

    id: str
    name: str
    description: str
    price: Decimal
    image: str
    category: str
    rating: float
    preparation_time: str
    sizes: tuple[MenuSize, ...] = ()


@dataclass(frozen=True)
class Restaurant:
    """A restaurant and its menu."""

    id: str
    name: str
    description: str
    image: str
    rating: float
    delivery_time: str
    delivery_fee: Decimal
    categories: tuple[str, ...]
    menu_items: tuple[MenuItem, ...]


@dataclass(frozen=True)
class CartItemDraft:
    """A fully priced line item the caller wants to add, before it gets an id."""

    menu_item_id: str
    restaurant_id: str
    restaurant_name: str
    name: str
    price: Decimal
    quantity: int
    image: str = ""
    selected_toppings: tuple[MenuModifier, ...] = ()
    selected_sides: tuple[MenuModifier, ...] = ()
    special_instructions: str | None = None
    size: str | None = None


@dataclass(frozen=True)
class CartLineItem:
    """One cart row: a menu item with a specific set of modifiers and a quantity."""

    id: str
    menu_item_id: str
    restaurant_id: str
    restaurant_name: str
    name: str
    price: Decimal
    quantity: int
    image: str = ""
    selected_toppings: tuple[MenuModifier, ...] = ()
    selected_sides: tuple[MenuModifier, ...] = ()
    special_instructions: str | None = None
    size: str | None = None


@dataclass(frozen=True)
class OrderDraft:
    """Checkout payload handed to order creation."""

    items: tuple[CartLineItem, ...]
    subtotal: Decimal
    delivery_fee: Decimal
    service_fee: Decimal
    total: Decimal
    delivery_address: str
    payment_method: str


@dataclass(frozen=True)
class Order:
    """A placed order. Only ``status`` changes after creation."""

    id: str
    items: tuple[CartLineItem, ...]
    subtotal: Decimal
    delivery_fee: Decimal
    service_fee: Decimal
    total: Decimal
    delivery_address: str
    payment_method: str
    status: OrderStatus
    created_at: datetime
    estimated_delivery_time: datetime


@dataclass(frozen=True)
class UserRecord:
    """Signed-in user as reported by the identity provider."""

    id: str
    email: str
    user_metadata: dict[str, Any] = field(default_factory=dict)
