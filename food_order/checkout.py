"""Checkout: turn the current cart into a placed order."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from food_order.cart import CartStore
from food_order.config import DELIVERY_FEE, SERVICE_FEE
from food_order.models import Order, OrderDraft, UserRecord
from food_order.orders import OrderStore

logger = logging.getLogger(__name__)

PAYMENT_METHODS: dict[str, str] = {
    "credit-card": "Credit Card",
    "cash": "Cash on Delivery",
}
DEFAULT_PAYMENT_METHOD = "credit-card"


class CheckoutError(Exception):
    """The order cannot be placed; the message is meant for the user."""


@dataclass(frozen=True)
class CheckoutSummary:
    subtotal: Decimal
    delivery_fee: Decimal
    service_fee: Decimal
    total: Decimal


def summarize(cart: CartStore) -> CheckoutSummary:
    subtotal = cart.get_cart_total()
    return CheckoutSummary(
        subtotal=subtotal,
        delivery_fee=DELIVERY_FEE,
        service_fee=SERVICE_FEE,
        total=subtotal + DELIVERY_FEE + SERVICE_FEE,
    )


def default_delivery_address(user: UserRecord | None) -> str:
    if user is None:
        return ""
    return str(user.user_metadata.get("address1") or "")


def payment_method_label(method_id: str) -> str:
    return PAYMENT_METHODS.get(method_id, PAYMENT_METHODS[DEFAULT_PAYMENT_METHOD])


def place_order(cart: CartStore, orders: OrderStore, delivery_address: str, payment_method: str) -> Order:
    """Create an order from the cart and clear the cart."""
    if not delivery_address.strip():
        raise CheckoutError("Please enter a delivery address")
    if not cart.items:
        raise CheckoutError("Your cart is empty")

    summary = summarize(cart)
    order = orders.add_order(
        OrderDraft(
            items=cart.items,
            subtotal=summary.subtotal,
            delivery_fee=summary.delivery_fee,
            service_fee=summary.service_fee,
            total=summary.total,
            delivery_address=delivery_address,
            payment_method=payment_method_label(payment_method),
        )
    )
    cart.clear_cart()
    logger.info("checkout_placed order_id=%s total=%s", order.id, order.total)
    return order
