"""Checkout modal screen."""

from __future__ import annotations

from typing import Callable

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from food_order.checkout import DEFAULT_PAYMENT_METHOD, PAYMENT_METHODS, CheckoutError, CheckoutSummary
from food_order.models import Order
from food_order.money import format_money

PlaceOrder = Callable[[str, str], Order]


class CheckoutModal(ModalScreen[Order | None]):
    """Collect a delivery address and payment method, then place the order."""

    CSS = """
    CheckoutModal {
        align: center middle;
        background: $background 60%;
    }

    #checkout-dialog {
        width: 64;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #checkout-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #checkout-address {
        border: heavy $secondary;
        padding: 0 1;
        color: white;
        margin-bottom: 1;
    }

    #checkout-summary {
        color: white;
        margin-bottom: 1;
    }

    #checkout-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #checkout-help {
        color: #dddddd;
    }
    """

    def __init__(self, summary: CheckoutSummary, address: str, place_order: PlaceOrder) -> None:
        super().__init__()
        self.summary = summary
        self.address = address
        self.payment_method = DEFAULT_PAYMENT_METHOD
        self.place_order = place_order
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="checkout-dialog"):
            yield Static("Checkout", id="checkout-title")
            yield Static(id="checkout-address")
            yield Static(id="checkout-summary")
            yield Static(id="checkout-error")
            yield Static("Type address. Tab switch payment. Enter place order. Esc cancel.", id="checkout-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key in {"escape", "ctrl+c"}:
            self.dismiss(None)
            event.stop()
            return

        if event.key == "enter":
            self._confirm()
            event.stop()
            return

        if event.key == "tab":
            method_ids = list(PAYMENT_METHODS)
            self.payment_method = method_ids[(method_ids.index(self.payment_method) + 1) % len(method_ids)]
            self._refresh_content()
            event.stop()
            return

        if event.key == "backspace":
            if self.address:
                self.address = self.address[:-1]
                self.error = ""
                self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character:
            self.address += event.character
            self.error = ""
            self._refresh_content()
            event.stop()

    def _confirm(self) -> None:
        try:
            order = self.place_order(self.address.strip(), self.payment_method)
        except CheckoutError as exc:
            self.error = str(exc)
            self._refresh_content()
            return
        self.dismiss(order)

    def _refresh_content(self) -> None:
        address_widget = self.query_one("#checkout-address", Static)
        summary_widget = self.query_one("#checkout-summary", Static)
        error_widget = self.query_one("#checkout-error", Static)

        address_widget.update(f"Deliver to: {self.address}|")

        summary = Text()
        summary.append(f"Payment: {PAYMENT_METHODS[self.payment_method]}\n\n", style="bold")
        summary.append(f"Subtotal      {format_money(self.summary.subtotal)}\n")
        summary.append(f"Delivery fee  {format_money(self.summary.delivery_fee)}\n")
        summary.append(f"Service fee   {format_money(self.summary.service_fee)}\n")
        summary.append(f"Total         {format_money(self.summary.total)}", style="bold #f0b429")
        summary_widget.update(summary)
        error_widget.update(self.error or "")
