"""Order history and confirmation modal screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import Static

from food_order.money import format_money
from food_order.orders import OrderStore
from food_order.rendering import format_line_item, format_order_row, format_status, format_time


class HistoryModal(ModalScreen[None]):
    """Lists past orders, newest first, with the current order expanded on top."""

    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("ctrl+c", "close", "Close"),
    ]

    CSS = """
    HistoryModal {
        align: center middle;
        background: $background 60%;
    }

    #history-dialog {
        width: 76;
        height: auto;
        max-height: 90%;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #history-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #history-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    def __init__(self, orders: OrderStore, confirmation: bool = False) -> None:
        super().__init__()
        self.orders = orders
        self.confirmation = confirmation

    def compose(self) -> ComposeResult:
        title = "Order Confirmed" if self.confirmation else "Order History"
        with Container(id="history-dialog"):
            yield Static(title, id="history-title")
            yield Static(id="history-body")
            yield Static("Esc / q / Ctrl+C to close", id="history-help")

    def on_mount(self) -> None:
        self.query_one("#history-body", Static).update(self._render_body())

    def action_close(self) -> None:
        self.dismiss()

    def _render_body(self) -> Text:
        content = Text(style="white")
        current = self.orders.current_order
        if self.confirmation and current is not None:
            content.append(f"{current.id}  ", style="bold")
            content.append_text(format_status(current.status))
            content.append(f"\nEstimated delivery {format_time(current.estimated_delivery_time)}")
            content.append(f"\n{current.delivery_address} · {current.payment_method}\n")
            for item in current.items:
                content.append("\n")
                content.append_text(format_line_item(item))
            content.append(f"\n\nSubtotal {format_money(current.subtotal)}")
            content.append(f"  Fees {format_money(current.delivery_fee + current.service_fee)}")
            content.append(f"  Total {format_money(current.total)}", style="bold #f0b429")
            return content

        if not self.orders.orders:
            content.append("No orders yet", style="dim")
            return content
        for idx, order in enumerate(self.orders.orders):
            if idx > 0:
                content.append("\n\n")
            content.append_text(format_order_row(order))
        return content
