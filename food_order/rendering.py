"""Rendering helpers for cart rows, modifiers and order status."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from rich.text import Text

from food_order.cart import line_total
from food_order.models import CartLineItem, MenuItem, MenuModifier, Order, Restaurant
from food_order.money import format_money


def status_style(status: str) -> str:
    """Return a consistent badge style for an order status."""
    if status == "delivered":
        return "bold #0b1f0f on #5fbf72"
    if status == "cancelled":
        return "bold #ffffff on #b23a48"
    if status in {"preparing", "on-the-way"}:
        return "bold #1f1300 on #f0b429"
    return "bold #ffffff on #2f6db5"


def format_status(status: str) -> Text:
    return Text(f" {status} ", style=status_style(status))


def format_modifier_tags(modifiers: tuple[MenuModifier, ...]) -> Text:
    """Render selected toppings/sides as compact tags."""
    text = Text()
    for idx, modifier in enumerate(modifiers):
        if idx > 0:
            text.append(" ")
        text.append(f"[{modifier.name} +{format_money(modifier.price)}]", style="white")
    return text


def format_line_item(item: CartLineItem) -> Text:
    """Render a cart row: quantity, name, optional size and the line total."""
    text = Text()
    text.append(f"{item.quantity}x ", style="bold")
    text.append(item.name)
    if item.size:
        text.append(f" ({item.size})", style="dim")
    text.append(f"  {format_money(line_total(item))}", style="bold #f0b429")
    modifiers = item.selected_toppings + item.selected_sides
    if modifiers:
        text.append("\n      ")
        text.append_text(format_modifier_tags(modifiers))
    if item.special_instructions:
        text.append(f"\n      “{item.special_instructions}”", style="italic dim")
    return text


def format_time(moment: datetime) -> str:
    return moment.astimezone().strftime("%I:%M %p")


def format_order_row(order: Order) -> Text:
    """Render one order-history row."""
    text = Text()
    text.append(order.id, style="bold")
    text.append("  ")
    text.append_text(format_status(order.status))
    text.append(f"\n  {order.created_at.astimezone():%b %d, %Y} {format_time(order.created_at)}")
    count = sum(item.quantity for item in order.items)
    text.append(f"  {count} item{'s' if count != 1 else ''}  ")
    text.append(format_money(order.total), style="bold #f0b429")
    return text


def window_bounds(total: int, rows: int, selected: int | None) -> tuple[int, int]:
    """The ``[start, end)`` slice of ``total`` entries that fits ``rows`` and keeps ``selected`` centred."""
    rows = max(1, rows)
    if total <= rows:
        return 0, max(0, total)
    anchor = 0 if selected is None else selected - rows // 2
    start = min(max(anchor, 0), total - rows)
    return start, start + rows


def render_window(entries: Sequence[Text], selected: int | None, rows: int) -> Text:
    """Join the visible entries with a pointer on ``selected`` and ⋮ where the list is cut."""
    start, end = window_bounds(len(entries), rows, selected)
    out = Text()
    if start > 0:
        out.append("⋮\n", style="dim")
    for idx in range(start, end):
        if idx > start:
            out.append("\n")
        out.append("➤ " if idx == selected else "  ")
        out.append_text(entries[idx])
    if end < len(entries):
        out.append("\n⋮", style="dim")
    return out


def format_menu_row(item: MenuItem, restaurant_name: str | None = None) -> Text:
    text = Text(f"{item.name} ")
    text.append(format_money(item.price), style="bold")
    if restaurant_name:
        text.append(f"  {restaurant_name}", style="dim")
    return text


def format_restaurant_row(restaurant: Restaurant) -> Text:
    text = Text(restaurant.name, style="bold #8ecae6")
    text.append(f"  ★ {restaurant.rating}  {restaurant.delivery_time}", style="dim")
    return text
