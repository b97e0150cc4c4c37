"""Cart state: merge-on-add line items and derived totals."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import replace
from decimal import Decimal
from typing import Callable, Hashable, Iterable

from food_order.ids import new_line_id
from food_order.models import CartItemDraft, CartLineItem, MenuModifier
from food_order.money import ZERO, modifiers_total

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


def _modifier_key(modifiers: Iterable[MenuModifier]) -> frozenset[tuple[Hashable, int]]:
    # Multiset of (name, price); selection order is display-only.
    return frozenset(Counter((m.name, m.price) for m in modifiers).items())


def merge_key(item: CartItemDraft | CartLineItem) -> tuple[Hashable, ...]:
    """Key under which two additions count as the same cart line."""
    return (
        item.menu_item_id,
        item.restaurant_id,
        item.size or None,
        _modifier_key(item.selected_toppings),
        _modifier_key(item.selected_sides),
    )


def line_total(item: CartLineItem) -> Decimal:
    """Unit price plus modifiers, times quantity."""
    unit = item.price + modifiers_total(item.selected_toppings) + modifiers_total(item.selected_sides)
    return unit * item.quantity


def add_line(
    items: tuple[CartLineItem, ...],
    candidate: CartItemDraft,
    id_factory: Callable[[str], str] = new_line_id,
) -> tuple[CartLineItem, ...]:
    """Merge ``candidate`` into a matching line or append it with a fresh id."""
    key = merge_key(candidate)
    for idx, existing in enumerate(items):
        if merge_key(existing) == key:
            merged = replace(existing, quantity=existing.quantity + candidate.quantity)
            return items[:idx] + (merged,) + items[idx + 1 :]

    line = CartLineItem(id=id_factory(candidate.menu_item_id), **_draft_fields(candidate))
    return items + (line,)


def _draft_fields(draft: CartItemDraft) -> dict:
    # dataclasses.asdict would turn the modifier tuples into tuples of dicts.
    return {name: getattr(draft, name) for name in draft.__dataclass_fields__}


def remove_line(items: tuple[CartLineItem, ...], line_id: str) -> tuple[CartLineItem, ...]:
    return tuple(item for item in items if item.id != line_id)


def set_quantity(items: tuple[CartLineItem, ...], line_id: str, quantity: int) -> tuple[CartLineItem, ...]:
    """Set a line's quantity; zero or below removes the line."""
    if quantity <= 0:
        return remove_line(items, line_id)
    return tuple(replace(item, quantity=quantity) if item.id == line_id else item for item in items)


def cart_total(items: Iterable[CartLineItem]) -> Decimal:
    return sum((line_total(item) for item in items), ZERO)


def item_count(items: Iterable[CartLineItem]) -> int:
    return sum(item.quantity for item in items)


class CartStore:
    """Holds the cart's line items and notifies listeners after every change."""

    def __init__(self, id_factory: Callable[[str], str] = new_line_id) -> None:
        self._items: tuple[CartLineItem, ...] = ()
        self._id_factory = id_factory
        self._listeners: list[Listener] = []

    @property
    def items(self) -> tuple[CartLineItem, ...]:
        return self._items

    def get_item(self, line_id: str) -> CartLineItem | None:
        for item in self._items:
            if item.id == line_id:
                return item
        return None

    def add_item(self, candidate: CartItemDraft) -> None:
        self._set(add_line(self._items, candidate, self._id_factory))
        logger.debug("cart_add menu_item_id=%s quantity=%s", candidate.menu_item_id, candidate.quantity)

    def remove_item(self, line_id: str) -> None:
        if self.get_item(line_id) is None:
            return
        self._set(remove_line(self._items, line_id))

    def update_quantity(self, line_id: str, quantity: int) -> None:
        if self.get_item(line_id) is None:
            return
        self._set(set_quantity(self._items, line_id, quantity))

    def clear_cart(self) -> None:
        self._set(())

    def get_cart_total(self) -> Decimal:
        return cart_total(self._items)

    def get_cart_item_count(self) -> int:
        return item_count(self._items)

    def hydrate(self, items: Iterable[CartLineItem]) -> None:
        """Load persisted items without notifying listeners."""
        self._items = tuple(items)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, items: tuple[CartLineItem, ...]) -> None:
        self._items = items
        for listener in list(self._listeners):
            listener()
