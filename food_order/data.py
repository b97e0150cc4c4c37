"""Catalog view: static restaurants and menus, search, and item pricing."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from food_order.constant import (
    CATEGORIES,
    RESTAURANTS as _RESTAURANTS_RAW,
    SIDES as _SIDES_RAW,
    TOPPINGS as _TOPPINGS_RAW,
)
from food_order.models import CartItemDraft, MenuItem, MenuModifier, MenuSize, Restaurant
from food_order.money import ZERO, modifiers_total

ALL_CATEGORY = "All"


def _modifier(raw: dict[str, str]) -> MenuModifier:
    return MenuModifier(name=raw["name"], price=Decimal(raw["price"]))


def _menu_item(raw: dict[str, object]) -> MenuItem:
    return MenuItem(
        id=str(raw["id"]),
        name=str(raw["name"]),
        description=str(raw["description"]),
        price=Decimal(str(raw["price"])),
        image=str(raw["image"]),
        category=str(raw["category"]),
        rating=float(raw["rating"]),  # type: ignore[arg-type]
        preparation_time=str(raw["preparation_time"]),
        sizes=tuple(MenuSize(name=s["name"], price=Decimal(s["price"])) for s in raw.get("sizes", [])),  # type: ignore[attr-defined]
    )


RESTAURANTS: tuple[Restaurant, ...] = tuple(
    Restaurant(
        id=str(raw["id"]),
        name=str(raw["name"]),
        description=str(raw["description"]),
        image=str(raw["image"]),
        rating=float(raw["rating"]),  # type: ignore[arg-type]
        delivery_time=str(raw["delivery_time"]),
        delivery_fee=Decimal(str(raw["delivery_fee"])),
        categories=tuple(raw["categories"]),  # type: ignore[arg-type]
        menu_items=tuple(_menu_item(item) for item in raw["menu_items"]),  # type: ignore[attr-defined]
    )
    for raw in _RESTAURANTS_RAW
)

TOPPINGS: tuple[MenuModifier, ...] = tuple(_modifier(raw) for raw in _TOPPINGS_RAW)
SIDES: tuple[MenuModifier, ...] = tuple(_modifier(raw) for raw in _SIDES_RAW)

HOME_CATEGORIES: tuple[str, ...] = tuple(CATEGORIES)


@dataclass(frozen=True)
class MenuSearchResult:
    """A menu item found by search, with the restaurant it belongs to."""

    restaurant: Restaurant
    item: MenuItem


def get_restaurant(restaurant_id: str) -> Restaurant | None:
    for restaurant in RESTAURANTS:
        if restaurant.id == restaurant_id:
            return restaurant
    return None


def get_menu_item(menu_item_id: str) -> MenuSearchResult | None:
    """Find a menu item by id across all restaurants."""
    for restaurant in RESTAURANTS:
        for item in restaurant.menu_items:
            if item.id == menu_item_id:
                return MenuSearchResult(restaurant, item)
    return None


def _matches_text(query: str, *fields: str) -> bool:
    q = query.lower()
    return any(q in value.lower() for value in fields)


def _matches_category(category: str, candidates: Iterable[str]) -> bool:
    if category == ALL_CATEGORY:
        return True
    return any(c.lower() == category.lower() for c in candidates)


def search_restaurants(query: str = "", category: str = ALL_CATEGORY) -> list[Restaurant]:
    """Restaurants whose name or description contains ``query`` (case-insensitive)."""
    return [
        r
        for r in RESTAURANTS
        if _matches_text(query, r.name, r.description) and _matches_category(category, r.categories)
    ]


def search_menu_items(query: str = "", category: str = ALL_CATEGORY) -> list[MenuSearchResult]:
    """Menu items across all restaurants matching ``query`` and ``category``."""
    return [
        MenuSearchResult(restaurant, item)
        for restaurant in RESTAURANTS
        for item in restaurant.menu_items
        if _matches_text(query, item.name, item.description) and _matches_category(category, [item.category])
    ]


def restaurant_categories(restaurant: Restaurant) -> list[str]:
    """``All`` followed by the restaurant's item categories in menu order."""
    categories = [ALL_CATEGORY]
    for item in restaurant.menu_items:
        if item.category not in categories:
            categories.append(item.category)
    return categories


def filter_menu(restaurant: Restaurant, category: str = ALL_CATEGORY) -> list[MenuItem]:
    if category == ALL_CATEGORY:
        return list(restaurant.menu_items)
    return [item for item in restaurant.menu_items if item.category == category]


def default_size(item: MenuItem) -> str | None:
    return item.sizes[0].name if item.sizes else None


def size_surcharge(item: MenuItem, size: str | None) -> Decimal:
    for option in item.sizes:
        if option.name == size:
            return option.price
    return ZERO


def build_cart_item(
    restaurant: Restaurant,
    item: MenuItem,
    size: str | None = None,
    toppings: Iterable[MenuModifier] = (),
    sides: Iterable[MenuModifier] = (),
    quantity: int = 1,
    special_instructions: str | None = None,
) -> CartItemDraft:
    """Resolve the size surcharge into the unit price and build a cart candidate."""
    return CartItemDraft(
        menu_item_id=item.id,
        restaurant_id=restaurant.id,
        restaurant_name=restaurant.name,
        name=item.name,
        image=item.image,
        price=item.price + size_surcharge(item, size),
        quantity=quantity,
        selected_toppings=tuple(toppings),
        selected_sides=tuple(sides),
        special_instructions=special_instructions or None,
        size=size or None,
    )


def preview_total(
    item: MenuItem,
    size: str | None = None,
    toppings: Iterable[MenuModifier] = (),
    sides: Iterable[MenuModifier] = (),
    quantity: int = 1,
) -> Decimal:
    """Price shown on the customise screen before the item is added."""
    unit = item.price + size_surcharge(item, size) + modifiers_total(toppings) + modifiers_total(sides)
    return unit * quantity
