from __future__ import annotations

from decimal import Decimal

from food_order.data import (
    SIDES,
    TOPPINGS,
    build_cart_item,
    default_size,
    filter_menu,
    get_menu_item,
    get_restaurant,
    preview_total,
    restaurant_categories,
    search_menu_items,
    search_restaurants,
)


def test_search_restaurants_matches_name_and_description():
    assert [r.name for r in search_restaurants("PIZZA")] == ["Pizza Paradise"]
    assert [r.name for r in search_restaurants("healthy wraps")] == ["Wrap World"]


def test_search_restaurants_by_category():
    assert [r.id for r in search_restaurants("", "Burrito")] == ["3"]
    assert len(search_restaurants("", "All")) == 4


def test_search_menu_items_tags_restaurant():
    results = search_menu_items("veggie")

    assert [(r.restaurant.name, r.item.name) for r in results] == [
        ("Burger Palace", "Veggie Burger"),
        ("Pizza Paradise", "Veggie Supreme"),
        ("Burrito Bar", "Veggie Burrito"),
    ]


def test_search_menu_items_by_category():
    assert {r.item.category for r in search_menu_items("", "pizza")} == {"Pizza"}
    assert search_menu_items("burger", "Wrap") == []


def test_lookup_helpers():
    assert get_restaurant("2").name == "Pizza Paradise"
    assert get_restaurant("99") is None
    found = get_menu_item("3-2")
    assert found.item.name == "Beef Burrito"
    assert found.restaurant.id == "3"
    assert get_menu_item("0-0") is None


def test_restaurant_categories_and_filter():
    restaurant = get_restaurant("1")

    assert restaurant_categories(restaurant) == ["All", "Burger"]
    assert len(filter_menu(restaurant, "Burger")) == 3
    assert filter_menu(restaurant, "Pizza") == []


def test_build_cart_item_bakes_size_surcharge_into_price():
    found = get_menu_item("1-1")
    bacon = next(t for t in TOPPINGS if t.name == "Bacon")

    draft = build_cart_item(found.restaurant, found.item, size="Large", toppings=[bacon], quantity=2)

    assert draft.price == Decimal("10.99")
    assert draft.size == "Large"
    assert draft.selected_toppings == (bacon,)
    assert draft.restaurant_name == "Burger Palace"
    assert draft.quantity == 2


def test_build_cart_item_without_sizes_drops_blank_size():
    found = get_menu_item("3-1")

    draft = build_cart_item(found.restaurant, found.item, size="", special_instructions="")

    assert default_size(found.item) is None
    assert draft.size is None
    assert draft.special_instructions is None
    assert draft.price == Decimal("10.99")


def test_preview_total_matches_customise_screen():
    found = get_menu_item("2-1")
    fries = next(s for s in SIDES if s.name == "Fries")

    total = preview_total(found.item, "Medium", [], [fries], quantity=2)

    assert total == (Decimal("12.99") + Decimal("3.00") + Decimal("3.50")) * 2
