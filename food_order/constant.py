"""Editable static catalog: restaurants, menus and shared modifiers."""

from __future__ import annotations

CATEGORIES: list[str] = ["All", "Burger", "Pizza", "Wrap", "Burrito"]

SIDES: list[dict[str, str]] = [
    {"name": "Fries", "image": "fries.png", "price": "3.50"},
    {"name": "Onion Rings", "image": "onion-rings.png", "price": "4.00"},
    {"name": "Mozarella Sticks", "image": "mozarella-sticks.png", "price": "5.00"},
    {"name": "Coleslaw", "image": "coleslaw.png", "price": "2.50"},
    {"name": "Salad", "image": "salad.png", "price": "4.50"},
]

TOPPINGS: list[dict[str, str]] = [
    {"name": "Avocado", "image": "avocado.png", "price": "1.50"},
    {"name": "Bacon", "image": "bacon.png", "price": "2.00"},
    {"name": "Cheese", "image": "cheese.png", "price": "1.00"},
    {"name": "Cucumber", "image": "cucumber.png", "price": "0.50"},
    {"name": "Mushrooms", "image": "mushrooms.png", "price": "1.20"},
    {"name": "Onions", "image": "onions.png", "price": "0.50"},
    {"name": "Tomatoes", "image": "tomatoes.png", "price": "0.70"},
]

_PIZZA_SIZES = [
    {"name": "Small", "price": "0"},
    {"name": "Medium", "price": "3.00"},
    {"name": "Large", "price": "6.00"},
]

RESTAURANTS: list[dict[str, object]] = [
    {
        "id": "1",
        "name": "Burger Palace",
        "description": "Best burgers in town with premium ingredients",
        "image": "burger-one.png",
        "rating": 4.8,
        "delivery_time": "20-30 min",
        "delivery_fee": "2.99",
        "categories": ["Burger", "Fast Food"],
        "menu_items": [
            {
                "id": "1-1",
                "name": "Classic Beef Burger",
                "description": "Juicy beef patty with lettuce, tomato, onion, and our special sauce",
                "price": "8.99",
                "image": "burger-one.png",
                "category": "Burger",
                "rating": 4.7,
                "preparation_time": "15-20 min",
                "sizes": [{"name": "Regular", "price": "0"}, {"name": "Large", "price": "2.00"}],
            },
            {
                "id": "1-2",
                "name": "Double Cheese Burger",
                "description": "Two beef patties loaded with cheese and pickles",
                "price": "11.99",
                "image": "burger-two.png",
                "category": "Burger",
                "rating": 4.9,
                "preparation_time": "15-20 min",
                "sizes": [{"name": "Regular", "price": "0"}, {"name": "Large", "price": "2.50"}],
            },
            {
                "id": "1-3",
                "name": "Veggie Burger",
                "description": "Plant-based patty with fresh vegetables and hummus",
                "price": "9.99",
                "image": "burger-one.png",
                "category": "Burger",
                "rating": 4.5,
                "preparation_time": "15-20 min",
            },
        ],
    },
    {
        "id": "2",
        "name": "Pizza Paradise",
        "description": "Authentic Italian pizza with fresh ingredients",
        "image": "pizza-one.png",
        "rating": 4.6,
        "delivery_time": "30-40 min",
        "delivery_fee": "3.99",
        "categories": ["Pizza", "Italian"],
        "menu_items": [
            {
                "id": "2-1",
                "name": "Margherita Pizza",
                "description": "Classic pizza with tomato sauce, mozzarella, and basil",
                "price": "12.99",
                "image": "pizza-one.png",
                "category": "Pizza",
                "rating": 4.7,
                "preparation_time": "25-30 min",
                "sizes": _PIZZA_SIZES,
            },
            {
                "id": "2-2",
                "name": "Pepperoni Pizza",
                "description": "Loaded with pepperoni and extra cheese",
                "price": "14.99",
                "image": "pizza-one.png",
                "category": "Pizza",
                "rating": 4.8,
                "preparation_time": "25-30 min",
                "sizes": _PIZZA_SIZES,
            },
            {
                "id": "2-3",
                "name": "Veggie Supreme",
                "description": "Fresh vegetables with olives and mushrooms",
                "price": "13.99",
                "image": "pizza-one.png",
                "category": "Pizza",
                "rating": 4.6,
                "preparation_time": "25-30 min",
                "sizes": _PIZZA_SIZES,
            },
        ],
    },
    {
        "id": "3",
        "name": "Burrito Bar",
        "description": "Fresh Mexican-style burritos made to order",
        "image": "buritto.png",
        "rating": 4.7,
        "delivery_time": "25-35 min",
        "delivery_fee": "2.49",
        "categories": ["Burrito", "Mexican"],
        "menu_items": [
            {
                "id": "3-1",
                "name": "Chicken Burrito",
                "description": "Grilled chicken with rice, beans, and fresh salsa",
                "price": "10.99",
                "image": "buritto.png",
                "category": "Burrito",
                "rating": 4.8,
                "preparation_time": "20-25 min",
            },
            {
                "id": "3-2",
                "name": "Beef Burrito",
                "description": "Seasoned beef with guacamole and sour cream",
                "price": "11.99",
                "image": "buritto.png",
                "category": "Burrito",
                "rating": 4.7,
                "preparation_time": "20-25 min",
            },
            {
                "id": "3-3",
                "name": "Veggie Burrito",
                "description": "Black beans, rice, grilled vegetables, and cheese",
                "price": "9.99",
                "image": "buritto.png",
                "category": "Burrito",
                "rating": 4.6,
                "preparation_time": "20-25 min",
            },
        ],
    },
    {
        "id": "4",
        "name": "Wrap World",
        "description": "Healthy wraps with premium ingredients",
        "image": "burger-two.png",
        "rating": 4.5,
        "delivery_time": "15-25 min",
        "delivery_fee": "1.99",
        "categories": ["Wrap", "Healthy"],
        "menu_items": [
            {
                "id": "4-1",
                "name": "Grilled Chicken Wrap",
                "description": "Tender chicken with crispy lettuce and ranch dressing",
                "price": "8.99",
                "image": "burger-two.png",
                "category": "Wrap",
                "rating": 4.6,
                "preparation_time": "15-20 min",
            },
            {
                "id": "4-2",
                "name": "Caesar Wrap",
                "description": "Classic Caesar salad wrapped in a soft tortilla",
                "price": "7.99",
                "image": "burger-two.png",
                "category": "Wrap",
                "rating": 4.5,
                "preparation_time": "15-20 min",
            },
            {
                "id": "4-3",
                "name": "Falafel Wrap",
                "description": "Crispy falafel with hummus and fresh vegetables",
                "price": "8.49",
                "image": "burger-two.png",
                "category": "Wrap",
                "rating": 4.7,
                "preparation_time": "15-20 min",
            },
        ],
    },
]
