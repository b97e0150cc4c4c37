"""Restaurant menu modal screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import Static

from food_order.data import filter_menu, get_restaurant, restaurant_categories
from food_order.models import MenuItem
from food_order.money import format_money
from food_order.rendering import format_menu_row, render_window

_MENU_ROWS = 12


class RestaurantModal(ModalScreen[str | None]):
    """Browse one restaurant's menu by category. Dismisses with the chosen menu item id."""

    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("ctrl+c", "close", "Close"),
        ("j", "move_cursor(1)", "Next"),
        ("k", "move_cursor(-1)", "Previous"),
        ("up", "move_cursor(-1)", "Previous"),
        ("down", "move_cursor(1)", "Next"),
        ("c", "next_category", "Category"),
        ("enter", "choose", "Customize"),
    ]

    CSS = """
    RestaurantModal {
        align: center middle;
        background: $background 60%;
    }

    #restaurant-dialog {
        width: 76;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #restaurant-title {
        text-style: bold;
        color: white;
    }

    #restaurant-info {
        color: #dddddd;
        margin-bottom: 1;
    }

    #restaurant-menu {
        color: white;
    }

    #restaurant-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    def __init__(self, restaurant_id: str) -> None:
        super().__init__()
        restaurant = get_restaurant(restaurant_id)
        if restaurant is None:
            raise ValueError(f"Unknown restaurant: {restaurant_id!r}")
        self.restaurant = restaurant
        self.categories = restaurant_categories(restaurant)
        self.category = self.categories[0]
        self.cursor_index = 0

    @property
    def menu(self) -> list[MenuItem]:
        return filter_menu(self.restaurant, self.category)

    def compose(self) -> ComposeResult:
        with Container(id="restaurant-dialog"):
            yield Static(self.restaurant.name, id="restaurant-title")
            yield Static(id="restaurant-info")
            yield Static(id="restaurant-menu")
            yield Static("J/K move. C category. Enter customize. Esc / q close.", id="restaurant-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def action_close(self) -> None:
        self.dismiss(None)

    def action_move_cursor(self, delta: int) -> None:
        menu = self.menu
        if not menu:
            return
        self.cursor_index = (self.cursor_index + delta) % len(menu)
        self._refresh_content()

    def action_next_category(self) -> None:
        idx = self.categories.index(self.category)
        self.category = self.categories[(idx + 1) % len(self.categories)]
        self.cursor_index = 0
        self._refresh_content()

    def action_choose(self) -> None:
        menu = self.menu
        if not menu:
            return
        self.dismiss(menu[self.cursor_index].id)

    def _refresh_content(self) -> None:
        restaurant = self.restaurant
        info = Text(restaurant.description)
        info.append(
            f"\n★ {restaurant.rating} · {restaurant.delivery_time} · delivery {format_money(restaurant.delivery_fee)}",
            style="dim",
        )
        info.append("\n")
        for name in self.categories:
            style = "bold #ffffff on #2f6db5" if name == self.category else "dim"
            info.append(f" {name} ", style=style)
        self.query_one("#restaurant-info", Static).update(info)

        menu = self.menu
        body = self.query_one("#restaurant-menu", Static)
        if not menu:
            body.update("No items in this category")
            return
        rows = [format_menu_row(item) for item in menu]
        body.update(render_window(rows, self.cursor_index, _MENU_ROWS))
