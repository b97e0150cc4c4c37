"""Main Textual app class."""

from __future__ import annotations

import logging
from typing import Callable

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Header, Static

from food_order.auth import AuthError
from food_order.auth_modal import SIGN_IN, SIGN_UP, AuthModal
from food_order.checkout import default_delivery_address, place_order, summarize
from food_order.checkout_modal import CheckoutModal
from food_order.context import AppContext
from food_order.customize_modal import CustomizeModal
from food_order.data import (
    HOME_CATEGORIES,
    MenuSearchResult,
    get_menu_item,
    get_restaurant,
    search_menu_items,
    search_restaurants,
)
from food_order.history_modal import HistoryModal
from food_order.models import CartItemDraft, CartLineItem, Order, Restaurant
from food_order.money import format_money
from food_order.profile_modal import ProfileModal
from food_order.rendering import format_line_item, format_menu_row, format_restaurant_row, render_window
from food_order.restaurant_modal import RestaurantModal

SearchRow = Restaurant | MenuSearchResult

logger = logging.getLogger(__name__)


class FoodOrderApp(App):
    """A Textual app for browsing menus, filling a cart and placing orders."""

    TITLE = "Food Order"
    SUB_TITLE = "Burgers / Pizza / Wraps / Burritos"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    #cart-pane {
        width: 3fr;
        border: round $primary;
        padding: 1;
    }

    #search-pane {
        width: 2fr;
        border: round $secondary;
        padding: 1;
    }

    #search-bar {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
        height: 4;
    }

    #results {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #cart-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #cart-summary {
        height: 2;
        padding: 0 1;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    input_state = reactive("normal")
    category = reactive("All")
    search_text = reactive("")
    selected_index = reactive(0)
    cart_selected_index = reactive(None)

    BINDINGS = [
        ("tab", "cycle_results(1)", "Next result"),
        ("up", "cycle_results(-1)", "Previous result"),
        ("down", "cycle_results(1)", "Next result"),
        ("enter", "customize_selected", "Customize item"),
        ("backspace", "backspace_query", "Delete query char"),
        Binding("ctrl+s", "checkout", "Checkout", priority=True),
        ("ctrl+c", "cancel_active_mode", "Exit search"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, context: AppContext) -> None:
        super().__init__()
        self.context = context
        self.system_status = ""
        self._unsubscribe_cart: Callable[[], None] | None = None
        logger.debug("app_init")

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="cart-pane"):
                yield Static("Cart", classes="pane-title")
                yield Static("(cart is empty)", id="cart-list")
                yield Static(id="cart-summary")
            with Vertical(id="search-pane"):
                yield Static(id="search-bar")
                yield Static(id="results")

    def on_mount(self) -> None:
        self._unsubscribe_cart = self.context.cart.subscribe(self._refresh_cart)
        self.run_worker(self._initialize_auth(), exclusive=True)
        self._refresh_all()

    async def on_unmount(self) -> None:
        if self._unsubscribe_cart is not None:
            self._unsubscribe_cart()
            self._unsubscribe_cart = None
        await self.context.auth.provider.aclose()

    async def _initialize_auth(self) -> None:
        try:
            await self.context.auth.initialize()
        except AuthError as exc:
            logger.warning("auth_initialize_failed error=%s", exc)
            self._require_sign_in(error=f"Sign-in unavailable: {exc}")
            return
        user = self.context.auth.user
        if user is None:
            self._require_sign_in()
            return
        self.system_status = f"Signed in as {user.email}"
        self._refresh_search()

    def _require_sign_in(self, mode: str = SIGN_UP, error: str = "") -> None:
        self.push_screen(AuthModal(self.context.auth, mode, error), self._on_signed_in)

    def _on_signed_in(self, signed_in: bool | None) -> None:
        user = self.context.auth.user
        if not signed_in or user is None:
            return
        self.system_status = f"Signed in as {user.email}"
        logger.debug("signed_in user_id=%s", user.id)
        self._refresh_search()

    def _on_profile_closed(self, signed_out: bool | None) -> None:
        if signed_out:
            self.system_status = "Signed out"
            self._require_sign_in(SIGN_IN)
            return
        self._refresh_search()

    def on_key(self, event: Key) -> None:
        # While a modal is active, let the modal own keyboard handling.
        if isinstance(self.screen, ModalScreen):
            return

        logger.debug("on_key key=%r char=%r state=%r", event.key, event.character, self.input_state)

        if self.input_state == "normal":
            if event.key in {"plus", "minus"}:
                self._change_selected_quantity(1 if event.key == "plus" else -1)
                event.stop()
                return

        if not event.is_printable or not event.character or len(event.character) != 1:
            return
        if self.input_state == "active":
            if event.character.isprintable() and event.character not in "\t\r\n":
                self.search_text += event.character
                self.selected_index = 0
                self._refresh_search()
                event.stop()
            return

        key = event.character.lower()
        if key == "s":
            self.input_state = "active"
            self.search_text = ""
            self.selected_index = 0
            self._refresh_search()
        elif key == "c":
            idx = HOME_CATEGORIES.index(self.category)
            self.category = HOME_CATEGORIES[(idx + 1) % len(HOME_CATEGORIES)]
            self.selected_index = 0
            self._refresh_search()
        elif key == "j":
            self._move_cart_selection(1)
        elif key == "k":
            self._move_cart_selection(-1)
        elif key == "d":
            self._delete_selected_line()
        elif key == "x":
            self.context.cart.clear_cart()
            self.system_status = "Cart cleared"
            self._refresh_search()
        elif key == "h":
            self.push_screen(HistoryModal(self.context.orders))
        elif key == "p":
            self.push_screen(ProfileModal(self.context.auth), self._on_profile_closed)
        elif get_restaurant(key) is not None:
            self._open_restaurant(key)
        else:
            return
        event.stop()

    def action_cancel_active_mode(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state == "normal":
            return

        self.input_state = "normal"
        self.search_text = ""
        self.selected_index = 0
        self._refresh_search()

    def action_cycle_results(self, delta: int) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state != "active":
            return

        results = self._filtered_results()
        if not results:
            self.selected_index = 0
            self._refresh_results(results)
            return
        self.selected_index = (self.selected_index + delta) % len(results)
        self._refresh_results(results)

    def action_customize_selected(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state != "active":
            return

        results = self._filtered_results()
        if not results:
            return

        result = results[self.selected_index]
        if isinstance(result, Restaurant):
            self._open_restaurant(result.id)
            return
        self.push_screen(CustomizeModal(result.restaurant, result.item), self._on_customized)

    def _open_restaurant(self, restaurant_id: str) -> None:
        self.push_screen(RestaurantModal(restaurant_id), self._on_menu_item_chosen)

    def _on_menu_item_chosen(self, menu_item_id: str | None) -> None:
        if menu_item_id is None:
            return
        found = get_menu_item(menu_item_id)
        if found is None:
            return
        self.push_screen(CustomizeModal(found.restaurant, found.item), self._on_customized)

    def _on_customized(self, draft: CartItemDraft | None) -> None:
        if draft is None:
            return
        self.context.cart.add_item(draft)
        self.system_status = f"Added {draft.quantity}x {draft.name}"
        self._refresh_search()

    def action_backspace_query(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state != "active":
            return

        if not self.search_text:
            return
        self.search_text = self.search_text[:-1]
        self.selected_index = 0
        self._refresh_search()

    def action_checkout(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state != "normal":
            self.system_status = "Checkout only outside search (Ctrl+C to leave search)"
            self._refresh_search()
            return
        if not self.context.cart.items:
            self.system_status = "Your cart is empty"
            self._refresh_search()
            return

        address = default_delivery_address(self.context.auth.user)
        modal = CheckoutModal(summarize(self.context.cart), address, self._place_order)
        self.push_screen(modal, self._on_order_placed)

    def _place_order(self, delivery_address: str, payment_method: str) -> Order:
        return place_order(self.context.cart, self.context.orders, delivery_address, payment_method)

    def _on_order_placed(self, order: Order | None) -> None:
        if order is None:
            logger.debug("checkout_cancelled")
            return
        self.cart_selected_index = None
        self.system_status = f"Order placed: {order.id}"
        logger.debug("checkout_placed order_id=%s", order.id)
        self._refresh_all()
        self.push_screen(HistoryModal(self.context.orders, confirmation=True))

    def _filtered_results(self) -> list[SearchRow]:
        """Matching restaurants first, then matching menu items."""
        restaurants: list[SearchRow] = list(search_restaurants(self.search_text, self.category))
        return restaurants + search_menu_items(self.search_text, self.category)

    def _refresh_all(self) -> None:
        self._refresh_cart()
        self._refresh_search()

    def _move_cart_selection(self, delta: int) -> None:
        items = self.context.cart.items
        if not items:
            return

        if self.cart_selected_index is None:
            self.cart_selected_index = 0 if delta > 0 else len(items) - 1
        else:
            self.cart_selected_index = (self.cart_selected_index + delta) % len(items)
        self._refresh_cart()

    def _selected_line(self) -> CartLineItem | None:
        items = self.context.cart.items
        if self.cart_selected_index is None:
            return None
        if not (0 <= self.cart_selected_index < len(items)):
            return None
        return items[self.cart_selected_index]

    def _change_selected_quantity(self, delta: int) -> None:
        line = self._selected_line()
        if line is None:
            return
        self.context.cart.update_quantity(line.id, line.quantity + delta)

    def _delete_selected_line(self) -> None:
        line = self._selected_line()
        if line is None:
            return
        self.context.cart.remove_item(line.id)

    def _rows_for(self, widget: Static) -> int:
        # Before the first layout pass the widget has no height yet.
        return widget.size.height if widget.size.height > 0 else 8

    def _refresh_cart(self) -> None:
        try:
            cart_widget = self.query_one("#cart-list", Static)
            summary_widget = self.query_one("#cart-summary", Static)
        except NoMatches:
            return
        cart = self.context.cart
        items = cart.items
        if not items:
            self.cart_selected_index = None
            cart_widget.update("(cart is empty)")
            summary_widget.update("")
            return

        if self.cart_selected_index is not None and self.cart_selected_index >= len(items):
            self.cart_selected_index = len(items) - 1

        entries = []
        for item in items:
            entry = format_line_item(item)
            entry.append(f"\n      {item.restaurant_name}", style="dim")
            entries.append(entry)
        cart_widget.update(render_window(entries, self.cart_selected_index, self._rows_for(cart_widget)))

        summary = Text()
        summary.append(f"{cart.get_cart_item_count()} items  ")
        summary.append(f"Subtotal {format_money(cart.get_cart_total())}", style="bold #f0b429")
        summary.append("\nJ/K select, +/- qty, D remove, X clear, Ctrl+S checkout", style="dim")
        summary_widget.update(summary)

    def _refresh_search(self) -> None:
        self._refresh_search_bar()
        if self.input_state == "normal":
            self._refresh_results([])
            return
        self._refresh_results(self._filtered_results())

    def _refresh_search_bar(self) -> None:
        try:
            bar = self.query_one("#search-bar", Static)
        except NoMatches:
            return
        if self.input_state == "normal":
            status = self.system_status or "Ready"
            bar.update(f"S search, C category [{self.category}], 1-4 restaurant, H history, P profile.\n{status}")
            return

        text = Text()
        text.append(f" {self.category} ", style="bold #ffffff on #2f6db5")
        text.append(f": {self.search_text}")
        bar.update(text)

    def _refresh_results(self, results: list[SearchRow]) -> None:
        try:
            results_widget = self.query_one("#results", Static)
        except NoMatches:
            return
        if self.input_state == "normal":
            results_widget.update("")
            return

        if not results:
            results_widget.update("No results")
            return

        if self.selected_index >= len(results):
            self.selected_index = 0

        entries = [
            format_restaurant_row(row) if isinstance(row, Restaurant) else format_menu_row(row.item, row.restaurant.name)
            for row in results
        ]
        results_widget.update(render_window(entries, self.selected_index, self._rows_for(results_widget)))
