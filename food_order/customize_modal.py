"""Item customisation modal screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Static

from food_order.data import SIDES, TOPPINGS, build_cart_item, default_size, preview_total
from food_order.models import CartItemDraft, MenuItem, MenuModifier, Restaurant
from food_order.money import format_money


class CustomizeModal(ModalScreen[CartItemDraft | None]):
    """Centered modal to pick size, toppings, sides and quantity for one menu item."""

    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("ctrl+c", "close", "Close"),
        ("j", "move_cursor(1)", "Next"),
        ("k", "move_cursor(-1)", "Previous"),
        ("up", "move_cursor(-1)", "Previous"),
        ("down", "move_cursor(1)", "Next"),
        ("enter", "toggle_current", "Toggle"),
        ("plus", "change_quantity(1)", "More"),
        ("minus", "change_quantity(-1)", "Less"),
    ]

    CSS = """
    CustomizeModal {
        align: center middle;
        background: $background 60%;
    }

    #customize-dialog {
        width: 72;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #customize-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #customize-body {
        margin-bottom: 1;
        color: white;
    }

    #customize-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    cursor_index = reactive(0)
    _SIZE_KIND = "size"
    _TOPPING_KIND = "topping"
    _SIDE_KIND = "side"
    _INSTRUCTIONS_KIND = "instructions"
    _ADD_KIND = "add"

    def __init__(self, restaurant: Restaurant, item: MenuItem) -> None:
        super().__init__()
        self.restaurant = restaurant
        self.item = item
        self.selected_size = default_size(item)
        self.toppings: list[MenuModifier] = []
        self.sides: list[MenuModifier] = []
        self.quantity = 1
        self.instructions = ""
        self.typing_instructions = False
        self.instructions_input = ""

    def compose(self) -> ComposeResult:
        with Container(id="customize-dialog"):
            yield Static(self.item.name, id="customize-title")
            yield Static(id="customize-body")
            yield Static(id="customize-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event) -> None:
        if not self.typing_instructions:
            return

        if event.key == "escape":
            self.typing_instructions = False
            self.instructions_input = ""
            self._refresh_content()
            event.stop()
            return

        if event.key == "enter":
            self.instructions = self.instructions_input.strip()
            self.typing_instructions = False
            self.instructions_input = ""
            self._refresh_content()
            event.stop()
            return

        if event.key == "backspace":
            if self.instructions_input:
                self.instructions_input = self.instructions_input[:-1]
            self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character:
            self.instructions_input += event.character
            self._refresh_content()
            event.stop()
            return

        # Ignore all non-text keys while typing.
        event.stop()

    def action_close(self) -> None:
        if self.typing_instructions:
            self.typing_instructions = False
            self.instructions_input = ""
            self._refresh_content()
            return
        self.dismiss(None)

    def action_move_cursor(self, delta: int) -> None:
        if self.typing_instructions:
            return
        rows = self._rows()
        self.cursor_index = (self.cursor_index + delta) % len(rows)
        self._refresh_content()

    def action_change_quantity(self, delta: int) -> None:
        if self.typing_instructions:
            return
        self.quantity = max(1, self.quantity + delta)
        self._refresh_content()

    def action_toggle_current(self) -> None:
        rows = self._rows()
        row_kind, row_value = rows[self.cursor_index]

        if row_kind == self._SIZE_KIND:
            self.selected_size = row_value.name
        elif row_kind == self._TOPPING_KIND:
            self._toggle(self.toppings, row_value)
        elif row_kind == self._SIDE_KIND:
            self._toggle(self.sides, row_value)
        elif row_kind == self._INSTRUCTIONS_KIND:
            self.typing_instructions = True
            self.instructions_input = self.instructions
        elif row_kind == self._ADD_KIND:
            self.dismiss(self.to_draft())
            return
        self._refresh_content()

    def to_draft(self) -> CartItemDraft:
        return build_cart_item(
            self.restaurant,
            self.item,
            size=self.selected_size,
            toppings=self.toppings,
            sides=self.sides,
            quantity=self.quantity,
            special_instructions=self.instructions,
        )

    @staticmethod
    def _toggle(selected: list[MenuModifier], modifier: MenuModifier) -> None:
        if modifier in selected:
            selected.remove(modifier)
        else:
            selected.append(modifier)

    def _rows(self) -> list[tuple[str, object]]:
        rows: list[tuple[str, object]] = []
        rows.extend((self._SIZE_KIND, size) for size in self.item.sizes)
        rows.extend((self._TOPPING_KIND, topping) for topping in TOPPINGS)
        rows.extend((self._SIDE_KIND, side) for side in SIDES)
        rows.append((self._INSTRUCTIONS_KIND, "Special instructions"))
        rows.append((self._ADD_KIND, "Add to cart"))
        return rows

    def _refresh_content(self) -> None:
        body = self.query_one("#customize-body", Static)
        help_text = self.query_one("#customize-help", Static)

        content = Text(style="white")
        content.append(f"{self.restaurant.name} · {format_money(self.item.price)}\n", style="dim")
        content.append(self.item.description)
        rows = self._rows()
        if self.cursor_index >= len(rows):
            self.cursor_index = max(0, len(rows) - 1)

        previous_kind = None
        for idx, (row_kind, row_value) in enumerate(rows):
            if row_kind != previous_kind:
                heading = {
                    self._SIZE_KIND: "Size",
                    self._TOPPING_KIND: "Toppings",
                    self._SIDE_KIND: "Sides",
                }.get(row_kind)
                content.append(f"\n\n{heading}" if heading else "\n", style="bold")
                previous_kind = row_kind
            content.append("\n")
            pointer = "➤ " if idx == self.cursor_index else "  "
            if row_kind == self._SIZE_KIND:
                marker = "(•)" if row_value.name == self.selected_size else "( )"
                surcharge = f" (+{format_money(row_value.price)})" if row_value.price > 0 else ""
                content.append(f"{pointer}{marker} {row_value.name}{surcharge}")
            elif row_kind in {self._TOPPING_KIND, self._SIDE_KIND}:
                selected = self.toppings if row_kind == self._TOPPING_KIND else self.sides
                is_checked = row_value in selected
                checked = "[x]" if is_checked else "[ ]"
                style = "bold white" if is_checked else "white"
                content.append(f"{pointer}{checked} {row_value.name} +{format_money(row_value.price)}", style=style)
            elif row_kind == self._INSTRUCTIONS_KIND:
                if self.typing_instructions:
                    content.append(f"{pointer}Instructions: {self.instructions_input}|", style="bold white")
                else:
                    content.append(f"{pointer}Instructions: {self.instructions or '(none)'}")
            else:
                total = preview_total(self.item, self.selected_size, self.toppings, self.sides, self.quantity)
                content.append(f"{pointer}Add {self.quantity} to cart · {format_money(total)}", style="bold #f0b429")

        if self.typing_instructions:
            help_text.update("Type text, Enter confirm, Esc cancel typing")
        else:
            help_text.update("J/K/↑/↓ move, Enter select, +/- quantity, Esc/q/Ctrl+C close")
        body.update(content)
