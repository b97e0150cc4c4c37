"""Profile modal screen: contact details, delivery addresses and sign out."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from food_order.auth import PROFILE_FIELDS, AuthError, AuthStore

PROFILE_LABELS = {
    "full_name": "Full Name",
    "phone": "Phone Number",
    "address1": "Address 1 - (Home)",
    "address2": "Address 2 - (Work)",
}

_SIGN_OUT_ROW = "sign_out"


class ProfileModal(ModalScreen[bool]):
    """Edit profile fields one at a time. Dismisses with True after signing out."""

    CSS = """
    ProfileModal {
        align: center middle;
        background: $background 60%;
    }

    #profile-dialog {
        width: 68;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #profile-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #profile-body {
        color: white;
        margin-bottom: 1;
    }

    #profile-status {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #profile-help {
        color: #dddddd;
    }
    """

    def __init__(self, auth: AuthStore) -> None:
        super().__init__()
        self.auth = auth
        self.rows = [*PROFILE_FIELDS, _SIGN_OUT_ROW]
        self.cursor_index = 0
        self.editing = False
        self.edit_value = ""
        self.status = ""

    def compose(self) -> ComposeResult:
        with Container(id="profile-dialog"):
            yield Static("Profile", id="profile-title")
            yield Static(id="profile-body")
            yield Static(id="profile-status")
            yield Static(id="profile-help")

    def on_mount(self) -> None:
        self._refresh_content()

    async def on_key(self, event: Key) -> None:
        event.stop()
        if self.editing:
            await self._edit_key(event)
            return

        if event.key in {"escape", "ctrl+c"} or event.character == "q":
            self.dismiss(False)
        elif event.key == "down" or event.character == "j":
            self.cursor_index = (self.cursor_index + 1) % len(self.rows)
        elif event.key == "up" or event.character == "k":
            self.cursor_index = (self.cursor_index - 1) % len(self.rows)
        elif event.key == "enter":
            await self._activate_row()
            return
        else:
            return
        self._refresh_content()

    async def _activate_row(self) -> None:
        row = self.rows[self.cursor_index]
        if row == _SIGN_OUT_ROW:
            try:
                await self.auth.sign_out()
            except AuthError as exc:
                self.status = str(exc)
                self._refresh_content()
                return
            self.dismiss(True)
            return

        self.editing = True
        self.edit_value = self._metadata().get(row, "") or ""
        self.status = ""
        self._refresh_content()

    async def _edit_key(self, event: Key) -> None:
        if event.key == "escape":
            self.editing = False
        elif event.key == "enter":
            field = self.rows[self.cursor_index]
            self.editing = False
            try:
                await self.auth.update_profile(**{field: self.edit_value.strip()})
            except AuthError as exc:
                self.status = str(exc)
            else:
                self.status = "Profile updated"
        elif event.key == "backspace":
            self.edit_value = self.edit_value[:-1]
        elif event.is_printable and event.character:
            self.edit_value += event.character
        self._refresh_content()

    def _metadata(self) -> dict:
        user = self.auth.user
        return dict(user.user_metadata) if user is not None else {}

    def _refresh_content(self) -> None:
        user = self.auth.user
        metadata = self._metadata()

        body = Text()
        body.append("Email: ", style="bold")
        body.append(user.email if user is not None else "-")
        body.append("\n")
        for idx, row in enumerate(self.rows):
            body.append("\n")
            selected = idx == self.cursor_index
            body.append("➤ " if selected else "  ")
            if row == _SIGN_OUT_ROW:
                body.append("Sign Out", style="bold #ff6b6b")
                continue
            body.append(f"{PROFILE_LABELS[row]}: ", style="bold")
            if selected and self.editing:
                body.append(f"{self.edit_value}|", style="reverse")
            else:
                body.append(str(metadata.get(row) or ""))

        self.query_one("#profile-body", Static).update(body)
        self.query_one("#profile-status", Static).update(self.status)
        if self.editing:
            help_text = "Type to edit. Enter save. Esc cancel."
        else:
            help_text = "J/K move. Enter edit or sign out. Esc / q close."
        self.query_one("#profile-help", Static).update(help_text)
