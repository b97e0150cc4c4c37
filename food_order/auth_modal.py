"""Sign in / sign up modal screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from food_order.auth import AuthError, AuthStore

SIGN_IN = "sign_in"
SIGN_UP = "sign_up"

_FIELD_LABELS = {
    "full_name": "Full Name",
    "email": "Email",
    "password": "Password",
}


class AuthModal(ModalScreen[bool]):
    """Email/password form. Dismisses with True once the store reports a user."""

    CSS = """
    AuthModal {
        align: center middle;
        background: $background 80%;
    }

    #auth-dialog {
        width: 60;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #auth-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #auth-form {
        color: white;
        margin-bottom: 1;
    }

    #auth-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #auth-help {
        color: #dddddd;
    }
    """

    def __init__(self, auth: AuthStore, mode: str = SIGN_UP, error: str = "") -> None:
        super().__init__()
        self.auth = auth
        self.mode = mode
        self.values = {name: "" for name in _FIELD_LABELS}
        self.field_index = 0
        self.error = error

    @property
    def fields(self) -> list[str]:
        if self.mode == SIGN_UP:
            return ["full_name", "email", "password"]
        return ["email", "password"]

    @property
    def active_field(self) -> str:
        return self.fields[self.field_index]

    def compose(self) -> ComposeResult:
        with Container(id="auth-dialog"):
            yield Static(id="auth-title")
            yield Static(id="auth-form")
            yield Static(id="auth-error")
            yield Static(
                "Tab next field. Enter submit. Ctrl+T switch sign in/up. Esc quit.",
                id="auth-help",
            )

    def on_mount(self) -> None:
        self._refresh_content()

    async def on_key(self, event: Key) -> None:
        event.stop()
        if event.key in {"escape", "ctrl+c"}:
            self.app.exit()
            return

        if event.key == "ctrl+t":
            self.mode = SIGN_IN if self.mode == SIGN_UP else SIGN_UP
            self.field_index = 0
            self.error = ""
            self._refresh_content()
            return

        if event.key in {"tab", "down"}:
            self.field_index = (self.field_index + 1) % len(self.fields)
            self._refresh_content()
            return

        if event.key == "up":
            self.field_index = (self.field_index - 1) % len(self.fields)
            self._refresh_content()
            return

        if event.key == "enter":
            await self._submit()
            return

        if event.key == "backspace":
            self.values[self.active_field] = self.values[self.active_field][:-1]
            self._refresh_content()
            return

        if event.is_printable and event.character:
            self.values[self.active_field] += event.character
            self.error = ""
            self._refresh_content()

    async def _submit(self) -> None:
        email = self.values["email"].strip()
        password = self.values["password"]
        if not email or not password:
            self.error = "Please enter your email and password"
            self._refresh_content()
            return

        try:
            if self.mode == SIGN_UP:
                await self.auth.sign_up(email, password, self.values["full_name"].strip() or None)
            else:
                await self.auth.sign_in(email, password)
        except AuthError as exc:
            self.error = str(exc)
            self._refresh_content()
            return

        if not self.auth.is_authenticated:
            # Sign up succeeded but the account still needs email confirmation.
            self.mode = SIGN_IN
            self.field_index = 0
            self.error = "Check your email to confirm the account, then sign in"
            self._refresh_content()
            return
        self.dismiss(True)

    def _refresh_content(self) -> None:
        title = "Sign Up" if self.mode == SIGN_UP else "Sign In"
        self.query_one("#auth-title", Static).update(title)

        form = Text()
        for idx, name in enumerate(self.fields):
            if idx > 0:
                form.append("\n")
            value = self.values[name]
            if name == "password":
                value = "*" * len(value)
            active = name == self.active_field
            form.append("➤ " if active else "  ")
            form.append(f"{_FIELD_LABELS[name]}: ", style="bold")
            form.append(value + ("|" if active else ""))
        self.query_one("#auth-form", Static).update(form)
        self.query_one("#auth-error", Static).update(self.error)
