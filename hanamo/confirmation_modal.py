"""Order confirmation modal screen."""

from __future__ import annotations

from typing import Callable

from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from hanamo.models import OrderRecord
from hanamo.rendering import format_receipt


class ConfirmationModal(ModalScreen[None]):
    """Show the submitted order until the customer starts another one."""

    CSS = """
    ConfirmationModal {
        align: center middle;
        background: $background 60%;
    }

    #confirm-dialog {
        width: 56;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #confirm-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #confirm-thanks {
        color: white;
        margin-bottom: 1;
    }

    #confirm-receipt {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
    }

    #confirm-status {
        color: #ffb3c1;
        margin-bottom: 1;
    }

    #confirm-help {
        color: #dddddd;
    }
    """

    def __init__(self, record: OrderRecord, on_print: Callable[[], str]) -> None:
        super().__init__()
        self.record = record
        self.on_print = on_print
        self.status = ""

    def compose(self) -> ComposeResult:
        with Container(id="confirm-dialog"):
            yield Static("Order placed! ✨", id="confirm-title")
            yield Static(f"Thanks, {self.record.name}! We got your order.", id="confirm-thanks")
            yield Static(id="confirm-receipt")
            yield Static(id="confirm-status")
            yield Static(
                "Show this screen to the barista at the counter. P print receipt. N/Esc place another order.",
                id="confirm-help",
            )

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key in {"escape", "n"}:
            self.dismiss(None)
            event.stop()
            return

        if event.key == "p":
            self.status = self.on_print()
            self._refresh_content()
            event.stop()

    def _refresh_content(self) -> None:
        self.query_one("#confirm-receipt", Static).update(format_receipt(self.record))
        self.query_one("#confirm-status", Static).update(self.status)
