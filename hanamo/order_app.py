"""Main Textual app class."""

from __future__ import annotations

import logging
from typing import Callable

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.widgets import Header, Static

from hanamo.config import DB_PATH
from hanamo.confirmation_modal import ConfirmationModal
from hanamo.constant import BASE_TAGLINES, BRAND_NAME, BRAND_TAGLINE
from hanamo.data import (
    BASE_CHOICES,
    MILK_CHOICES,
    TOPPING_CHOICES,
    display_name_for_base,
    display_name_for_milk,
    display_name_for_topping,
)
from hanamo.models import (
    DraftEvent,
    OrderRecord,
    Reset,
    SetBase,
    SetMilk,
    SetName,
    SetPhone,
    Submit,
    ToggleTopping,
)
from hanamo.persistence import SqliteDraftStore
from hanamo.printer import print_order_record, printer_status
from hanamo.rendering import base_badge_style, format_choice, format_text_field
from hanamo.session import OrderSession

logger = logging.getLogger(__name__)

_NAME_ROW = "name"
_PHONE_ROW = "phone"
_BASE_ROW = "base"
_MILK_ROW = "milk"
_TOPPING_ROW = "topping"
_SUBMIT_ROW = "submit"

FORM_ROWS: list[tuple[str, object]] = [
    (_NAME_ROW, None),
    (_PHONE_ROW, None),
    *((_BASE_ROW, base) for base in BASE_CHOICES),
    *((_MILK_ROW, milk) for milk in MILK_CHOICES),
    *((_TOPPING_ROW, topping) for topping in TOPPING_CHOICES),
    (_SUBMIT_ROW, None),
]

_SECTION_BY_ROW: dict[str, str] = {
    _NAME_ROW: "contact",
    _PHONE_ROW: "contact",
}

_SECTION_TITLES: dict[str, str] = {
    "contact": "Who is this order for?  We'll text when it's ready!",
    _BASE_ROW: "Choose your base  (pick one)",
    _MILK_ROW: "Milk  (choose one)",
    _TOPPING_ROW: "Toppings  (tap to add, optional)",
}


class HanamoOrderApp(App):
    """A Textual form for composing and submitting one drink order."""

    TITLE = BRAND_NAME
    SUB_TITLE = BRAND_TAGLINE

    CSS = """
    Screen {
        layout: vertical;
    }

    #form-pane {
        height: 1fr;
        border: round $primary;
        padding: 1;
    }

    #form {
        height: 1fr;
        padding: 0 1;
    }

    #status-bar {
        border: heavy $secondary;
        padding: 0 1;
        height: 4;
    }
    """

    cursor_index = reactive(0)

    BINDINGS = [
        ("up", "move_cursor(-1)", "Previous field"),
        ("down", "move_cursor(1)", "Next field"),
        ("enter", "activate", "Select"),
        ("backspace", "backspace", "Delete char"),
        Binding("ctrl+s", "submit", "Submit order", priority=True),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        session: OrderSession | None = None,
        printer: Callable[[OrderRecord], None] = print_order_record,
    ) -> None:
        super().__init__()
        self.session = session if session is not None else OrderSession(SqliteDraftStore(DB_PATH))
        self.printer = printer
        self.system_status = ""
        logger.debug("app_init state=%s", self.session.state.value)

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="form-pane"):
            yield Static(id="form")
        yield Static(id="status-bar")

    def on_mount(self) -> None:
        _, printer_message = printer_status()
        logger.debug("on_mount printer_status=%r", printer_message)
        if not self.session.draft.is_default():
            self.system_status = "Restored your unfinished order"
        self._refresh_all()

    def on_key(self, event: Key) -> None:
        if isinstance(self.screen, ConfirmationModal):
            return
        if not event.is_printable or not event.character:
            return

        row_kind, _ = self._current_row()
        if row_kind == _NAME_ROW:
            self._dispatch(SetName(self.session.draft.name + event.character))
            event.stop()
            return
        if row_kind == _PHONE_ROW:
            self._dispatch(SetPhone(self.session.draft.phone + event.character))
            event.stop()
            return
        if event.character == " ":
            self.action_activate()
            event.stop()

    def action_move_cursor(self, delta: int) -> None:
        if isinstance(self.screen, ConfirmationModal):
            return
        self.cursor_index = (self.cursor_index + delta) % len(FORM_ROWS)
        self._refresh_form()

    def action_backspace(self) -> None:
        if isinstance(self.screen, ConfirmationModal):
            return
        row_kind, _ = self._current_row()
        if row_kind == _NAME_ROW and self.session.draft.name:
            self._dispatch(SetName(self.session.draft.name[:-1]))
        elif row_kind == _PHONE_ROW and self.session.draft.phone:
            self._dispatch(SetPhone(self.session.draft.phone[:-1]))

    def action_activate(self) -> None:
        if isinstance(self.screen, ConfirmationModal):
            return
        row_kind, row_value = self._current_row()
        if row_kind == _BASE_ROW:
            self._dispatch(SetBase(row_value))
        elif row_kind == _MILK_ROW:
            self._dispatch(SetMilk(row_value))
        elif row_kind == _TOPPING_ROW:
            self._dispatch(ToggleTopping(row_value))
        elif row_kind == _SUBMIT_ROW:
            self.action_submit()
        else:
            self.action_move_cursor(1)

    def action_submit(self) -> None:
        if isinstance(self.screen, ConfirmationModal):
            logger.debug("submit_blocked reason=confirmation_open")
            return
        result = self.session.apply_event(Submit())
        if result.error is not None:
            self.system_status = result.error.message
            self._refresh_status()
            return

        assert result.record is not None
        self.system_status = ""
        self._refresh_status()
        self.push_screen(
            ConfirmationModal(result.record, on_print=self._print_receipt),
            callback=self._on_confirmation_closed,
        )

    def _on_confirmation_closed(self, _: None = None) -> None:
        self.session.apply_event(Reset())
        self.cursor_index = 0
        self.system_status = "Ready for the next order ♡"
        self._refresh_all()

    def _print_receipt(self) -> str:
        record = self.session.record
        if record is None:
            return "Nothing to print"
        try:
            self.printer(record)
        except Exception as exc:
            logger.warning("print_failed order_id=%s error=%r", record.order_id, exc)
            return f"Print failed: {exc}"
        logger.info("print_ok order_id=%s", record.order_id)
        return f"Printed receipt {record.order_id}"

    def _dispatch(self, event: DraftEvent) -> None:
        result = self.session.apply_event(event)
        if result.error is not None:
            self.system_status = result.error.message
        self._refresh_all()

    def _current_row(self) -> tuple[str, object]:
        return FORM_ROWS[self.cursor_index]

    def _refresh_all(self) -> None:
        self._refresh_form()
        self._refresh_status()

    def _row_text(self, idx: int, row_kind: str, row_value: object) -> Text:
        draft = self.session.draft
        editing = idx == self.cursor_index
        if row_kind == _NAME_ROW:
            return format_text_field("Name", draft.name, "Your name", editing)
        if row_kind == _PHONE_ROW:
            return format_text_field("Phone", draft.phone, "Phone number", editing)
        if row_kind == _BASE_ROW:
            label = f"{display_name_for_base(row_value)}  ({BASE_TAGLINES[row_value.value]})"
            return format_choice(label, draft.base == row_value, base_badge_style(row_value))
        if row_kind == _MILK_ROW:
            return format_choice(display_name_for_milk(row_value), draft.milk == row_value)
        if row_kind == _TOPPING_ROW:
            return format_choice(display_name_for_topping(row_value), row_value in draft.toppings)
        return Text("Submit Order ♡", style="bold #ffffff on #e64980")

    def _refresh_form(self) -> None:
        try:
            form_widget = self.query_one("#form", Static)
        except NoMatches:
            return

        lines = Text()
        previous_section = None
        for idx, (row_kind, row_value) in enumerate(FORM_ROWS):
            section = _SECTION_BY_ROW.get(row_kind, row_kind)
            if section != previous_section:
                if previous_section is not None:
                    lines.append("\n")
                title = _SECTION_TITLES.get(section)
                if title:
                    lines.append(f"{title}\n", style="bold")
                previous_section = section
            pointer = "➤ " if idx == self.cursor_index else "  "
            lines.append(pointer)
            lines.append_text(self._row_text(idx, row_kind, row_value))
            lines.append("\n")

        form_widget.update(lines)

    def _refresh_status(self) -> None:
        try:
            bar = self.query_one("#status-bar", Static)
        except NoMatches:
            return
        status = self.system_status or "Ready"
        bar.update(f"↑/↓ move. Type to fill text. Enter/Space select. Ctrl+S submit.\n{status}")
