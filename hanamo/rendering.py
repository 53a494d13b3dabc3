"""Rendering helpers for the form and the confirmation view."""

from __future__ import annotations

from rich.text import Text

from hanamo.constant import BASE_BADGE_STYLES
from hanamo.data import display_name_for_base, display_name_for_milk, pretty_toppings
from hanamo.models import BaseKind, OrderRecord

SELECTED_STYLE = "bold #ffffff on #d6336c"
FIELD_LABEL_WIDTH = 8


def base_badge_style(base: BaseKind) -> str:
    """Return a consistent badge style for a base choice."""
    return BASE_BADGE_STYLES.get(base.value, "bold")


def format_choice(label: str, selected: bool, style: str | None = None) -> Text:
    """Render a selectable chip, checked when selected."""
    text = Text()
    text.append("[x] " if selected else "[ ] ")
    if selected:
        text.append(label, style=style or SELECTED_STYLE)
        text.append(" ✓", style="bold")
    else:
        text.append(label)
    return text


def format_text_field(label: str, value: str, placeholder: str, editing: bool) -> Text:
    text = Text()
    text.append(f"{label:<{FIELD_LABEL_WIDTH}}", style="bold")
    if value:
        text.append(value)
    elif not editing:
        text.append(placeholder, style="dim")
    if editing:
        text.append("|", style="blink")
    return text


def receipt_rows(record: OrderRecord) -> list[tuple[str, str]]:
    """Label/value rows shown on the confirmation view."""
    return [
        ("Order ID", record.order_id),
        ("Pickup Name", record.name),
        ("Phone", record.phone),
        ("Base", display_name_for_base(record.base)),
        ("Milk", display_name_for_milk(record.milk, short=True)),
        ("Toppings", pretty_toppings(record.toppings)),
    ]


def format_receipt(record: OrderRecord) -> Text:
    rows = receipt_rows(record)
    width = max(len(label) for label, _ in rows)
    text = Text()
    for idx, (label, value) in enumerate(rows):
        if idx > 0:
            text.append("\n")
        text.append(f"{label:<{width}}  ", style="dim")
        text.append(value, style="bold")
    return text
