"""Label lookups over the static menu catalogs."""

from __future__ import annotations

from typing import Iterable

from hanamo.constant import (
    BASE_CATALOG,
    MILK_CATALOG,
    MILK_SHORT_LABELS,
    NO_TOPPINGS_LABEL,
    TOPPING_CATALOG,
)
from hanamo.models import BaseKind, MilkKind, ToppingKind

BASE_CHOICES: list[BaseKind] = [BaseKind(key) for key in BASE_CATALOG]
MILK_CHOICES: list[MilkKind] = [MilkKind(key) for key in MILK_CATALOG]
TOPPING_CHOICES: list[ToppingKind] = [ToppingKind(key) for key in TOPPING_CATALOG]


def display_name_for_base(base: BaseKind | None) -> str:
    """Get display name for a base, or an empty string when unset."""
    if base is None:
        return ""
    return BASE_CATALOG.get(base.value, base.value)


def display_name_for_milk(milk: MilkKind, short: bool = False) -> str:
    catalog = MILK_SHORT_LABELS if short else MILK_CATALOG
    return catalog.get(milk.value, milk.value)


def display_name_for_topping(topping: ToppingKind) -> str:
    return TOPPING_CATALOG.get(topping.value, topping.value.replace("_", " ").title())


def ordered_toppings(toppings: Iterable[ToppingKind]) -> list[ToppingKind]:
    """Return the selected toppings in catalog order."""
    selected = set(toppings)
    return [topping for topping in TOPPING_CHOICES if topping in selected]


def pretty_toppings(toppings: Iterable[ToppingKind]) -> str:
    """Join topping labels for display, or "None" when nothing is selected."""
    labels = [display_name_for_topping(topping) for topping in ordered_toppings(toppings)]
    if not labels:
        return NO_TOPPINGS_LABEL
    return ", ".join(labels)
