"""Domain models for hanamo-order."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TypeVar


class BaseKind(str, Enum):
    """Primary drink selection."""

    MATCHA = "matcha"
    VIET_COFFEE = "viet"


class MilkKind(str, Enum):
    WHOLE = "whole"
    OAT = "oat"


class ToppingKind(str, Enum):
    STRAWBERRY = "strawberry"
    UBE = "ube"
    EGG = "egg"
    SALTED = "salted"


_KindT = TypeVar("_KindT", BaseKind, MilkKind, ToppingKind)


def coerce_kind(kind: type[_KindT], value: object) -> _KindT:
    """Return `value` as a member of `kind`, accepting the member's string value."""
    if isinstance(value, kind):
        return value
    try:
        return kind(value)
    except ValueError:
        raise ValueError(f"Unknown {kind.__name__}: {value!r}") from None


def _require_text(field_name: str, value: object) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{field_name} must be a string, got {type(value).__name__}")
    return value


@dataclass
class OrderDraft:
    """The in-progress order input, edited one field at a time."""

    name: str = ""
    phone: str = ""
    base: BaseKind | None = None
    milk: MilkKind = MilkKind.WHOLE
    toppings: set[ToppingKind] = field(default_factory=set)

    def set_name(self, value: str) -> None:
        self.name = _require_text("name", value)

    def set_phone(self, value: str) -> None:
        self.phone = _require_text("phone", value)

    def set_base(self, value: BaseKind | str) -> None:
        self.base = coerce_kind(BaseKind, value)

    def set_milk(self, value: MilkKind | str) -> None:
        self.milk = coerce_kind(MilkKind, value)

    def toggle_topping(self, value: ToppingKind | str) -> None:
        """Add the topping if absent, remove it if present."""
        topping = coerce_kind(ToppingKind, value)
        if topping in self.toppings:
            self.toppings.remove(topping)
        else:
            self.toppings.add(topping)

    def snapshot(self) -> OrderDraft:
        """Return an independent copy of this draft."""
        return OrderDraft(
            name=self.name,
            phone=self.phone,
            base=self.base,
            milk=self.milk,
            toppings=set(self.toppings),
        )

    def is_default(self) -> bool:
        return self == OrderDraft()


@dataclass(frozen=True)
class OrderRecord:
    """Immutable snapshot of a successfully submitted draft."""

    order_id: str
    name: str
    phone: str
    base: BaseKind
    milk: MilkKind
    toppings: frozenset[ToppingKind]
    created_at: str


@dataclass(frozen=True)
class SetName:
    value: str


@dataclass(frozen=True)
class SetPhone:
    value: str


@dataclass(frozen=True)
class SetBase:
    base: BaseKind | str


@dataclass(frozen=True)
class SetMilk:
    milk: MilkKind | str


@dataclass(frozen=True)
class ToggleTopping:
    topping: ToppingKind | str


@dataclass(frozen=True)
class Submit:
    pass


@dataclass(frozen=True)
class Reset:
    pass


DraftEvent = SetName | SetPhone | SetBase | SetMilk | ToggleTopping | Submit | Reset
