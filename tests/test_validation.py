"""Tests for submit-time validation."""

from __future__ import annotations

import pytest

from hanamo.models import BaseKind, OrderDraft
from hanamo.validation import (
    InvalidPhone,
    MissingBase,
    MissingName,
    OrderError,
    OrderValidationError,
    is_valid_phone,
    validate_draft,
)


@pytest.mark.parametrize(
    "phone",
    [
        "555-123-4567",
        "(555) 123-4567",
        "+1 555.123.4567",
        "5551234567",
        "1-555-123-4567",
        "+1(555)123 4567",
        "  555 123 4567  ",
    ],
)
def test_valid_phone_numbers(phone: str) -> None:
    assert is_valid_phone(phone)


@pytest.mark.parametrize(
    "phone",
    [
        "12345",
        "555-123-456",
        "",
        "   ",
        "555-1234-567",
        "+44 20 7946 0958",
        "555-123-4567 ext 9",
        "abc-def-ghij",
    ],
)
def test_invalid_phone_numbers(phone: str) -> None:
    assert not is_valid_phone(phone)


def test_name_failure_wins_over_everything() -> None:
    draft = OrderDraft(name="", phone="123", base=None)

    with pytest.raises(MissingName):
        validate_draft(draft)


def test_whitespace_name_is_missing() -> None:
    draft = OrderDraft(name="   ", phone="555-123-4567", base=BaseKind.MATCHA)

    with pytest.raises(MissingName):
        validate_draft(draft)


def test_phone_checked_before_base() -> None:
    draft = OrderDraft(name="Mina", phone="555-123-456", base=None)

    with pytest.raises(InvalidPhone):
        validate_draft(draft)


def test_missing_base() -> None:
    draft = OrderDraft(name="Mina", phone="555-123-4567")

    with pytest.raises(MissingBase):
        validate_draft(draft)


def test_valid_draft_passes_without_toppings() -> None:
    validate_draft(OrderDraft(name="Mina", phone="555-123-4567", base=BaseKind.MATCHA))


def test_errors_carry_customer_messages() -> None:
    assert MissingName().message == "Please enter your name ✨"
    assert InvalidPhone().message == "Please enter a valid phone number ✨"
    assert MissingBase().message == "Please choose Matcha or Viet Coffee ✨"
    assert str(MissingBase()) == MissingBase.message


def test_error_hierarchy() -> None:
    assert issubclass(MissingName, OrderValidationError)
    assert issubclass(OrderValidationError, OrderError)
    assert issubclass(OrderValidationError, ValueError)
