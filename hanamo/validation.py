"""Submit-time validation for order drafts."""

from __future__ import annotations

import re

from hanamo.models import OrderDraft

# North-American number: optional +1/1 prefix, optional parenthesized area code,
# then 3-3-4 digits with optional space, dot or hyphen separators.
_PHONE_PATTERN = re.compile(r"^(\+?1[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}$")


class OrderError(Exception):
    """Recoverable order error with a message fit for the customer."""

    message = "Something went wrong with this order"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class OrderValidationError(OrderError, ValueError):
    """A draft failed one of the submit checks."""


class MissingName(OrderValidationError):
    message = "Please enter your name ✨"


class InvalidPhone(OrderValidationError):
    message = "Please enter a valid phone number ✨"


class MissingBase(OrderValidationError):
    message = "Please choose Matcha or Viet Coffee ✨"


def is_valid_phone(value: str) -> bool:
    """Check a phone number against the North-American pattern after trimming."""
    return _PHONE_PATTERN.match(value.strip()) is not None


def validate_draft(draft: OrderDraft) -> None:
    """Raise the first failing check, in name, phone, base order."""
    if not draft.name.strip():
        raise MissingName()
    if not is_valid_phone(draft.phone):
        raise InvalidPhone()
    if draft.base is None:
        raise MissingBase()
