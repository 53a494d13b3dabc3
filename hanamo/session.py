"""Order session state machine: editing, submitting and resetting one draft."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Protocol, Sequence

from hanamo.config import ORDER_ID_ALPHABET, ORDER_ID_LENGTH, ORDER_ID_PREFIX
from hanamo.models import (
    BaseKind,
    DraftEvent,
    MilkKind,
    OrderDraft,
    OrderRecord,
    Reset,
    SetBase,
    SetMilk,
    SetName,
    SetPhone,
    Submit,
    ToggleTopping,
    ToppingKind,
)
from hanamo.persistence import DraftStore, draft_from_payload, draft_to_payload
from hanamo.validation import OrderError, validate_draft

logger = logging.getLogger(__name__)

# Enough attempts that a collision streak only happens with a rigged RNG.
_MAX_ID_ATTEMPTS = 1000


class SessionState(str, Enum):
    EDITING = "editing"
    SUBMITTED = "submitted"


class InvalidTransition(OrderError):
    message = "This order has already been submitted"


class RandomSource(Protocol):
    def choice(self, seq: Sequence[str]) -> str: ...


class OrderIdGenerator:
    """Issue `<prefix><4 x [A-Z0-9]>` ids, never repeating one it already issued."""

    def __init__(
        self,
        rng: RandomSource | None = None,
        prefix: str = ORDER_ID_PREFIX,
        length: int = ORDER_ID_LENGTH,
        alphabet: str = ORDER_ID_ALPHABET,
    ) -> None:
        self.rng = rng if rng is not None else random.SystemRandom()
        self.prefix = prefix
        self.length = length
        self.alphabet = alphabet
        self.issued: set[str] = set()

    def next_id(self) -> str:
        for _ in range(_MAX_ID_ATTEMPTS):
            suffix = "".join(self.rng.choice(self.alphabet) for _ in range(self.length))
            order_id = f"{self.prefix}{suffix}"
            if order_id not in self.issued:
                self.issued.add(order_id)
                return order_id
        raise RuntimeError(f"Could not generate a fresh order id after {_MAX_ID_ATTEMPTS} attempts")


@dataclass(frozen=True)
class EventResult:
    """Outcome of one dispatched event."""

    state: SessionState
    error: OrderError | None = None
    record: OrderRecord | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class OrderSession:
    """
    Owns the draft for one customer and drives it through submission.

    The draft is hydrated from `store` on construction and written back after
    every edit. Each save or clear is a single best-effort attempt: a failure is
    logged, never retried, and never stops the next one from being tried.
    """

    def __init__(self, store: DraftStore, id_generator: OrderIdGenerator | None = None) -> None:
        self.store = store
        self.id_generator = id_generator if id_generator is not None else OrderIdGenerator()
        self.state = SessionState.EDITING
        self.record: OrderRecord | None = None
        self.storage_available = True
        self.draft = self._hydrate()

    def _hydrate(self) -> OrderDraft:
        try:
            payload = self.store.load()
        except Exception as exc:
            logger.warning("draft_load_failed error=%r", exc)
            return OrderDraft()
        if payload is None:
            logger.debug("draft_hydrate source=empty")
            return OrderDraft()
        if not isinstance(payload, dict):
            logger.warning("draft_load_failed reason=not_a_mapping type=%s", type(payload).__name__)
            return OrderDraft()
        logger.debug("draft_hydrate source=store")
        return draft_from_payload(payload)

    def _persist(self) -> None:
        try:
            self.store.save(draft_to_payload(self.draft))
        except Exception as exc:
            self._storage_failed("save", exc)
            return
        self.storage_available = True

    def _storage_failed(self, operation: str, exc: Exception) -> None:
        self.storage_available = False
        logger.warning("draft_%s_failed error=%r", operation, exc)

    def set_name(self, value: str) -> None:
        self.draft.set_name(value)
        self._persist()

    def set_phone(self, value: str) -> None:
        self.draft.set_phone(value)
        self._persist()

    def set_base(self, value: BaseKind | str) -> None:
        self.draft.set_base(value)
        self._persist()

    def set_milk(self, value: MilkKind | str) -> None:
        self.draft.set_milk(value)
        self._persist()

    def toggle_topping(self, value: ToppingKind | str) -> None:
        self.draft.toggle_topping(value)
        self._persist()

    def submit(self) -> OrderRecord:
        """Validate the draft and freeze it into a record."""
        if self.state is not SessionState.EDITING:
            logger.debug("submit_blocked reason=already_submitted")
            raise InvalidTransition()
        try:
            validate_draft(self.draft)
        except OrderError as exc:
            logger.debug("submit_blocked reason=%s", type(exc).__name__)
            raise

        assert self.draft.base is not None
        record = OrderRecord(
            order_id=self.id_generator.next_id(),
            name=self.draft.name,
            phone=self.draft.phone,
            base=self.draft.base,
            milk=self.draft.milk,
            toppings=frozenset(self.draft.toppings),
            created_at=_utc_now_iso(),
        )
        self.record = record
        self.state = SessionState.SUBMITTED
        logger.info("submit_ok order_id=%s", record.order_id)
        return record

    def reset(self) -> None:
        """Return to a blank draft and drop the stored one."""
        self.state = SessionState.EDITING
        self.record = None
        self.draft = OrderDraft()
        try:
            self.store.clear()
        except Exception as exc:
            self._storage_failed("clear", exc)
        else:
            self.storage_available = True
        logger.debug("session_reset")

    def apply_event(self, event: DraftEvent) -> EventResult:
        """Dispatch one event, reporting order errors in the result instead of raising."""
        try:
            if isinstance(event, SetName):
                self.set_name(event.value)
            elif isinstance(event, SetPhone):
                self.set_phone(event.value)
            elif isinstance(event, SetBase):
                self.set_base(event.base)
            elif isinstance(event, SetMilk):
                self.set_milk(event.milk)
            elif isinstance(event, ToggleTopping):
                self.toggle_topping(event.topping)
            elif isinstance(event, Submit):
                self.submit()
            elif isinstance(event, Reset):
                self.reset()
            else:
                raise TypeError(f"Unsupported event: {event!r}")
        except OrderError as exc:
            return EventResult(state=self.state, error=exc, record=self.record)
        return EventResult(state=self.state, record=self.record)
