"""Tests for the order session state machine."""

from __future__ import annotations

import random
import re

import pytest

from conftest import BrokenDraftStore, FlakyDraftStore, ScriptedRandom
from hanamo.models import (
    BaseKind,
    MilkKind,
    OrderDraft,
    Reset,
    SetBase,
    SetMilk,
    SetName,
    SetPhone,
    Submit,
    ToggleTopping,
    ToppingKind,
)
from hanamo.persistence import MemoryDraftStore
from hanamo.session import EventResult, InvalidTransition, OrderIdGenerator, OrderSession, SessionState
from hanamo.validation import InvalidPhone, MissingBase, MissingName

ORDER_ID_RE = re.compile(r"^HANA-[A-Z0-9]{4}$")


def test_session_starts_editing_with_blank_draft(session: OrderSession) -> None:
    assert session.state is SessionState.EDITING
    assert session.record is None
    assert session.draft == OrderDraft()
    assert session.storage_available


def test_submit_transition(filled_session: OrderSession) -> None:
    before = filled_session.draft.snapshot()

    record = filled_session.submit()

    assert filled_session.state is SessionState.SUBMITTED
    assert filled_session.record is record
    assert ORDER_ID_RE.match(record.order_id)
    assert record.name == before.name == "Mina"
    assert record.phone == before.phone == "555-123-4567"
    assert record.base is BaseKind.VIET_COFFEE
    assert record.milk is before.milk
    assert record.toppings == frozenset(before.toppings)
    assert record.created_at


def test_submit_keeps_draft_values(filled_session: OrderSession) -> None:
    filled_session.toggle_topping(ToppingKind.EGG)

    filled_session.submit()

    assert filled_session.draft.name == "Mina"
    assert filled_session.draft.toppings == {ToppingKind.EGG}


def test_record_is_detached_from_later_edits(filled_session: OrderSession) -> None:
    record = filled_session.submit()

    filled_session.toggle_topping(ToppingKind.UBE)
    filled_session.set_name("Kai")

    assert record.toppings == frozenset()
    assert record.name == "Mina"
    assert filled_session.record is record


def test_submit_twice_is_rejected(filled_session: OrderSession) -> None:
    record = filled_session.submit()

    with pytest.raises(InvalidTransition):
        filled_session.submit()

    assert filled_session.record is record
    assert filled_session.state is SessionState.SUBMITTED


@pytest.mark.parametrize(
    ("name", "phone", "base", "expected"),
    [
        ("", "12345", None, MissingName),
        ("Mina", "12345", None, InvalidPhone),
        ("Mina", "555-123-4567", None, MissingBase),
    ],
)
def test_failed_submit_changes_nothing(
    session: OrderSession,
    name: str,
    phone: str,
    base: BaseKind | None,
    expected: type[Exception],
) -> None:
    session.set_name(name)
    session.set_phone(phone)
    if base is not None:
        session.set_base(base)
    before = session.draft.snapshot()

    with pytest.raises(expected):
        session.submit()

    assert session.state is SessionState.EDITING
    assert session.record is None
    assert session.draft == before


def test_resubmit_after_correction(session: OrderSession) -> None:
    with pytest.raises(MissingName):
        session.submit()

    session.set_name("Mina")
    session.set_phone("(555) 123-4567")
    session.set_base(BaseKind.MATCHA)

    assert ORDER_ID_RE.match(session.submit().order_id)


def test_reset_clears_everything(filled_session: OrderSession, store: MemoryDraftStore) -> None:
    filled_session.set_milk(MilkKind.OAT)
    filled_session.toggle_topping(ToppingKind.STRAWBERRY)
    filled_session.submit()

    filled_session.reset()

    assert filled_session.state is SessionState.EDITING
    assert filled_session.record is None
    assert filled_session.draft == OrderDraft()
    assert store.load() is None


def test_reset_while_editing(session: OrderSession, store: MemoryDraftStore) -> None:
    session.set_name("Mina")

    session.reset()

    assert session.draft.is_default()
    assert store.load() is None


def test_every_mutation_is_saved(session: OrderSession, store: MemoryDraftStore) -> None:
    session.set_name("Mina")
    assert store.load()["name"] == "Mina"

    session.set_phone("555-123-4567")
    session.set_base(BaseKind.MATCHA)
    session.set_milk(MilkKind.OAT)
    session.toggle_topping(ToppingKind.UBE)

    assert store.load() == {
        "name": "Mina",
        "phone": "555-123-4567",
        "base": "matcha",
        "milk": "oat",
        "toppings": ["ube"],
    }


def test_rejected_mutation_is_not_saved(session: OrderSession, store: MemoryDraftStore) -> None:
    with pytest.raises(ValueError):
        session.set_base("espresso")

    assert store.load() is None


def test_session_hydrates_from_store(store: MemoryDraftStore) -> None:
    store.save({"name": "Mina", "phone": "555", "base": "viet", "milk": "oat", "toppings": ["egg"]})

    session = OrderSession(store)

    assert session.state is SessionState.EDITING
    assert session.draft == OrderDraft(
        name="Mina",
        phone="555",
        base=BaseKind.VIET_COFFEE,
        milk=MilkKind.OAT,
        toppings={ToppingKind.EGG},
    )


def test_failing_saves_keep_the_session_in_memory() -> None:
    broken = BrokenDraftStore()
    session = OrderSession(broken)

    session.set_name("Mina")
    session.set_phone("555-123-4567")
    session.set_base(BaseKind.MATCHA)

    assert not session.storage_available
    assert broken.save_calls == 3
    assert session.draft.name == "Mina"
    assert ORDER_ID_RE.match(session.submit().order_id)

    session.reset()
    assert broken.clear_calls == 1
    assert session.draft.is_default()


def test_reset_clears_store_after_a_transient_save_failure() -> None:
    flaky = FlakyDraftStore(failures=1)
    session = OrderSession(flaky)

    session.set_name("Mina")
    assert not session.storage_available

    session.set_phone("555-123-4567")
    session.set_base(BaseKind.MATCHA)
    assert session.storage_available
    assert flaky.load() == {
        "name": "Mina",
        "phone": "555-123-4567",
        "base": "matcha",
        "milk": "whole",
        "toppings": [],
    }

    session.submit()
    session.reset()

    assert flaky.load() is None
    assert OrderSession(flaky).draft.is_default()


def test_non_mapping_payload_starts_blank() -> None:
    session = OrderSession(BrokenDraftStore(payload='{"name": "Mina"}'))

    assert session.draft.is_default()
    assert session.state is SessionState.EDITING


def test_failing_clear_does_not_raise() -> None:
    broken = BrokenDraftStore()
    session = OrderSession(broken)

    session.reset()

    assert broken.clear_calls == 1
    assert not session.storage_available
    assert session.state is SessionState.EDITING


def test_failing_load_starts_blank() -> None:
    session = OrderSession(BrokenDraftStore(fail_load=True))

    assert session.draft.is_default()
    assert session.state is SessionState.EDITING


def test_order_ids_never_repeat_within_session() -> None:
    generator = OrderIdGenerator(ScriptedRandom("AAAA" "AAAA" "B7C9"))

    assert generator.next_id() == "HANA-AAAA"
    assert generator.next_id() == "HANA-B7C9"


def test_order_ids_are_deterministic_for_seeded_rng() -> None:
    first = OrderIdGenerator(random.Random(7))
    second = OrderIdGenerator(random.Random(7))

    ids = [first.next_id() for _ in range(5)]

    assert ids == [second.next_id() for _ in range(5)]
    assert len(set(ids)) == 5
    assert all(ORDER_ID_RE.match(order_id) for order_id in ids)


def test_generator_gives_up_on_stuck_rng() -> None:
    generator = OrderIdGenerator(ScriptedRandom("Z" * 4 * 1001))
    generator.next_id()

    with pytest.raises(RuntimeError):
        generator.next_id()


def test_session_ids_unique_across_reset(store: MemoryDraftStore) -> None:
    session = OrderSession(store, id_generator=OrderIdGenerator(ScriptedRandom("QQQQ" "QQQQ" "RRRR")))
    seen = []
    for _ in range(2):
        session.set_name("Mina")
        session.set_phone("555-123-4567")
        session.set_base(BaseKind.MATCHA)
        seen.append(session.submit().order_id)
        session.reset()

    assert seen == ["HANA-QQQQ", "HANA-RRRR"]


def test_apply_event_edits_and_submits(session: OrderSession) -> None:
    for event in (
        SetName("Mina"),
        SetPhone("+1 555.123.4567"),
        SetBase("matcha"),
        SetMilk(MilkKind.OAT),
        ToggleTopping(ToppingKind.SALTED),
    ):
        result = session.apply_event(event)
        assert result == EventResult(state=SessionState.EDITING)
        assert result.ok

    result = session.apply_event(Submit())

    assert result.ok
    assert result.state is SessionState.SUBMITTED
    assert result.record is session.record
    assert result.record.toppings == frozenset({ToppingKind.SALTED})


def test_apply_event_reports_validation_errors(session: OrderSession) -> None:
    result = session.apply_event(Submit())

    assert isinstance(result.error, MissingName)
    assert not result.ok
    assert result.state is SessionState.EDITING
    assert result.record is None


def test_apply_event_reports_invalid_transition(filled_session: OrderSession) -> None:
    filled_session.apply_event(Submit())

    result = filled_session.apply_event(Submit())

    assert isinstance(result.error, InvalidTransition)
    assert result.state is SessionState.SUBMITTED


def test_apply_event_reset(filled_session: OrderSession) -> None:
    filled_session.apply_event(Submit())

    result = filled_session.apply_event(Reset())

    assert result == EventResult(state=SessionState.EDITING)
    assert filled_session.draft.is_default()


def test_apply_event_rejects_unknown_event(session: OrderSession) -> None:
    with pytest.raises(TypeError):
        session.apply_event("submit")  # type: ignore[arg-type]
