"""Pytest configuration and fixtures."""

from __future__ import annotations

import random
from pathlib import Path
from typing import Iterator

import pytest

from hanamo.models import BaseKind
from hanamo.persistence import MemoryDraftStore, SqliteDraftStore
from hanamo.session import OrderIdGenerator, OrderSession


class ScriptedRandom:
    """RNG stand-in that hands out a fixed sequence of characters."""

    def __init__(self, chars: str) -> None:
        self._chars: Iterator[str] = iter(chars)

    def choice(self, seq: str) -> str:
        return next(self._chars)


class BrokenDraftStore:
    """Draft store whose writes always fail, counting the attempts."""

    def __init__(self, payload: object = None, fail_load: bool = False) -> None:
        self.payload = payload
        self.fail_load = fail_load
        self.save_calls = 0
        self.clear_calls = 0

    def load(self) -> object:
        if self.fail_load:
            raise OSError("storage offline")
        return self.payload

    def save(self, payload: dict) -> None:
        self.save_calls += 1
        raise OSError("disk full")

    def clear(self) -> None:
        self.clear_calls += 1
        raise OSError("disk full")


class FlakyDraftStore(MemoryDraftStore):
    """In-memory store whose first `failures` saves raise before it recovers."""

    def __init__(self, failures: int = 1) -> None:
        super().__init__()
        self.failures = failures
        self.save_calls = 0

    def save(self, payload: dict) -> None:
        self.save_calls += 1
        if self.save_calls <= self.failures:
            raise OSError("database is locked")
        super().save(payload)


@pytest.fixture
def store() -> MemoryDraftStore:
    """Create an empty in-memory draft store."""
    return MemoryDraftStore()


@pytest.fixture
def rng() -> random.Random:
    """Create a seeded random source for order ids."""
    return random.Random(20240501)


@pytest.fixture
def session(store: MemoryDraftStore, rng: random.Random) -> OrderSession:
    """Create a session over the in-memory store."""
    return OrderSession(store, id_generator=OrderIdGenerator(rng))


@pytest.fixture
def filled_session(session: OrderSession) -> OrderSession:
    """Create a session whose draft passes validation."""
    session.set_name("Mina")
    session.set_phone("555-123-4567")
    session.set_base(BaseKind.VIET_COFFEE)
    return session


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Path for a throwaway SQLite draft cache."""
    return tmp_path / "data" / "hanamo.db"


@pytest.fixture
def sqlite_store(db_path: Path) -> SqliteDraftStore:
    return SqliteDraftStore(db_path)
