"""Draft cache: serialization plus SQLite and in-memory stores."""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol

from hanamo.config import DB_PATH, DRAFT_KEY
from hanamo.data import ordered_toppings
from hanamo.models import BaseKind, MilkKind, OrderDraft, ToppingKind

logger = logging.getLogger(__name__)

SerializedDraft = dict[str, Any]
"""Mapping with keys name, phone, base, milk, toppings."""


class DraftStore(Protocol):
    """Single-key persistence for the in-progress draft."""

    def load(self) -> SerializedDraft | None: ...

    def save(self, payload: SerializedDraft) -> None: ...

    def clear(self) -> None: ...


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def draft_to_payload(draft: OrderDraft) -> SerializedDraft:
    """Convert a draft to its storage-stable mapping."""
    return {
        "name": draft.name,
        "phone": draft.phone,
        "base": draft.base.value if draft.base is not None else None,
        "milk": draft.milk.value,
        "toppings": [topping.value for topping in ordered_toppings(draft.toppings)],
    }


def _text_field(payload: SerializedDraft, key: str) -> str:
    value = payload.get(key)
    if isinstance(value, str):
        return value
    if value is not None:
        logger.debug("draft_field_malformed field=%s value=%r", key, value)
    return ""


def draft_from_payload(payload: SerializedDraft) -> OrderDraft:
    """
    Build a draft from a stored mapping, field by field.

    Absent or malformed fields fall back to their defaults; unknown topping
    values are dropped.
    """
    draft = OrderDraft()
    draft.name = _text_field(payload, "name")
    draft.phone = _text_field(payload, "phone")

    raw_base = payload.get("base")
    if raw_base is not None:
        try:
            draft.base = BaseKind(raw_base)
        except ValueError:
            logger.debug("draft_field_malformed field=base value=%r", raw_base)

    raw_milk = payload.get("milk")
    if raw_milk is not None:
        try:
            draft.milk = MilkKind(raw_milk)
        except ValueError:
            logger.debug("draft_field_malformed field=milk value=%r", raw_milk)

    raw_toppings = payload.get("toppings")
    if isinstance(raw_toppings, list):
        for raw in raw_toppings:
            try:
                draft.toppings.add(ToppingKind(raw))
            except ValueError:
                logger.debug("draft_topping_dropped value=%r", raw)
    elif raw_toppings is not None:
        logger.debug("draft_field_malformed field=toppings value=%r", raw_toppings)

    return draft


def decode_payload(text: str | None) -> SerializedDraft | None:
    """Decode stored JSON text, resolving anything unreadable to None."""
    if not text:
        return None
    try:
        decoded = json.loads(text)
    except (TypeError, ValueError, RecursionError):
        logger.debug("draft_payload_malformed reason=invalid_json")
        return None
    if not isinstance(decoded, dict):
        logger.debug("draft_payload_malformed reason=not_an_object")
        return None
    return decoded


class MemoryDraftStore:
    """Draft store that keeps encoded payloads in a dict."""

    def __init__(self, key: str = DRAFT_KEY) -> None:
        self.key = key
        self.entries: dict[str, str] = {}

    def load(self) -> SerializedDraft | None:
        return decode_payload(self.entries.get(self.key))

    def save(self, payload: SerializedDraft) -> None:
        self.entries[self.key] = json.dumps(payload)

    def clear(self) -> None:
        self.entries.pop(self.key, None)


class SqliteDraftStore:
    """Draft store backed by a small SQLite key-value table."""

    def __init__(self, db_path: str | Path = DB_PATH, key: str = DRAFT_KEY) -> None:
        self.db_path = Path(db_path)
        self.key = key

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        return sqlite3.connect(self.db_path)

    def bootstrap_schema(self) -> None:
        """Create the drafts table if it does not already exist."""
        conn = self._connect()
        try:
            with conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS drafts (
                        key TEXT PRIMARY KEY,
                        payload TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    )
                    """
                )
        finally:
            conn.close()

    def load(self) -> SerializedDraft | None:
        try:
            self.bootstrap_schema()
            conn = self._connect()
            try:
                row = conn.execute("SELECT payload FROM drafts WHERE key = ?", (self.key,)).fetchone()
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as exc:
            logger.warning("draft_load_failed path=%s error=%r", self.db_path, exc)
            return None
        if row is None:
            return None
        return decode_payload(row[0])

    def save(self, payload: SerializedDraft) -> None:
        self.write_text(json.dumps(payload))

    def write_text(self, text: str) -> None:
        """Store raw payload text under this store's key, replacing any prior value."""
        self.bootstrap_schema()
        conn = self._connect()
        try:
            with conn:
                conn.execute(
                    """
                    INSERT INTO drafts (key, payload, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET payload = excluded.payload, updated_at = excluded.updated_at
                    """,
                    (self.key, text, _utc_now_iso()),
                )
        finally:
            conn.close()

    def clear(self) -> None:
        self.bootstrap_schema()
        conn = self._connect()
        try:
            with conn:
                conn.execute("DELETE FROM drafts WHERE key = ?", (self.key,))
        finally:
            conn.close()
