# Overview: Snapshot backends that durably mirror the entity collections.

"""
Snapshot persistence backends.

A backend only knows keys and JSON-compatible values: read the whole
collection, replace the whole collection. The EntityStore owns the
in-memory copy and decides what to do when a backend fails.

Backends:
- MemorySnapshotBackend: process-local dict (tests, or fallback when no database)
- SqlSnapshotBackend: one row per key in the `snapshots` table
"""

from __future__ import annotations

import copy
import json
from typing import Any, Protocol

from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import StoredSnapshot


class PersistenceError(RuntimeError):
    """A backend could not read or write a snapshot."""


class SnapshotBackend(Protocol):
    def read(self, key: str) -> Any | None: ...

    def write(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...


class MemorySnapshotBackend:
    """Keeps deep copies so callers can't mutate what was 'persisted'."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def read(self, key: str) -> Any | None:
        if key not in self._data:
            return None
        return copy.deepcopy(self._data[key])

    def write(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)


class SqlSnapshotBackend:
    """
    Stores each snapshot as JSON text in the snapshots table.

    Must be used inside a Flask application context (db.session).
    """

    def read(self, key: str) -> Any | None:
        try:
            row = db.session.get(StoredSnapshot, key)
        except SQLAlchemyError as e:
            db.session.rollback()
            raise PersistenceError(f"Failed to read snapshot '{key}'") from e
        if row is None:
            return None
        try:
            return json.loads(row.payload)
        except ValueError as e:
            raise PersistenceError(f"Snapshot '{key}' is not valid JSON") from e

    def write(self, key: str, value: Any) -> None:
        payload = json.dumps(value, ensure_ascii=False)
        try:
            row = db.session.get(StoredSnapshot, key)
            if row is None:
                db.session.add(StoredSnapshot(key=key, payload=payload))
            else:
                row.payload = payload
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise PersistenceError(f"Failed to write snapshot '{key}'") from e

    def delete(self, key: str) -> None:
        try:
            db.session.query(StoredSnapshot).filter_by(key=key).delete()
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise PersistenceError(f"Failed to delete snapshot '{key}'") from e

    def describe(self) -> list[dict]:
        """Key, payload size and last update of every stored snapshot."""
        try:
            rows = db.session.query(StoredSnapshot).order_by(StoredSnapshot.key).all()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise PersistenceError("Failed to list snapshots") from e
        return [row.to_dict() for row in rows]
