# Overview: Application state holder; owns the in-memory collections and mirrors writes to a backend.

"""
Entity Store

Holds the users, customers, products, orders and notifications collections
plus the pizza settings singleton and the active session record.

Contract:
- snapshot(name) returns the current collection as a new list
- replace(name, records) swaps the whole collection, then persists it
- a collection with no persisted snapshot is seeded from the built-in dataset

The in-memory copy is the source of truth for the running process. A backend
failure is logged and counted; it never propagates to the caller. A snapshot
that could not be read at startup is seeded in memory only, so the stored
copy is never overwritten by seed data.

Concurrency:
Requests may run on several threads. Services wrap each read-compute-replace
sequence in `with store.mutation():`, which holds a re-entrant lock, so nested
service calls (order -> customer -> notification) stay one atomic step.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Iterable, Iterator

from ..models.records import Customer, Notification, Order, PizzaSettings, Product, UserProfile
from ..seed_data import SETTINGS as DEFAULT_SETTINGS, default_seed
from .persistence import PersistenceError, SnapshotBackend

logger = logging.getLogger(__name__)

USERS = "users"
CUSTOMERS = "customers"
PRODUCTS = "products"
ORDERS = "orders"
NOTIFICATIONS = "notifications"
SETTINGS_KEY = "settings"
SESSION_KEY = "session"

COLLECTIONS = {
    USERS: UserProfile,
    CUSTOMERS: Customer,
    PRODUCTS: Product,
    ORDERS: Order,
    NOTIFICATIONS: Notification,
}

DEFAULT_NOTIFICATION_LIMIT = 50


def _encode(record) -> dict:
    to_record = getattr(record, "to_record", None)
    return to_record() if to_record else record.to_dict()


class EntityStore:
    def __init__(
        self,
        backend: SnapshotBackend,
        seed: dict | None = None,
        notification_limit: int = DEFAULT_NOTIFICATION_LIMIT,
    ) -> None:
        self.backend = backend
        self.notification_limit = notification_limit
        self.persistence_failures = 0
        self._collections: dict[str, tuple] = {}
        self._settings: PizzaSettings = PizzaSettings.from_dict(DEFAULT_SETTINGS)
        self._session: dict | None = None
        self._lock = threading.RLock()
        self.load(default_seed() if seed is None else seed)

    # -------------------- loading --------------------

    def load(self, seed: dict) -> None:
        """
        Read every collection from the backend, seeding the ones never persisted.

        Seed data is only written back when the backend answered that the key
        is absent. After a failed read the seed stays in memory.
        """
        with self._lock:
            for name, record_cls in COLLECTIONS.items():
                raw, readable = self._read(name)
                records = self._decode(name, record_cls, raw) if raw is not None else None
                if records is None:
                    records = self._decode(name, record_cls, seed.get(name, [])) or ()
                    self._collections[name] = records
                    if readable:
                        self._persist(name)
                else:
                    self._collections[name] = records

            raw_settings, readable = self._read(SETTINGS_KEY)
            if raw_settings is None:
                self._settings = PizzaSettings.from_dict(seed.get(SETTINGS_KEY) or DEFAULT_SETTINGS)
                if readable:
                    self._write(SETTINGS_KEY, self._settings.to_dict())
            else:
                self._settings = PizzaSettings.from_dict(raw_settings)

            raw_session, _ = self._read(SESSION_KEY)
            self._session = raw_session or None

    def reseed(self, seed: dict | None = None) -> None:
        """Replace every collection with the seed dataset (CLI maintenance)."""
        seed = default_seed() if seed is None else seed
        with self._lock:
            for name, record_cls in COLLECTIONS.items():
                self.replace(name, self._decode(name, record_cls, seed.get(name, [])) or ())
            self.replace_settings(PizzaSettings.from_dict(seed.get(SETTINGS_KEY) or DEFAULT_SETTINGS))
            self.clear_session()

    @contextmanager
    def mutation(self) -> Iterator["EntityStore"]:
        """
        Hold the store lock for a whole read-compute-replace sequence.

            with store.mutation():
                orders = store.orders
                store.replace(ORDERS, [new_order] + orders)
        """
        with self._lock:
            yield self

    def _decode(self, name: str, record_cls, raw: Any) -> tuple | None:
        if not isinstance(raw, list):
            logger.warning("Snapshot '%s' is not a list; ignoring it", name)
            return None
        try:
            return tuple(record_cls.from_dict(item) for item in raw)
        except (KeyError, TypeError, ValueError):
            logger.exception("Snapshot '%s' has unreadable records; ignoring it", name)
            return None

    # -------------------- collections --------------------

    def snapshot(self, name: str) -> list:
        return list(self._collections[name])

    def replace(self, name: str, records: Iterable) -> None:
        if name not in COLLECTIONS:
            raise KeyError(f"Unknown collection: {name}")
        with self._lock:
            self._collections[name] = tuple(records)
            self._persist(name)

    def find(self, name: str, record_id: str):
        record_id = str(record_id)
        for record in self._collections[name]:
            if record.id == record_id:
                return record
        return None

    @property
    def users(self) -> list[UserProfile]:
        return self.snapshot(USERS)

    @property
    def customers(self) -> list[Customer]:
        return self.snapshot(CUSTOMERS)

    @property
    def products(self) -> list[Product]:
        return self.snapshot(PRODUCTS)

    @property
    def orders(self) -> list[Order]:
        return self.snapshot(ORDERS)

    @property
    def notifications(self) -> list[Notification]:
        return self.snapshot(NOTIFICATIONS)

    # -------------------- settings & session --------------------

    @property
    def settings(self) -> PizzaSettings:
        return self._settings

    def replace_settings(self, settings: PizzaSettings) -> None:
        with self._lock:
            self._settings = settings
            self._write(SETTINGS_KEY, settings.to_dict())

    @property
    def session(self) -> dict | None:
        return dict(self._session) if self._session else None

    def set_session(self, session: dict) -> None:
        with self._lock:
            self._session = dict(session)
            self._write(SESSION_KEY, self._session)

    def clear_session(self) -> None:
        with self._lock:
            self._session = None
            try:
                self.backend.delete(SESSION_KEY)
            except PersistenceError:
                self.persistence_failures += 1
                logger.exception("Failed to clear persisted session")

    # -------------------- backend access --------------------

    def _persist(self, name: str) -> None:
        self._write(name, [_encode(r) for r in self._collections[name]])

    def _write(self, key: str, value: Any) -> None:
        try:
            self.backend.write(key, value)
        except PersistenceError:
            self.persistence_failures += 1
            logger.exception("Failed to persist snapshot '%s'; keeping in-memory state", key)

    def _read(self, key: str) -> tuple[Any | None, bool]:
        """Returns (value, readable); readable is False when the backend failed."""
        try:
            return self.backend.read(key), True
        except PersistenceError:
            self.persistence_failures += 1
            logger.exception("Failed to read snapshot '%s'; seeding in memory only", key)
            return None, False
