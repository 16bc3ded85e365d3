# Overview: Customer roster maintenance and spend/order-count aggregation.

"""
Customer Aggregator

upsert() is the only path that changes a customer's total_spent, order_count
and last_order_date, and it only does so when called with an order total
(i.e. from a checkout). Manual edits go through the same function without a
total and can never touch those three fields.

Matching order for an incoming record, first hit wins:
1. exact identifier
2. phone number (compared on digits only; blank phones never match)
3. case-insensitive exact name
Name matches are inherently ambiguous between unrelated people with the same
name; supplying a phone avoids that.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import replace

from ..models.records import Customer
from ..validation import NotFoundError
from pizzadash.time_utils import today_iso
from .entity_store import CUSTOMERS, EntityStore


# Fields a caller may set; statistics are excluded on purpose
MERGEABLE_FIELDS = ("name", "phone", "address", "location_link")


def phone_digits(phone: str | None) -> str:
    return re.sub(r"\D", "", phone or "")


def find_match(customers: list[Customer], record: dict) -> Customer | None:
    customer_id = record.get("id")
    if customer_id:
        for c in customers:
            if c.id == str(customer_id):
                return c

    digits = phone_digits(record.get("phone"))
    if digits:
        for c in customers:
            if phone_digits(c.phone) == digits:
                return c

    name = (record.get("name") or "").strip().casefold()
    if name:
        for c in customers:
            if c.name.strip().casefold() == name:
                return c
    return None


def upsert(store: EntityStore, record: dict, order_total: float | None = None) -> Customer:
    """
    Merge `record` into the roster.

    With `order_total`, the matched (or new) customer's spend grows by that
    amount, order count by one, and last-order date becomes today.
    """
    supplied = {k: record[k] for k in MERGEABLE_FIELDS if record.get(k) is not None}

    with store.mutation():
        customers = store.customers
        existing = find_match(customers, record)

        if existing is not None:
            merged = replace(existing, **supplied)
            if order_total is not None:
                merged = replace(
                    merged,
                    total_spent=round(existing.total_spent + order_total, 2),
                    order_count=existing.order_count + 1,
                    last_order_date=today_iso(),
                )
            store.replace(CUSTOMERS, [merged if c.id == existing.id else c for c in customers])
            return merged

        if not supplied.get("name"):
            raise ValueError("A new customer needs a name")

        created = Customer(
            id=uuid.uuid4().hex[:12],
            name=supplied["name"],
            phone=supplied.get("phone"),
            address=supplied.get("address"),
            location_link=supplied.get("location_link"),
            last_order_date=today_iso(),
            total_spent=round(order_total, 2) if order_total is not None else 0.0,
            order_count=1 if order_total is not None else 0,
        )
        store.replace(CUSTOMERS, customers + [created])
    return created


def list_customers(store: EntityStore) -> list[Customer]:
    return sorted(store.customers, key=lambda c: c.name.casefold())


def delete_customer(store: EntityStore, customer_id: str) -> Customer:
    """Removes the customer only; orders keep their name snapshot."""
    with store.mutation():
        customer = store.find(CUSTOMERS, customer_id)
        if customer is None:
            raise NotFoundError("Customer not found")
        store.replace(CUSTOMERS, [c for c in store.customers if c.id != customer.id])
    return customer
