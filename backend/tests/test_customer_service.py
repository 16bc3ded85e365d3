"""
Customer aggregation tests.

Matching order: identifier, then phone digits, then case-insensitive name.
Spend and order count only move when an order total is supplied.
"""

import pytest

from pizzadash.services import customer_service
from pizzadash.time_utils import today_iso
from pizzadash.validation import NotFoundError


class TestUpsertWithOrderTotals:

    def test_same_phone_twice_aggregates(self, empty_store):
        customer_service.upsert(empty_store, {"name": "Ana Paula", "phone": "(11) 1111-2222"}, order_total=10.00)
        customer_service.upsert(empty_store, {"name": "Ana P.", "phone": "11 1111 2222"}, order_total=15.00)

        customers = empty_store.customers
        assert len(customers) == 1
        assert customers[0].order_count == 2
        assert customers[0].total_spent == 25.00

    def test_new_customer_starts_from_order_total(self, empty_store):
        created = customer_service.upsert(empty_store, {"name": "Rafael"}, order_total=42.50)
        assert created.order_count == 1
        assert created.total_spent == 42.50
        assert created.last_order_date is not None

    def test_last_order_date_becomes_today(self, store):
        updated = customer_service.upsert(store, {"id": "1"}, order_total=5.00)
        assert updated.last_order_date == today_iso()


class TestMatchingTiers:

    def test_identifier_wins_over_phone(self, store):
        # Phone belongs to customer 2, identifier to customer 1
        updated = customer_service.upsert(store, {"id": "1", "phone": "(21) 91234-5678"}, order_total=1.00)
        assert updated.id == "1"

    def test_phone_wins_over_name(self, store):
        updated = customer_service.upsert(store, {"name": "João Silva", "phone": "(31) 95555-4444"}, order_total=1.00)
        assert updated.id == "3"

    def test_name_match_is_case_insensitive(self, store):
        updated = customer_service.upsert(store, {"name": "ana costa"}, order_total=1.00)
        assert updated.id == "4"
        assert updated.order_count == 5

    def test_blank_phone_never_matches(self, empty_store):
        customer_service.upsert(empty_store, {"name": "Primeiro", "phone": ""})
        customer_service.upsert(empty_store, {"name": "Segundo", "phone": ""})
        assert len(empty_store.customers) == 2


class TestManualEdits:

    def test_edit_leaves_statistics_alone(self, store):
        before = store.find("customers", "4")
        updated = customer_service.upsert(store, {"id": "4", "address": "Rua XV de Novembro, 100"})

        assert updated.address == "Rua XV de Novembro, 100"
        assert updated.order_count == before.order_count
        assert updated.total_spent == before.total_spent
        assert updated.last_order_date == before.last_order_date

    def test_statistics_fields_are_ignored(self, store):
        updated = customer_service.upsert(store, {"id": "1", "total_spent": 9999, "order_count": 99})
        assert updated.total_spent == 91.00
        assert updated.order_count == 1

    def test_manual_add_starts_at_zero(self, empty_store):
        created = customer_service.upsert(empty_store, {"name": "Helena"})
        assert created.order_count == 0
        assert created.total_spent == 0.0

    def test_new_customer_needs_a_name(self, empty_store):
        with pytest.raises(ValueError):
            customer_service.upsert(empty_store, {"phone": "123"})


class TestDelete:

    def test_delete_keeps_orders(self, store):
        orders_before = store.orders
        customer_service.delete_customer(store, "1")
        assert store.find("customers", "1") is None
        assert store.orders == orders_before

    def test_unknown_customer(self, store):
        with pytest.raises(NotFoundError):
            customer_service.delete_customer(store, "nope")

    def test_list_is_sorted_by_name(self, store):
        names = [c.name for c in customer_service.list_customers(store)]
        assert names == sorted(names, key=str.casefold)
