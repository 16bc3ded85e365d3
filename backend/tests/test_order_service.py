"""
Order lifecycle tests.

Verifies:
- Totals always equal the sum of price x quantity
- The status pipeline for delivery and pickup orders
- Terminal orders never move and never notify
- Bulk clear is reserved for administrators
"""

import pytest

from pizzadash.models.records import Product
from pizzadash.services import order_service
from pizzadash.services.entity_store import PRODUCTS
from pizzadash.services.permission_service import PermissionDeniedError
from pizzadash.validation import NotFoundError, OrderDraft, OrderItemDraft, ValidationError, parse_order_draft


def _draft(*items, fulfillment_type="pickup", **kwargs):
    return OrderDraft(
        customer_name=kwargs.pop("customer_name", "Bruno Lima"),
        fulfillment_type=fulfillment_type,
        items=tuple(items),
        **kwargs,
    )


def _assert_totals_consistent(store):
    for order in store.orders:
        assert order.total == round(sum(i.price * i.quantity for i in order.items), 2), order.id


# =============================================================================
# CREATE / UPDATE
# =============================================================================


class TestCreateOrder:

    def test_seed_totals_are_consistent(self, store):
        _assert_totals_consistent(store)

    def test_creates_with_next_sequential_id(self, store):
        order = order_service.create_order(store, _draft(OrderItemDraft(product_id="1", quantity=2, size="large")))

        assert order.id == "1008"
        assert order.status == "received"
        assert order.total == 111.00
        assert store.orders[0].id == "1008"
        _assert_totals_consistent(store)

    def test_first_order_gets_id_one(self, empty_store):
        empty_store.replace(PRODUCTS, [Product(id="p", name="Cola", category="drink", sizes={"2L": 12.00})])
        order = order_service.create_order(empty_store, _draft(OrderItemDraft(product_id="p", size="2L")))
        assert order.id == "1"

    def test_drops_unresolvable_items(self, store):
        order = order_service.create_order(store, _draft(
            OrderItemDraft(product_id="4", quantity=3, size="350ml"),
            OrderItemDraft(product_id="does-not-exist", quantity=1, size="medium"),
        ))

        assert len(order.items) == 1
        assert order.items[0].product_name == "Coca-Cola"
        assert order.total == 18.00

    def test_nothing_resolvable_creates_nothing(self, store):
        before = store.orders
        notifications_before = store.notifications

        result = order_service.create_order(store, _draft(OrderItemDraft(product_id="nope")))

        assert result is None
        assert store.orders == before
        assert store.notifications == notifications_before

    def test_updates_customer_roster(self, store):
        order_service.create_order(store, _draft(
            OrderItemDraft(product_id="2", size="medium"),
            customer_name="Maria Oliveira",
            customer_phone="21 91234 5678",
        ))

        maria = next(c for c in store.customers if c.id == "2")
        assert maria.order_count == 2
        assert maria.total_spent == 104.00

    def test_notifies_administrators(self, store):
        order = order_service.create_order(store, _draft(OrderItemDraft(product_id="5")))
        latest = store.notifications[0]

        assert latest.title == "New order!"
        assert latest.target_roles == ("administrator",)
        assert f"#{order.id}" in latest.description


class TestUpdateOrder:

    def test_keeps_id_and_status(self, store):
        updated = order_service.update_order(store, "1003", _draft(
            OrderItemDraft(product_id="3", quantity=2, size="large"),
            fulfillment_type="delivery",
            address="Rua das Gaivotas, 789",
        ))

        assert updated.id == "1003"
        assert updated.status == "ready"
        assert updated.total == 131.80
        assert store.notifications[0].target_roles == ("administrator", "staff")
        _assert_totals_consistent(store)

    def test_unknown_order_raises(self, store):
        with pytest.raises(NotFoundError):
            order_service.update_order(store, "9999", _draft(OrderItemDraft(product_id="1", size="small")))


# =============================================================================
# STATUS PIPELINE
# =============================================================================


class TestAdvance:

    def test_ready_delivery_goes_out_for_delivery(self, store):
        assert order_service.advance_order(store, "1003").status == "out_for_delivery"

    def test_ready_pickup_goes_straight_to_delivered(self, store):
        order_service.advance_order(store, "1002")  # preparing -> ready
        assert order_service.advance_order(store, "1002").status == "delivered"

    def test_full_delivery_pipeline(self, store):
        order = order_service.create_order(store, _draft(
            OrderItemDraft(product_id="1", size="small"),
            fulfillment_type="delivery",
            address="Rua Augusta, 1500, Consolação",
        ))
        seen = []
        while (advanced := order_service.advance_order(store, order.id)) is not None:
            seen.append(advanced.status)
        assert seen == ["preparing", "ready", "out_for_delivery", "delivered"]

    @pytest.mark.parametrize("order_id", ["1005", "1007"])
    def test_terminal_orders_are_idempotent(self, store, order_id):
        before = store.find("orders", order_id)
        notifications_before = len(store.notifications)

        for _ in range(3):
            assert order_service.advance_order(store, order_id) is None

        assert store.find("orders", order_id) == before
        assert len(store.notifications) == notifications_before

    def test_unknown_order_is_noop(self, store):
        assert order_service.advance_order(store, "4242") is None

    @pytest.mark.parametrize("status,roles", [
        ("preparing", ("administrator", "staff")),
        ("ready", ("staff",)),
        ("out_for_delivery", ("administrator",)),
        ("delivered", ("administrator",)),
    ])
    def test_notification_audience(self, store, status, roles):
        order = order_service.create_order(store, _draft(
            OrderItemDraft(product_id="1", size="small"),
            fulfillment_type="delivery",
            address="Rua Augusta, 1500, Consolação",
        ))
        while store.find("orders", order.id).status != status:
            order_service.advance_order(store, order.id)
        assert store.notifications[0].target_roles == roles

    def test_ready_wording_depends_on_fulfillment(self, store):
        order_service.advance_order(store, "1002")
        assert store.notifications[0].title == "Order #1002 ready for pickup"


class TestCancel:

    def test_cancels_active_order(self, store):
        cancelled = order_service.cancel_order(store, "1001")
        assert cancelled.status == "cancelled"
        assert store.notifications[0].target_roles == ("administrator", "staff")

    @pytest.mark.parametrize("order_id", ["1005", "1007"])
    def test_terminal_orders_cannot_be_cancelled(self, store, order_id):
        assert order_service.cancel_order(store, order_id) is None

    def test_advance_never_reaches_cancelled(self, store):
        for order in store.orders:
            if order.status != "cancelled":
                assert order_service.next_status(order) != "cancelled"


# =============================================================================
# QUERIES / BULK CLEAR
# =============================================================================


class TestQueries:

    def test_filter_by_status(self, store):
        assert [o.id for o in order_service.list_orders(store, status="preparing")] == ["1006", "1002"]

    def test_active_deliveries_ready_first(self, store):
        assert [o.id for o in order_service.list_active_deliveries(store)] == ["1003", "1004"]


class TestDeleteAll:

    def test_staff_is_denied_and_nothing_changes(self, store, staff):
        before = store.orders
        with pytest.raises(PermissionDeniedError):
            order_service.delete_all_orders(store, staff)
        assert store.orders == before

    def test_anonymous_is_denied(self, store):
        with pytest.raises(PermissionDeniedError):
            order_service.delete_all_orders(store, None)
        assert len(store.orders) == 7

    def test_administrator_clears_everything(self, store, admin):
        assert order_service.delete_all_orders(store, admin) == 7
        assert store.orders == []
        latest = store.notifications[0]
        assert latest.title == "Orders cleared"
        assert admin.name in latest.description


# =============================================================================
# CHECKOUT VALIDATION
# =============================================================================


class TestParseOrderDraft:

    def _payload(self, **overrides):
        payload = {
            "customer_name": "Bruno Lima",
            "fulfillment_type": "pickup",
            "items": [{"product_id": "1", "quantity": 1, "size": "medium"}],
        }
        payload.update(overrides)
        return payload

    def test_valid_pickup(self):
        draft = parse_order_draft(self._payload())
        assert draft.items[0].product_id == "1"

    def test_delivery_needs_address_or_link(self):
        with pytest.raises(ValidationError):
            parse_order_draft(self._payload(fulfillment_type="delivery"))

    def test_delivery_accepts_location_link(self):
        draft = parse_order_draft(self._payload(
            fulfillment_type="delivery", location_link="https://maps.app.goo.gl/abc",
        ))
        assert draft.location_link == "https://maps.app.goo.gl/abc"

    def test_short_address_rejected(self):
        with pytest.raises(ValidationError):
            parse_order_draft(self._payload(fulfillment_type="delivery", address="Rua 1"))

    def test_empty_items_rejected(self):
        with pytest.raises(ValidationError):
            parse_order_draft(self._payload(items=[]))

    @pytest.mark.parametrize("quantity", [0, -1, "two", True])
    def test_bad_quantity_rejected(self, quantity):
        with pytest.raises(ValidationError):
            parse_order_draft(self._payload(items=[{"product_id": "1", "quantity": quantity}]))

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            parse_order_draft(self._payload(customer_name="   "))

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            parse_order_draft(self._payload(total=1.00))
