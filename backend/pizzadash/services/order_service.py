# Overview: Order lifecycle engine; creation, edits, status pipeline and side effects.

"""
Order Lifecycle Engine

Pipeline:
    received -> preparing -> ready -> out_for_delivery -> delivered   (delivery)
    received -> preparing -> ready -> delivered                       (pickup)
`cancelled` is reachable from any non-terminal status through cancel_order()
only. `delivered` and `cancelled` are terminal.

Every successful mutation replaces the orders collection in the store and
emits a role-targeted notification. No-ops (unknown order, terminal status,
nothing resolvable) return None and emit nothing.

Invariant: an order's total equals the sum of price x quantity over its items,
computed whenever items are (re)resolved.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from ..models.records import (
    FULFILLMENT_DELIVERY,
    FULFILLMENT_PICKUP,
    STATUS_CANCELLED,
    STATUS_DELIVERED,
    STATUS_OUT_FOR_DELIVERY,
    STATUS_PREPARING,
    STATUS_READY,
    STATUS_RECEIVED,
    Order,
    OrderItem,
    UserProfile,
)
from ..validation import NotFoundError, OrderDraft
from pizzadash.time_utils import clock_time
from . import customer_service, notification_service, pricing_service
from .entity_store import ORDERS, EntityStore
from .notification_service import ADMINS, EVERYONE, STAFF
from .permission_service import require_administrator

logger = logging.getLogger(__name__)

ORDER_FLOW = [STATUS_RECEIVED, STATUS_PREPARING, STATUS_READY, STATUS_OUT_FOR_DELIVERY, STATUS_DELIVERED]
ORDERS_LINK = "/orders"


def order_total(items: list[OrderItem] | tuple[OrderItem, ...]) -> float:
    return round(sum(item.line_total for item in items), 2)


def build_items(store: EntityStore, draft: OrderDraft) -> list[OrderItem]:
    """Resolve draft lines against the catalog, dropping lines whose product is gone."""
    products = store.products
    items: list[OrderItem] = []
    for line in draft.items:
        resolved = pricing_service.resolve(line, products)
        if resolved is None:
            logger.info("Dropping order line for unknown product %s", line.product_id)
            continue
        items.append(OrderItem(
            product_name=resolved.product_name,
            quantity=line.quantity,
            size=line.size,
            price=resolved.unit_price,
            product_id=line.product_id,
            second_product_id=line.second_product_id,
        ))
    return items


def next_order_id(orders: list[Order]) -> str:
    numeric = [int(o.id) for o in orders if o.id.isdigit()]
    return str(max(numeric) + 1) if numeric else "1"


def next_status(order: Order) -> str | None:
    if order.is_terminal or order.status not in ORDER_FLOW:
        return None
    if order.status == STATUS_READY:
        return STATUS_DELIVERED if order.fulfillment_type == FULFILLMENT_PICKUP else STATUS_OUT_FOR_DELIVERY
    return ORDER_FLOW[ORDER_FLOW.index(order.status) + 1]


def _replace_order(store: EntityStore, updated: Order) -> None:
    # Caller holds store.mutation()
    store.replace(ORDERS, [updated if o.id == updated.id else o for o in store.orders])


# -------------------- queries --------------------

def list_orders(
    store: EntityStore,
    status: str | None = None,
    fulfillment_type: str | None = None,
) -> list[Order]:
    orders = store.orders
    if status:
        orders = [o for o in orders if o.status == status]
    if fulfillment_type:
        orders = [o for o in orders if o.fulfillment_type == fulfillment_type]
    return orders


def get_order(store: EntityStore, order_id: str) -> Order:
    order = store.find(ORDERS, order_id)
    if order is None:
        raise NotFoundError("Order not found")
    return order


def list_active_deliveries(store: EntityStore) -> list[Order]:
    """Delivery orders waiting for or on their way to the customer; ready ones first."""
    active = [
        o for o in store.orders
        if o.fulfillment_type == FULFILLMENT_DELIVERY and o.status in (STATUS_READY, STATUS_OUT_FOR_DELIVERY)
    ]
    return sorted(active, key=lambda o: (o.status != STATUS_READY, int(o.id) if o.id.isdigit() else 0))


# -------------------- mutations --------------------

def create_order(store: EntityStore, draft: OrderDraft) -> Order | None:
    """
    Create an order from a checkout draft.

    Returns None (and creates nothing) when no line resolves. On success the
    order is prepended, the customer roster is updated with the order total
    and administrators are notified.
    """
    with store.mutation():
        items = build_items(store, draft)
        if not items:
            logger.info("Order for %s discarded: no resolvable items", draft.customer_name)
            return None

        orders = store.orders
        order = Order(
            id=next_order_id(orders),
            customer_name=draft.customer_name,
            customer_phone=draft.customer_phone,
            items=tuple(items),
            total=order_total(items),
            status=STATUS_RECEIVED,
            fulfillment_type=draft.fulfillment_type,
            address=draft.address,
            location_link=draft.location_link,
            notes=draft.notes,
            timestamp=clock_time(),
        )
        store.replace(ORDERS, [order] + orders)

        customer_service.upsert(
            store,
            {
                "name": draft.customer_name,
                "phone": draft.customer_phone,
                "address": draft.address,
                "location_link": draft.location_link,
            },
            order_total=order.total,
        )
        notification_service.emit(
            store,
            "New order!",
            f"Order #{order.id} from {order.customer_name} ($ {order.total:.2f}) received.",
            ADMINS,
            link=ORDERS_LINK,
        )
    return order


def update_order(store: EntityStore, order_id: str, draft: OrderDraft) -> Order | None:
    """
    Re-resolve items and customer details of an existing order, keeping its
    identifier and status. Raises NotFoundError for an unknown order; returns
    None when no line resolves.
    """
    with store.mutation():
        existing = get_order(store, order_id)
        items = build_items(store, draft)
        if not items:
            return None

        updated = replace(
            existing,
            customer_name=draft.customer_name,
            customer_phone=draft.customer_phone,
            items=tuple(items),
            total=order_total(items),
            fulfillment_type=draft.fulfillment_type,
            address=draft.address,
            location_link=draft.location_link,
            notes=draft.notes,
        )
        _replace_order(store, updated)
        notification_service.emit(
            store,
            f"Order #{updated.id} updated",
            f"The order from {updated.customer_name} was edited. New total: $ {updated.total:.2f}.",
            EVERYONE,
            link=ORDERS_LINK,
        )
    return updated


def _status_notification(order: Order) -> tuple[str, str, tuple[str, ...]]:
    if order.status == STATUS_PREPARING:
        return (
            f"Order #{order.id} in preparation",
            f"The order from {order.customer_name} is being prepared.",
            EVERYONE,
        )
    if order.status == STATUS_READY:
        if order.fulfillment_type == FULFILLMENT_DELIVERY:
            return (
                f"Order #{order.id} ready for delivery",
                f"The order from {order.customer_name} is waiting for a courier.",
                STAFF,
            )
        return (
            f"Order #{order.id} ready for pickup",
            f"The order from {order.customer_name} is waiting at the counter.",
            STAFF,
        )
    if order.status == STATUS_OUT_FOR_DELIVERY:
        return (
            f"Order #{order.id} out for delivery",
            f"The order from {order.customer_name} left for delivery.",
            ADMINS,
        )
    return (
        f"Order #{order.id} delivered",
        f"The order from {order.customer_name} was delivered.",
        ADMINS,
    )


def advance_order(store: EntityStore, order_id: str) -> Order | None:
    """Move an order one step along its pipeline. No-op on terminal or unknown orders."""
    with store.mutation():
        order = store.find(ORDERS, order_id)
        if order is None:
            return None
        status = next_status(order)
        if status is None:
            return None

        updated = replace(order, status=status)
        _replace_order(store, updated)
        title, description, roles = _status_notification(updated)
        notification_service.emit(store, title, description, roles, link=ORDERS_LINK)
    return updated


def cancel_order(store: EntityStore, order_id: str) -> Order | None:
    """Cancel a non-terminal order. No-op on terminal or unknown orders."""
    with store.mutation():
        order = store.find(ORDERS, order_id)
        if order is None or order.is_terminal:
            return None

        updated = replace(order, status=STATUS_CANCELLED)
        _replace_order(store, updated)
        notification_service.emit(
            store,
            f"Order #{updated.id} cancelled",
            f"The order from {updated.customer_name} was cancelled.",
            EVERYONE,
            link=ORDERS_LINK,
        )
    return updated


def delete_all_orders(store: EntityStore, actor: UserProfile | None) -> int:
    """
    Administrative bulk clear. Raises PermissionDeniedError for anyone but an
    administrator; returns the number of orders removed.
    """
    require_administrator(actor, "delete all orders")
    with store.mutation():
        removed = len(store.orders)
        store.replace(ORDERS, [])
        notification_service.emit(
            store,
            "Orders cleared",
            f"All {removed} orders were deleted by {actor.name}.",
            ADMINS,
            link=ORDERS_LINK,
        )
    logger.warning("All orders deleted by %s (%d removed)", actor.email, removed)
    return removed
