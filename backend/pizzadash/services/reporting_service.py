# Overview: Read-only aggregates for the dashboard and the assistant prompt.

from __future__ import annotations

from ..models.records import ORDER_STATUSES, STATUS_CANCELLED
from .entity_store import EntityStore


def status_counts(store: EntityStore) -> dict[str, int]:
    counts = {status: 0 for status in ORDER_STATUSES}
    for order in store.orders:
        counts[order.status] = counts.get(order.status, 0) + 1
    return counts


def revenue(store: EntityStore) -> float:
    """Sum of order totals, cancelled orders excluded."""
    return round(sum(o.total for o in store.orders if o.status != STATUS_CANCELLED), 2)


def dashboard_summary(store: EntityStore) -> dict:
    orders = store.orders
    return {
        "total_orders": len(orders),
        "orders_by_status": status_counts(store),
        "revenue": revenue(store),
        "customer_count": len(store.customers),
        "recent_orders": [o.to_dict() for o in orders[:5]],
    }
