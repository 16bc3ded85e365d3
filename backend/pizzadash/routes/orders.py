# Overview: Flask API routes for orders operations; parses input and returns JSON responses.

# backend/pizzadash/routes/orders.py
"""
Order routes.

All routes require authentication. Clearing every order additionally
requires the administrator role (enforced again by order_service).
"""
from flask import Blueprint, request, jsonify, g, current_app

from ..decorators import require_auth
from ..models.records import FULFILLMENT_TYPES, ORDER_STATUSES
from ..services import order_service
from ..services.entity_store import ORDERS
from ..services.permission_service import PermissionDeniedError
from ..validation import NotFoundError, ValidationError, parse_order_draft

orders_bp = Blueprint("orders", __name__, url_prefix="/api")


@orders_bp.get("/orders")
@require_auth
def list_orders_route():
    """
    List orders, most recent first.

    Query params:
    - status: one of the order statuses (optional)
    - fulfillment_type: delivery | pickup (optional)
    """
    status = request.args.get("status")
    fulfillment_type = request.args.get("fulfillment_type")
    if status and status not in ORDER_STATUSES:
        return jsonify({"error": f"Unknown status: {status}"}), 400
    if fulfillment_type and fulfillment_type not in FULFILLMENT_TYPES:
        return jsonify({"error": f"Unknown fulfillment_type: {fulfillment_type}"}), 400

    orders = order_service.list_orders(g.store, status=status, fulfillment_type=fulfillment_type)
    return jsonify({"orders": [o.to_dict() for o in orders], "count": len(orders)})


@orders_bp.get("/orders/<order_id>")
@require_auth
def get_order_route(order_id: str):
    try:
        order = order_service.get_order(g.store, order_id)
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    return jsonify({"order": order.to_dict()})


@orders_bp.get("/deliveries")
@require_auth
def list_deliveries_route():
    """Delivery orders that are ready or on their way, ready ones first."""
    orders = order_service.list_active_deliveries(g.store)
    return jsonify({"orders": [o.to_dict() for o in orders], "count": len(orders)})


@orders_bp.post("/orders")
@require_auth
def create_order_route():
    payload = request.get_json(silent=True) or {}
    try:
        draft = parse_order_draft(payload)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    try:
        order = order_service.create_order(g.store, draft)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to create order")
        return jsonify({"error": "Internal server error"}), 500

    if order is None:
        return jsonify({"success": False, "error": "None of the items match a product in the catalog"}), 422
    return jsonify({"success": True, "order": order.to_dict()}), 201


@orders_bp.put("/orders/<order_id>")
@require_auth
def update_order_route(order_id: str):
    payload = request.get_json(silent=True) or {}
    try:
        draft = parse_order_draft(payload)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    try:
        order = order_service.update_order(g.store, order_id, draft)
    except NotFoundError as e:
        return jsonify({"success": False, "error": str(e)}), 404
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to update order")
        return jsonify({"error": "Internal server error"}), 500

    if order is None:
        return jsonify({"success": False, "error": "None of the items match a product in the catalog"}), 422
    return jsonify({"success": True, "order": order.to_dict()})


def _transition(order_id: str, action):
    existing = g.store.find(ORDERS, order_id)
    if existing is None:
        return jsonify({"success": False, "error": "Order not found"}), 404

    try:
        order = action(g.store, order_id)
    except Exception:
        current_app.logger.exception("Failed to change order status")
        return jsonify({"error": "Internal server error"}), 500

    if order is None:
        return jsonify({
            "success": False,
            "error": f"Order is already {existing.status}",
            "order": existing.to_dict(),
        }), 409
    return jsonify({"success": True, "order": order.to_dict()})


@orders_bp.post("/orders/<order_id>/advance")
@require_auth
def advance_order_route(order_id: str):
    """Move the order to its next status (ready -> delivered for pickup orders)."""
    return _transition(order_id, order_service.advance_order)


@orders_bp.post("/orders/<order_id>/cancel")
@require_auth
def cancel_order_route(order_id: str):
    return _transition(order_id, order_service.cancel_order)


@orders_bp.delete("/orders")
@require_auth
def delete_all_orders_route():
    """Administrators only: remove every order."""
    try:
        removed = order_service.delete_all_orders(g.store, g.current_user)
    except PermissionDeniedError as e:
        return jsonify({"success": False, "error": "Permission denied", "message": str(e)}), 403
    except Exception:
        current_app.logger.exception("Failed to delete orders")
        return jsonify({"error": "Internal server error"}), 500
    return jsonify({"success": True, "removed": removed})
