# Overview: Flask API routes for customers operations; parses input and returns JSON responses.

from flask import Blueprint, request, g

from ..decorators import require_auth, require_administrator
from ..services import customer_service
from ..services.entity_store import CUSTOMERS
from ..validation import (
    CUSTOMER_POLICY,
    NotFoundError,
    ValidationError,
    enforce_rules_customer,
    validate_payload,
)

customers_bp = Blueprint("customers", __name__, url_prefix="/api/customers")


@customers_bp.get("")
@require_auth
def list_customers_route():
    customers = customer_service.list_customers(g.store)
    return {"customers": [c.to_dict() for c in customers], "count": len(customers)}


@customers_bp.post("")
@require_auth
def upsert_customer_route():
    """
    Add a customer or edit an existing one.

    The record is matched by id, then phone, then name. Spend, order count
    and last-order date only change through checkouts and cannot be set here.
    """
    payload = request.get_json(silent=True) or {}
    partial = bool(payload.get("id"))

    try:
        patch = validate_payload(payload=payload, policy=CUSTOMER_POLICY, partial=partial)
        enforce_rules_customer(patch)
    except ValidationError as e:
        return {"error": str(e)}, 400

    if partial and g.store.find(CUSTOMERS, patch["id"]) is None:
        return {"error": "Customer not found"}, 404

    try:
        customer = customer_service.upsert(g.store, patch)
    except ValueError as e:
        return {"error": str(e)}, 400
    return {"customer": customer.to_dict()}, 200 if partial else 201


@customers_bp.delete("/<customer_id>")
@require_auth
@require_administrator
def delete_customer_route(customer_id: str):
    """Removes the customer record only; existing orders are untouched."""
    try:
        customer_service.delete_customer(g.store, customer_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    return {"success": True}
