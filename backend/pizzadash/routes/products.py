# Overview: Flask API routes for products operations; parses input and returns JSON responses.

# backend/pizzadash/routes/products.py
"""
Product catalog routes.

SECURITY: All routes require authentication.
- Read operations are open to every role
- Write operations require the administrator role
"""
from flask import Blueprint, request, g

from ..decorators import require_auth, require_administrator
from ..models.records import PRODUCT_CATEGORIES
from ..services import products_service
from ..validation import (
    PRODUCT_POLICY,
    NotFoundError,
    ValidationError,
    enforce_rules_product,
    validate_payload,
)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
@require_auth
def list_products():
    """
    List catalog entries grouped by category, then name.

    Query params:
    - category: pizza | drink | addon (optional)
    - available: "true" to hide unavailable products (optional)
    """
    category = request.args.get("category")
    if category and category not in PRODUCT_CATEGORIES:
        return {"error": f"Unknown category: {category}"}, 400
    available_only = request.args.get("available", "false").lower() == "true"

    products = products_service.list_products(g.store, category=category, available_only=available_only)
    return {"products": [p.to_dict() for p in products], "count": len(products)}


@products_bp.post("")
@require_auth
@require_administrator
def create_product_route():
    """Create a product. Pizzas without sizes take the configured base prices."""
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(payload=payload, policy=PRODUCT_POLICY, partial=False)
        enforce_rules_product(patch)
        created = products_service.create_product(g.store, patch)
    except ValidationError as e:
        return {"error": str(e)}, 400

    return {"product": created.to_dict()}, 201


@products_bp.put("/<product_id>")
@require_auth
@require_administrator
def update_product_route(product_id: str):
    """Replace a product's details; the category decides which price fields apply."""
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(payload=payload, policy=PRODUCT_POLICY, partial=False)
        enforce_rules_product(patch)
        updated = products_service.update_product(g.store, product_id, patch)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except NotFoundError as e:
        return {"error": str(e)}, 404

    return {"product": updated.to_dict()}


@products_bp.post("/<product_id>/availability")
@require_auth
@require_administrator
def set_availability_route(product_id: str):
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload.get("is_available"), bool):
        return {"error": "is_available must be true or false"}, 400

    try:
        updated = products_service.set_availability(g.store, product_id, payload["is_available"])
    except NotFoundError as e:
        return {"error": str(e)}, 404
    return {"product": updated.to_dict()}


@products_bp.delete("/<product_id>")
@require_auth
@require_administrator
def delete_product_route(product_id: str):
    """
    Delete a product.

    Orders already placed keep the product's name and price as resolved at
    checkout.
    """
    try:
        products_service.delete_product(g.store, product_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    return {"success": True}
