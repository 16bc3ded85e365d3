# Overview: Flask API routes for account administration; parses input and returns JSON responses.

# backend/pizzadash/routes/users.py
"""
Account administration routes.

SECURITY: Every route requires the administrator role. The service layer
re-checks the role for status changes and deletions.
"""
from flask import Blueprint, request, jsonify, g, current_app

from ..decorators import require_auth, require_administrator
from ..services import auth_service
from ..services.permission_service import PermissionDeniedError
from ..validation import (
    USER_UPDATE_POLICY,
    ConflictError,
    NotFoundError,
    ValidationError,
    enforce_rules_user_update,
    validate_payload,
)

users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.get("")
@require_auth
@require_administrator
def list_users_route():
    """
    List accounts sorted by name.

    Query params:
    - status: approved | pending | rejected (optional)
    """
    status = request.args.get("status")
    users = auth_service.list_users(g.store)
    if status:
        users = [u for u in users if u.status == status]
    return jsonify({"users": [u.to_dict() for u in users], "count": len(users)})


@users_bp.patch("/<user_id>")
@require_auth
@require_administrator
def update_user_route(user_id: str):
    """
    Edit an account.

    A blank or missing password keeps the current one.
    """
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(payload=payload, policy=USER_UPDATE_POLICY, partial=True)
        enforce_rules_user_update(patch)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    password = patch.pop("password", None)
    try:
        user = auth_service.update_user(g.store, user_id, patch, password=password)
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except Exception:
        current_app.logger.exception("Failed to update user")
        return jsonify({"error": "Internal server error"}), 500
    return jsonify({"user": user.to_dict()})


@users_bp.post("/<user_id>/status")
@require_auth
@require_administrator
def set_user_status_route(user_id: str):
    """Approve, reject or re-queue an account."""
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(payload={"status": payload.get("status")}, policy=USER_UPDATE_POLICY, partial=True)
        enforce_rules_user_update(patch)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    if patch.get("status") is None:
        return jsonify({"error": "status is required"}), 400

    try:
        user = auth_service.set_user_status(g.store, user_id, patch["status"], g.current_user)
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except PermissionDeniedError as e:
        return jsonify({"error": "Permission denied", "message": str(e)}), 403
    return jsonify({"user": user.to_dict()})


@users_bp.delete("/<user_id>")
@require_auth
@require_administrator
def delete_user_route(user_id: str):
    try:
        auth_service.delete_user(g.store, user_id, g.current_user)
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except PermissionDeniedError as e:
        return jsonify({"error": "Permission denied", "message": str(e)}), 403
    return jsonify({"success": True})
