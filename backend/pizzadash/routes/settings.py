# Overview: Flask API routes for pizza size defaults; parses input and returns JSON responses.

# backend/pizzadash/routes/settings.py
"""
Pizza settings routes.

The base prices and size availability only seed newly created pizzas;
existing products keep their own prices.
"""
from flask import Blueprint, request, jsonify, g

from ..decorators import require_auth, require_administrator
from ..services import settings_service
from ..services.permission_service import PermissionDeniedError
from ..validation import (
    SETTINGS_POLICY,
    ValidationError,
    enforce_rules_settings,
    validate_payload,
)

settings_bp = Blueprint("settings", __name__, url_prefix="/api/settings")


@settings_bp.get("")
@require_auth
def get_settings_route():
    settings = settings_service.get_settings(g.store)
    return jsonify({
        "settings": settings.to_dict(),
        "available_sizes": settings.available_sizes(),
    })


@settings_bp.put("")
@require_auth
@require_administrator
def update_settings_route():
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(payload=payload, policy=SETTINGS_POLICY, partial=False)
        patch = enforce_rules_settings(patch)
        settings = settings_service.update_settings(g.store, patch, g.current_user)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except PermissionDeniedError as e:
        return jsonify({"error": "Permission denied", "message": str(e)}), 403
    return jsonify({"settings": settings.to_dict()})
