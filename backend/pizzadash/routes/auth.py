# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

# backend/pizzadash/routes/auth.py
"""
Authentication API routes

- Self-registration with the approval workflow (first administrator auto-approved)
- Login with pending/rejected gating
- Single active session with token-based auth
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..extensions import get_store
from ..services import auth_service
from ..services.auth_service import (
    AccountPendingError,
    AccountRejectedError,
    InvalidCredentialsError,
)
from ..validation import (
    REGISTRATION_POLICY,
    ConflictError,
    ValidationError,
    enforce_rules_registration,
    validate_payload,
)
from ..decorators import require_auth


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/register")
def register_route():
    """
    Register a new account.

    The account is approved immediately only when it is an administrator and
    no approved administrator exists yet; otherwise it waits for approval.
    """
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(payload=payload, policy=REGISTRATION_POLICY, partial=False)
        enforce_rules_registration(patch)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    try:
        user = auth_service.register(
            get_store(),
            name=patch["name"],
            email=patch["email"],
            password=patch["password"],
            role=patch["role"],
        )
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except Exception:
        current_app.logger.exception("Failed to register user")
        return jsonify({"error": "Internal server error"}), 500

    if user.status == "approved":
        message = "Account created. You can log in now."
    else:
        message = "Account created. An administrator must approve it before you can log in."
    return jsonify({"user": user.to_dict(), "message": message}), 201


@auth_bp.post("/login")
def login_route():
    """
    Authenticate user and create session token.

    Returns user info and session token on success.
    Token must be included in Authorization header for protected routes.
    """
    try:
        data = request.get_json(silent=True) or {}
        email = data.get("email")
        password = data.get("password")

        if not all([email, password]):
            return jsonify({"error": "email and password required"}), 400

        user, token = auth_service.login(get_store(), email, password)

        return jsonify({
            "user": user.to_dict(),
            "token": token,
            "message": "Login successful"
        }), 200

    except InvalidCredentialsError as e:
        return jsonify({"error": str(e)}), 401
    except AccountPendingError as e:
        return jsonify({"error": str(e), "reason": "pending"}), 403
    except AccountRejectedError as e:
        return jsonify({"error": str(e), "reason": "rejected"}), 403
    except Exception:
        current_app.logger.exception("Failed to login user")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.post("/logout")
@require_auth
def logout_route():
    try:
        auth_service.logout(g.store)
        return jsonify({"message": "Logged out"}), 200
    except Exception:
        current_app.logger.exception("Failed to logout user")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.get("/me")
@require_auth
def me_route():
    return jsonify({"user": g.current_user.to_dict()}), 200
