# Overview: Request and role decorators for API routes.

from functools import wraps
from flask import request, jsonify, g, current_app

from .extensions import get_store
from .models.records import ROLE_ADMINISTRATOR
from .services import session_service


def _is_authenticated() -> bool:
    return hasattr(g, 'current_user')


def require_auth(f):
    """
    Require a valid bearer token for the active session.

    Sets the following Flask g attributes:
    - g.current_user: the authenticated UserProfile
    - g.store: the application's EntityStore

    Returns 401 if:
    - No Authorization header
    - Token does not match the active session
    - Session user was deleted or is no longer approved
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth_header = request.headers.get("Authorization")

        if not auth_header or not auth_header.startswith("Bearer "):
            return jsonify({"error": "Authentication required"}), 401

        token = auth_header.split(" ", 1)[1]
        store = get_store()
        user = session_service.validate_session(store, token)

        if not user:
            return jsonify({"error": "Invalid or expired token"}), 401

        g.current_user = user
        g.store = store

        return f(*args, **kwargs)

    return decorated_function


def require_role(role: str):
    """Require the authenticated user to hold `role`. Use after @require_auth."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not _is_authenticated():
                return jsonify({"error": "Authentication required"}), 401

            if g.current_user.role != role:
                current_app.logger.warning(
                    "Role %s required for %s %s; %s has %s",
                    role, request.method, request.path, g.current_user.email, g.current_user.role,
                )
                return jsonify({
                    "error": "Permission denied",
                    "required_role": role,
                }), 403

            return f(*args, **kwargs)

        return decorated_function
    return decorator


require_administrator = require_role(ROLE_ADMINISTRATOR)
