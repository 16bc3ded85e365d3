# Overview: Flask API route relaying free-text questions to the dashboard assistant.

from flask import Blueprint, request, jsonify, g, current_app

from ..decorators import require_auth
from ..services import assistant_service

assistant_bp = Blueprint("assistant", __name__, url_prefix="/api/assistant")

ASSISTANT_EXTENSION_KEY = "pizzadash.assistant"
MAX_COMMAND_LENGTH = 2000


@assistant_bp.post("")
@require_auth
def ask_route():
    """
    Ask the assistant about the current orders and customers.

    The reply is always 200 with a text answer; a missing API key or an
    upstream failure produces a fixed explanatory reply instead of an error.
    """
    payload = request.get_json(silent=True) or {}
    command = payload.get("command")
    if not isinstance(command, str) or not command.strip():
        return jsonify({"error": "command is required"}), 400
    if len(command) > MAX_COMMAND_LENGTH:
        return jsonify({"error": f"command cannot exceed {MAX_COMMAND_LENGTH} characters"}), 400

    client = current_app.extensions.get(ASSISTANT_EXTENSION_KEY)
    reply = assistant_service.ask(client, g.store, command.strip(), g.current_user.role)
    return jsonify({"reply": reply, "enabled": client is not None})
