# Overview: Flask API routes for the notification feed of the signed-in role.

from flask import Blueprint, jsonify, g

from ..decorators import require_auth
from ..services import notification_service

notifications_bp = Blueprint("notifications", __name__, url_prefix="/api/notifications")


@notifications_bp.get("")
@require_auth
def list_notifications_route():
    role = g.current_user.role
    notifications = notification_service.list_for_role(g.store, role)
    return jsonify({
        "notifications": [n.to_dict() for n in notifications],
        "unread_count": notification_service.unread_count(g.store, role),
    })


@notifications_bp.post("/<notification_id>/read")
@require_auth
def mark_read_route(notification_id: str):
    notification = notification_service.mark_read(g.store, notification_id, g.current_user.role)
    if notification is None:
        return jsonify({"error": "Notification not found"}), 404
    return jsonify({"notification": notification.to_dict()})


@notifications_bp.post("/read-all")
@require_auth
def mark_all_read_route():
    changed = notification_service.mark_all_read(g.store, g.current_user.role)
    return jsonify({"success": True, "marked": changed})
