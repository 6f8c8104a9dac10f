from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import json_errors, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.notification_service

    @app.route("/api/notifications", methods=["GET"], endpoint="notifications")
    @login_required
    @json_errors
    def notifications():
        items = service.list_recent()
        return jsonify(
            {
                "success": True,
                "unread": service.unread_count(),
                "notifications": [n.to_dict() for n in items],
            }
        )

    @app.route("/api/notifications/<int:notification_id>/read", methods=["POST"], endpoint="notification_read")
    @login_required
    @json_errors
    def notification_read(notification_id: int):
        service.mark_read(notification_id)
        return jsonify({"success": True})

    @app.route("/api/notifications/read-all", methods=["POST"], endpoint="notifications_read_all")
    @login_required
    @json_errors
    def notifications_read_all():
        return jsonify({"success": True, "updated": service.mark_all_read()})
