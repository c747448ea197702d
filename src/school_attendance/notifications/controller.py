from __future__ import annotations

import logging

from flask import Flask, g, jsonify, request

from ..core.exceptions import DomainError, NotFoundError
from ..users.model import TeacherUser
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    roles_required = container.roles_required

    @app.route("/api/teacher/notifications", methods=["GET"], endpoint="api_teacher_notifications")
    @roles_required(TeacherUser)
    def api_teacher_notifications():
        limit = request.args.get("limit", type=int) or container.notification_limit
        try:
            items = container.notification_service.get_teacher_notifications(g.caller, limit)
        except Exception:
            logger.exception("Could not load notifications for teacher %s", g.caller.user_id)
            return jsonify({"success": False, "error": "Failed to load notifications"}), 500

        return jsonify({"success": True, "data": [n.to_dict() for n in items]}), 200

    @app.route(
        "/api/teacher/notifications/<int:notification_id>/read",
        methods=["PUT"],
        endpoint="api_teacher_notification_read",
    )
    @roles_required(TeacherUser)
    def api_teacher_notification_read(notification_id: int):
        try:
            container.notification_service.mark_notification_read(notification_id, g.caller)
        except NotFoundError as e:
            return jsonify({"success": False, "error": str(e)}), 404
        except Exception:
            logger.exception("Could not mark notification %s as read", notification_id)
            return jsonify({"success": False, "error": "Failed to update notification"}), 500

        return jsonify({"success": True, "message": "Notification marked as read"}), 200

    @app.route(
        "/api/teacher/notifications/absence-check",
        methods=["POST"],
        endpoint="api_teacher_absence_check",
    )
    @roles_required(TeacherUser)
    def api_teacher_absence_check():
        try:
            created = container.notification_service.check_consecutive_absences(g.caller)
        except DomainError as e:
            return jsonify({"success": False, "error": str(e)}), 400
        except Exception:
            logger.exception("Absence check failed for teacher %s", g.caller.user_id)
            return jsonify({"success": False, "error": "Failed to run absence check"}), 500

        return jsonify({"success": True, "data": [n.to_dict() for n in created]}), 200
