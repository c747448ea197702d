from __future__ import annotations

import logging
from datetime import datetime

from flask import Flask, g, jsonify, request

from ..core.enums import ScanAction
from ..core.exceptions import AuthorizationError, DomainError, NoActiveQuarterError, NotFoundError, ValidationError
from ..users.model import AdminUser, StaffUser, TeacherUser
from ..container import Container

logger = logging.getLogger(__name__)


def _parse_time(value: str):
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(value.strip(), fmt).time()
        except ValueError:
            continue
    raise ValidationError("school_start_time must be HH:MM or HH:MM:SS")


def register(app: Flask, container: Container) -> None:
    roles_required = container.roles_required

    @app.route("/api/attendance/scan", methods=["POST"], endpoint="api_attendance_scan")
    @roles_required(AdminUser, TeacherUser, StaffUser)
    def api_attendance_scan():
        data = request.get_json(silent=True) or {}
        qr_token = data.get("qr_token")
        if not isinstance(qr_token, str) or not qr_token.strip():
            return jsonify({"success": False, "error": "QR token is required"}), 400

        try:
            result = container.attendance_service.scan(qr_token.strip())
        except DomainError as e:
            return jsonify({"success": False, "error": str(e)}), 400
        except Exception:
            logger.exception("Scan failed")
            return jsonify({"success": False, "error": "Failed to process attendance scan"}), 500

        verb = "Time-in" if result.action is ScanAction.TIME_IN else "Time-out"
        return jsonify(
            {
                "success": True,
                "data": result.to_dict(),
                "message": f"{verb} recorded for {result.student.full_name}",
            }
        ), 200

    @app.route("/api/attendance/student/<int:student_id>/today", methods=["GET"], endpoint="api_attendance_today")
    @roles_required(AdminUser, TeacherUser, StaffUser)
    def api_attendance_today(student_id: int):
        try:
            record = container.attendance_service.get_today_record(student_id)
        except NotFoundError as e:
            return jsonify({"success": False, "error": str(e)}), 404
        except Exception:
            logger.exception("Could not load today's attendance for student %s", student_id)
            return jsonify({"success": False, "error": "Failed to load attendance"}), 500

        return jsonify({"success": True, "data": record.to_dict() if record else None}), 200

    @app.route("/api/admin/students/<int:student_id>/qr-payload", methods=["GET"], endpoint="api_admin_qr_payload")
    @roles_required(AdminUser)
    def api_admin_qr_payload(student_id: int):
        try:
            payload = container.attendance_service.generate_printable_code_for_student(student_id)
        except NotFoundError as e:
            return jsonify({"success": False, "error": str(e)}), 404
        except Exception:
            logger.exception("Could not build QR payload for student %s", student_id)
            return jsonify({"success": False, "error": "Failed to generate QR payload"}), 500

        return jsonify({"success": True, "data": {"student_id": student_id, "qr_payload": payload}}), 200

    @app.route(
        "/api/admin/quarters/current/school-start-time",
        methods=["PUT"],
        endpoint="api_admin_school_start_time",
    )
    @roles_required(AdminUser)
    def api_admin_school_start_time():
        data = request.get_json(silent=True) or {}
        raw = data.get("school_start_time")
        try:
            if not isinstance(raw, str):
                raise ValidationError("school_start_time is required")
            quarter = container.quarter_service.update_school_start_time(g.caller, _parse_time(raw))
        except AuthorizationError as e:
            return jsonify({"success": False, "error": str(e)}), 403
        except NoActiveQuarterError as e:
            return jsonify({"success": False, "error": str(e)}), 404
        except ValidationError as e:
            return jsonify({"success": False, "error": str(e)}), 400
        except Exception:
            logger.exception("Could not update school start time")
            return jsonify({"success": False, "error": "Failed to update school start time"}), 500

        return jsonify({"success": True, "data": quarter.to_dict()}), 200

    @app.route("/api/admin/quarters/current", methods=["GET"], endpoint="api_admin_current_quarter")
    @roles_required(AdminUser)
    def api_admin_current_quarter():
        try:
            quarter = container.quarter_service.get_active()
        except NoActiveQuarterError as e:
            return jsonify({"success": False, "error": str(e)}), 404
        except Exception:
            logger.exception("Could not load the current quarter")
            return jsonify({"success": False, "error": "Failed to load current quarter"}), 500

        return jsonify({"success": True, "data": quarter.to_dict()}), 200

    @app.route("/api/health", methods=["GET"], endpoint="api_health")
    def api_health():
        db_ok = container.conn.ping()
        body = {
            "status": "ok" if db_ok else "degraded",
            "database": "connected" if db_ok else "unreachable",
            "sms": container.sms_pipeline.status(),
        }
        return jsonify(body), 200 if db_ok else 503
