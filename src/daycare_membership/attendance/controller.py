from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import admin_required, login_required, require_owner_or_admin
from ..common.validators import require_non_empty
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _rfid_from_body() -> str:
        data = request.get_json(silent=True) or {}
        return require_non_empty(str(data.get("rfidNumber") or ""), "RFID number")

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @admin_required
    def attendance_list():
        records = container.attendance_service.list_attendance()
        return jsonify([r.to_dict() for r in records])

    @app.route("/api/attendance/member/<int:member_id>", methods=["GET"], endpoint="attendance_for_member")
    @login_required
    def attendance_for_member(member_id: int):
        require_owner_or_admin(member_id)
        records = container.attendance_service.list_member_attendance(member_id)
        return jsonify([r.to_dict() for r in records])

    @app.route("/api/attendance/current", methods=["GET"], endpoint="attendance_current")
    @admin_required
    def attendance_current():
        records = container.attendance_service.list_current_check_ins()
        return jsonify([r.to_dict() for r in records])

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    @admin_required
    def attendance_stats():
        return jsonify(container.attendance_service.get_stats().to_dict())

    @app.route("/api/attendance/checkin", methods=["POST"], endpoint="attendance_checkin")
    @admin_required
    def attendance_checkin():
        result = container.attendance_service.check_in(_rfid_from_body())
        return jsonify(result.to_dict()), 201

    @app.route("/api/attendance/checkout", methods=["PUT"], endpoint="attendance_checkout")
    @admin_required
    def attendance_checkout():
        result = container.attendance_service.check_out(_rfid_from_body())
        return jsonify(result.to_dict())
