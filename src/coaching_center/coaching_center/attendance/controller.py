from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import admin_required, current_role, fail, json_body, json_errors, login_required
from ..container import Container
from .model import ledger_from_json, ledger_to_json


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_ledger")
    @admin_required
    @json_errors
    def attendance_ledger():
        return jsonify({"success": True, "attendance": ledger_to_json(service.get_ledger())})

    @app.route("/api/attendance", methods=["PUT"], endpoint="attendance_replace")
    @admin_required
    @json_errors
    def attendance_replace():
        ledger = ledger_from_json(json_body().get("attendance") or {})
        service.set_ledger(current_role=current_role(), ledger=ledger)
        return jsonify({"success": True, "dates": len(ledger)})

    @app.route("/api/attendance", methods=["DELETE"], endpoint="attendance_clear")
    @admin_required
    @json_errors
    def attendance_clear():
        removed = service.clear_ledger(current_role=current_role())
        return jsonify({"success": True, "removed": removed})

    @app.route("/api/attendance/<day>", methods=["GET"], endpoint="attendance_day")
    @login_required
    @json_errors
    def attendance_day(day: str):
        work_date = parse_iso_date(day)
        grade = request.args.get("grade") or None
        marks = service.get_day(work_date)
        stats = service.get_day_stats(work_date, grade=grade)
        return jsonify(
            {
                "success": True,
                "date": work_date.isoformat(),
                "attendance": {str(sid): status.value for sid, status in marks.items()},
                "stats": stats.to_dict(),
            }
        )

    @app.route("/api/attendance/<day>/mark", methods=["POST"], endpoint="attendance_mark")
    @admin_required
    @json_errors
    def attendance_mark(day: str):
        data = json_body()
        try:
            student_id = int(data.get("student_id"))
        except (TypeError, ValueError):
            return fail("student_id is required", 400)

        service.mark_one(
            current_role=current_role(),
            work_date=parse_iso_date(day),
            student_id=student_id,
            status=data.get("status", ""),
        )
        return jsonify({"success": True, "message": f"Attendance marked as {data.get('status')}"})

    @app.route("/api/attendance/<day>/mark-all", methods=["POST"], endpoint="attendance_mark_all")
    @admin_required
    @json_errors
    def attendance_mark_all(day: str):
        data = json_body()
        count = service.mark_all(
            current_role=current_role(),
            work_date=parse_iso_date(day),
            status=data.get("status", ""),
            grade=data.get("grade") or None,
        )
        return jsonify({"success": True, "count": count})

    @app.route("/api/students/<int:student_id>/attendance", methods=["GET"], endpoint="student_attendance")
    @login_required
    @json_errors
    def student_attendance(student_id: int):
        start_s = request.args.get("start")
        end_s = request.args.get("end")
        entries = service.get_student_history(
            student_id,
            start_date=parse_iso_date(start_s) if start_s else None,
            end_date=parse_iso_date(end_s) if end_s else None,
        )
        return jsonify(
            {
                "success": True,
                "student_id": student_id,
                "attendance": [{"date": e.work_date.isoformat(), "status": e.status.value} for e in entries],
            }
        )
