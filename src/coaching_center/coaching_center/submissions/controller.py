from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import (
    admin_required,
    current_role,
    current_user_id,
    current_user_name,
    json_body,
    json_errors,
    teacher_required,
)
from ..container import Container
from ..core.enums import ApprovalStatus
from ..core.exceptions import NotFoundError, ValidationError


def _decision_response(changed: bool, *, verb: str):
    if not changed:
        return jsonify({"success": False, "message": f"Nothing to {verb}"})
    return jsonify({"success": True, "message": f"Attendance {verb}d"})


def register(app: Flask, container: Container) -> None:
    submissions = container.submission_service
    approvals = container.approval_service

    @app.route("/api/attendance/submissions", methods=["POST"], endpoint="submit_attendance")
    @teacher_required
    @json_errors
    def submit_attendance():
        data = json_body()
        statuses = data.get("statuses")
        if not isinstance(statuses, dict):
            raise ValidationError("statuses must map student ids to a status")

        created = submissions.submit_for_approval(
            current_role=current_role(),
            work_date=parse_iso_date(data.get("date") or ""),
            statuses=statuses,
            teacher_id=current_user_id(),
            teacher_name=current_user_name(),
        )
        return (
            jsonify(
                {
                    "success": True,
                    "count": len(created),
                    "submissions": [s.to_dict() for s in created],
                }
            ),
            201 if created else 200,
        )

    @app.route("/api/attendance/submissions/mine", methods=["GET"], endpoint="my_submissions")
    @teacher_required
    @json_errors
    def my_submissions():
        rows = submissions.list_for_teacher(current_user_id())
        return jsonify({"success": True, "submissions": [s.to_dict() for s in rows]})

    @app.route("/api/admin/attendance/batches", methods=["GET"], endpoint="pending_batches")
    @admin_required
    @json_errors
    def pending_batches():
        batches = submissions.get_pending_batches()
        return jsonify({"success": True, "batches": [b.to_dict() for b in batches]})

    @app.route("/api/admin/attendance/submissions", methods=["GET"], endpoint="submission_history")
    @admin_required
    @json_errors
    def submission_history():
        raw = request.args.get("status")
        try:
            status = ApprovalStatus(raw) if raw else None
        except ValueError:
            raise ValidationError(f"Invalid approval status: {raw!r}")
        rows = submissions.list_history(current_role=current_role(), status=status)
        return jsonify({"success": True, "submissions": [s.to_dict() for s in rows]})

    def _ids_from_body() -> list:
        ids = json_body().get("ids")
        if not isinstance(ids, list):
            raise ValidationError("ids must be a list of submission ids")
        return [str(i) for i in ids]

    @app.route("/api/admin/attendance/submissions/approve", methods=["POST"], endpoint="approve_submissions")
    @admin_required
    @json_errors
    def approve_submissions():
        changed = approvals.approve(current_role=current_role(), submission_ids=_ids_from_body(), admin_id=current_user_id())
        return _decision_response(changed, verb="approve")

    @app.route("/api/admin/attendance/submissions/reject", methods=["POST"], endpoint="reject_submissions")
    @admin_required
    @json_errors
    def reject_submissions():
        changed = approvals.reject(current_role=current_role(), submission_ids=_ids_from_body(), admin_id=current_user_id())
        return _decision_response(changed, verb="reject")

    def _pending_batch(batch_id: str):
        batch = submissions.get_batch(batch_id)
        if batch is None:
            raise NotFoundError("Batch not found or already processed")
        return batch

    @app.route("/api/admin/attendance/batches/<batch_id>/approve", methods=["POST"], endpoint="approve_batch")
    @admin_required
    @json_errors
    def approve_batch(batch_id: str):
        changed = approvals.approve_batch(
            current_role=current_role(),
            batch=_pending_batch(batch_id),
            admin_id=current_user_id(),
        )
        return _decision_response(changed, verb="approve")

    @app.route("/api/admin/attendance/batches/<batch_id>/reject", methods=["POST"], endpoint="reject_batch")
    @admin_required
    @json_errors
    def reject_batch(batch_id: str):
        changed = approvals.reject_batch(
            current_role=current_role(),
            batch=_pending_batch(batch_id),
            admin_id=current_user_id(),
        )
        return _decision_response(changed, verb="reject")
