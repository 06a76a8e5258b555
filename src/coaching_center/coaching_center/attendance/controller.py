from __future__ import annotations

from flask import Flask, request

from ..common.auth import current_profile_id, current_role, current_user_id, login_required, roles_required
from ..common.responses import ok
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError


def register(app: Flask, container: Container) -> None:
    markers = (Role.ADMIN, Role.TEACHER)

    @app.route("/api/batches/<int:batch_id>/attendance", methods=["POST"], endpoint="api_submit_attendance")
    @roles_required(*markers)
    def submit_attendance(batch_id: int):
        payload = request.get_json(silent=True) or {}
        records = payload.get("records")
        if records is not None and not isinstance(records, list):
            raise ValidationError("records must be a list")

        result = container.attendance_service.submit_batch_attendance(
            batch_id,
            payload.get("date"),
            records or [],
            marked_by=current_user_id(),
        )
        return ok(result.to_dict())

    @app.route("/api/batches/<int:batch_id>/attendance", methods=["GET"], endpoint="api_batch_attendance")
    @roles_required(*markers)
    def batch_attendance(batch_id: int):
        records = container.attendance_service.get_batch_attendance(batch_id, request.args.get("date"))
        return ok([r.to_dict() for r in records])

    @app.route("/api/batches/<int:batch_id>/attendance/sheet", methods=["GET"], endpoint="api_attendance_sheet")
    @roles_required(*markers)
    def attendance_sheet(batch_id: int):
        rows = container.attendance_service.get_attendance_sheet(batch_id, request.args.get("date"))
        return ok([r.to_dict() for r in rows])

    @app.route("/api/batches/<int:batch_id>/attendance/history", methods=["GET"], endpoint="api_attendance_history")
    @roles_required(*markers)
    def attendance_history(batch_id: int):
        days = container.attendance_service.get_batch_history(
            batch_id, request.args.get("start"), request.args.get("end")
        )
        return ok([d.to_dict() for d in days])

    @app.route(
        "/api/students/<int:student_id>/batches/<int:batch_id>/attendance",
        methods=["GET"],
        endpoint="api_student_attendance",
    )
    @login_required
    def student_attendance(student_id: int, batch_id: int):
        # Students only see their own numbers.
        if current_role() == Role.STUDENT and current_profile_id() != student_id:
            raise AuthorizationError("You can only view your own attendance")

        report = container.attendance_service.get_student_attendance(
            student_id,
            batch_id,
            start=request.args.get("start"),
            end=request.args.get("end"),
        )
        return ok(report.to_dict())
