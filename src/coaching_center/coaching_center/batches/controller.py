from __future__ import annotations

from flask import Flask, request

from ..attendance.stats import batch_student_breakdown
from ..common.auth import admin_required, login_required, roles_required
from ..common.responses import ok
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/batches", methods=["GET"], endpoint="api_list_batches")
    @login_required
    def list_batches():
        subject_ids = [s.strip() for raw in request.args.getlist("subjects") for s in raw.split(",") if s.strip()]
        batches = container.batch_service.list_batches(
            status=request.args.get("status") or None,
            subject_ids=subject_ids or None,
            standard_id=request.args.get("standard") or None,
            teacher_id=request.args.get("teacher") or None,
        )
        return ok([b.to_dict() for b in batches])

    @app.route("/api/batches", methods=["POST"], endpoint="api_create_batch")
    @admin_required
    def create_batch():
        batch = container.batch_service.create_batch(request.get_json(silent=True) or {})
        return ok(batch.to_dict(), 201)

    @app.route("/api/batches/<int:batch_id>", methods=["GET"], endpoint="api_get_batch")
    @login_required
    def get_batch(batch_id: int):
        return ok(container.batch_service.get_batch(batch_id).to_dict())

    @app.route("/api/batches/<int:batch_id>", methods=["PUT"], endpoint="api_update_batch")
    @admin_required
    def update_batch(batch_id: int):
        batch = container.batch_service.update_batch(batch_id, request.get_json(silent=True) or {})
        return ok(batch.to_dict())

    @app.route("/api/batches/<int:batch_id>", methods=["DELETE"], endpoint="api_delete_batch")
    @admin_required
    def delete_batch(batch_id: int):
        container.batch_service.delete_batch(batch_id)
        return ok({"batch_id": batch_id})

    @app.route("/api/batches/refresh-status", methods=["POST"], endpoint="api_refresh_batch_status")
    @admin_required
    def refresh_batch_status():
        return ok({"changed": container.batch_service.refresh_statuses()})

    @app.route("/api/batches/<int:batch_id>/report", methods=["GET"], endpoint="api_batch_report")
    @roles_required(Role.ADMIN, Role.TEACHER)
    def batch_report(batch_id: int):
        start = request.args.get("start")
        end = request.args.get("end")
        history = container.attendance_service.get_batch_history(batch_id, start, end)
        records = [r for day in history for r in day.records]
        return ok(
            {
                "batch_id": batch_id,
                "days": [day.stats.to_dict() for day in history],
                "students": [s.to_dict() for s in batch_student_breakdown(batch_id, records)],
            }
        )
