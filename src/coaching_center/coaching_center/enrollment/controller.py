from __future__ import annotations

from flask import Flask

from ..common.auth import admin_required, roles_required
from ..common.responses import ok
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route(
        "/api/batches/<int:batch_id>/students/<int:student_id>",
        methods=["POST"],
        endpoint="api_enroll_student",
    )
    @admin_required
    def enroll(batch_id: int, student_id: int):
        result = container.enrollment_service.enroll(student_id, batch_id)
        return ok(result.to_dict(), 200 if result.repaired else 201)

    @app.route(
        "/api/batches/<int:batch_id>/students/<int:student_id>",
        methods=["DELETE"],
        endpoint="api_unenroll_student",
    )
    @admin_required
    def unenroll(batch_id: int, student_id: int):
        return ok(container.enrollment_service.unenroll(student_id, batch_id).to_dict())

    @app.route("/api/batches/<int:batch_id>/students", methods=["GET"], endpoint="api_batch_roster")
    @roles_required(Role.ADMIN, Role.TEACHER, Role.STAFF)
    def roster(batch_id: int):
        return ok([s.to_dict() for s in container.enrollment_service.list_roster(batch_id)])

    @app.route("/api/students/<int:student_id>/batches", methods=["GET"], endpoint="api_student_batches")
    @roles_required(Role.ADMIN, Role.TEACHER, Role.STAFF)
    def student_batches(student_id: int):
        return ok([b.to_dict() for b in container.enrollment_service.list_student_batches(student_id)])

    @app.route("/api/enrollments/reconcile", methods=["POST"], endpoint="api_reconcile_enrollments")
    @admin_required
    def reconcile():
        return ok(container.enrollment_service.reconcile().to_dict())
