from __future__ import annotations

from flask import Flask, request

from ..common.auth import admin_required, roles_required
from ..common.responses import ok
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    staff_roles = (Role.ADMIN, Role.TEACHER, Role.STAFF)

    @app.route("/api/students", methods=["GET"], endpoint="api_list_students")
    @roles_required(*staff_roles)
    def list_students():
        return ok([s.to_dict() for s in container.student_service.list_students()])

    @app.route("/api/students", methods=["POST"], endpoint="api_create_student")
    @admin_required
    def create_student():
        student = container.student_service.create_student(request.get_json(silent=True) or {})
        return ok(student.to_dict(), 201)

    @app.route("/api/students/<int:student_id>", methods=["GET"], endpoint="api_get_student")
    @roles_required(*staff_roles)
    def get_student(student_id: int):
        return ok(container.student_service.get_student(student_id).to_dict())

    @app.route("/api/students/<int:student_id>", methods=["PUT"], endpoint="api_update_student")
    @admin_required
    def update_student(student_id: int):
        student = container.student_service.update_student(student_id, request.get_json(silent=True) or {})
        return ok(student.to_dict())

    @app.route("/api/students/<int:student_id>/status", methods=["PUT"], endpoint="api_set_student_status")
    @admin_required
    def set_student_status(student_id: int):
        payload = request.get_json(silent=True) or {}
        student = container.student_service.set_status(student_id, payload.get("status"))
        return ok(student.to_dict())

    @app.route("/api/students/<int:student_id>", methods=["DELETE"], endpoint="api_delete_student")
    @admin_required
    def delete_student(student_id: int):
        deletion = container.student_service.delete_student(student_id)
        return ok(
            {
                "student_id": deletion.student_id,
                "rosters_left": list(deletion.rosters_left),
                "attendance_deleted": deletion.attendance_deleted,
            }
        )
