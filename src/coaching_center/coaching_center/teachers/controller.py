from __future__ import annotations

from flask import Flask, request

from ..common.auth import admin_required, current_profile_id, roles_required
from ..common.responses import ok
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthorizationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/teachers", methods=["GET"], endpoint="api_list_teachers")
    @roles_required(Role.ADMIN, Role.STAFF)
    def list_teachers():
        return ok([t.to_dict() for t in container.teacher_service.list_teachers()])

    @app.route("/api/teachers", methods=["POST"], endpoint="api_create_teacher")
    @admin_required
    def create_teacher():
        teacher = container.teacher_service.create_teacher(request.get_json(silent=True) or {})
        return ok(teacher.to_dict(), 201)

    @app.route("/api/teachers/<int:teacher_id>", methods=["GET"], endpoint="api_get_teacher")
    @roles_required(Role.ADMIN, Role.STAFF, Role.TEACHER)
    def get_teacher(teacher_id: int):
        return ok(container.teacher_service.get_teacher(teacher_id).to_dict())

    @app.route("/api/teachers/me/batches", methods=["GET"], endpoint="api_my_batches")
    @roles_required(Role.TEACHER)
    def my_batches():
        teacher_id = current_profile_id()
        if teacher_id is None:
            raise AuthorizationError("No teacher profile is linked to this account")
        teacher = container.teacher_service.get_teacher(teacher_id)
        batches = container.batch_service.list_batches(teacher_id=teacher.teacher_id)
        return ok([b.to_dict() for b in batches])
