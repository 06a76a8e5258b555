from __future__ import annotations

from flask import Flask, request

from ..common.auth import admin_required, current_user_id, login_required
from ..common.responses import ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/announcements", methods=["GET"], endpoint="api_list_announcements")
    @login_required
    def list_announcements():
        announcements = container.announcement_service.list_announcements(
            audience=request.args.get("audience") or None,
            status=request.args.get("status") or None,
        )
        return ok([a.to_dict() for a in announcements])

    @app.route("/api/announcements", methods=["POST"], endpoint="api_create_announcement")
    @admin_required
    def create_announcement():
        announcement = container.announcement_service.create_announcement(
            request.get_json(silent=True) or {},
            created_by=current_user_id(),
        )
        return ok(announcement.to_dict(), 201)

    @app.route("/api/announcements/<int:announcement_id>", methods=["GET"], endpoint="api_get_announcement")
    @login_required
    def get_announcement(announcement_id: int):
        return ok(container.announcement_service.get_announcement(announcement_id).to_dict())

    @app.route("/api/announcements/<int:announcement_id>", methods=["PUT"], endpoint="api_update_announcement")
    @admin_required
    def update_announcement(announcement_id: int):
        announcement = container.announcement_service.update_announcement(
            announcement_id, request.get_json(silent=True) or {}
        )
        return ok(announcement.to_dict())

    @app.route("/api/announcements/<int:announcement_id>", methods=["DELETE"], endpoint="api_delete_announcement")
    @admin_required
    def delete_announcement(announcement_id: int):
        container.announcement_service.delete_announcement(announcement_id)
        return ok({"announcement_id": announcement_id})
