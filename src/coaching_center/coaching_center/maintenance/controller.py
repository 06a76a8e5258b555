from __future__ import annotations

from flask import Flask

from ..common.auth import admin_required
from ..common.responses import ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/maintenance/sweep", methods=["POST"], endpoint="api_run_sweep")
    @admin_required
    def run_sweep():
        return ok(container.maintenance_worker.run_once().to_dict())
