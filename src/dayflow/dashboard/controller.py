from __future__ import annotations

from flask import Flask

from ..common.web import current_role, current_user_id, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.dashboard_service

    @app.route("/api/dashboard/stats", methods=["GET"], endpoint="dashboard_stats")
    @login_required
    def stats():
        if current_role().is_privileged:
            return ok(service.admin_stats())
        return ok(service.employee_stats(current_user_id()))
