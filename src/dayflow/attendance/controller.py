from __future__ import annotations

from flask import Flask, request

from ..common.web import current_user_id, json_body, login_required, ok, optional_date, optional_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="check_in")
    @login_required
    def check_in():
        record = service.check_in(current_user_id(), location=json_body().get("location"))
        return ok(record, "Checked in successfully")

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="check_out")
    @login_required
    def check_out():
        record = service.check_out(current_user_id(), location=json_body().get("location"))
        return ok(record, "Checked out successfully")

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def today():
        return ok(service.get_today(current_user_id()))

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @login_required
    def history():
        args = request.args
        result = service.get_history(
            current_user_id(),
            page=optional_int(args.get("page"), "page"),
            limit=optional_int(args.get("limit"), "limit"),
            start_date=optional_date(args.get("start_date"), "start_date"),
            end_date=optional_date(args.get("end_date"), "end_date"),
        )
        return ok(result)

    @app.route("/api/attendance/weekly", methods=["GET"], endpoint="attendance_weekly")
    @login_required
    def weekly():
        return ok(service.get_weekly(current_user_id()))
