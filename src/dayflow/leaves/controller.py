from __future__ import annotations

from flask import Flask, request

from ..common.web import (
    current_role,
    current_user_id,
    json_body,
    login_required,
    ok,
    optional_int,
    required_date,
    roles_required,
)
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.route("/api/leaves", methods=["POST"], endpoint="create_leave")
    @login_required
    def create_leave():
        body = json_body()
        created = service.create_request(
            current_user_id(),
            leave_type=body.get("type", ""),
            start_date=required_date(body.get("start_date"), "start_date"),
            end_date=required_date(body.get("end_date"), "end_date"),
            reason=body.get("reason", ""),
        )
        return ok(created, "Leave request submitted successfully", status=201)

    @app.route("/api/leaves", methods=["GET"], endpoint="list_leaves")
    @login_required
    def list_leaves():
        # Admin and HR see every employee's requests, everyone else only their own.
        employee_id = None if current_role().is_privileged else current_user_id()
        args = request.args
        result = service.list_requests(
            employee_id=employee_id,
            status=args.get("status") or None,
            page=optional_int(args.get("page"), "page"),
            limit=optional_int(args.get("limit"), "limit"),
        )
        return ok(result)

    @app.route("/api/leaves/<int:request_id>/status", methods=["PATCH"], endpoint="decide_leave")
    @roles_required(Role.ADMIN)
    def decide_leave(request_id: int):
        body = json_body()
        decided = service.decide(
            request_id,
            reviewer_id=current_user_id(),
            decision=body.get("status", ""),
            comment=body.get("admin_comment"),
        )
        return ok(decided, f"Leave request {decided['status']} successfully")
