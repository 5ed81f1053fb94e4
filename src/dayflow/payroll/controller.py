from __future__ import annotations

from flask import Flask, request

from ..common.web import current_role, current_user_id, json_body, login_required, ok, optional_int, roles_required
from ..container import Container
from ..core.enums import Role
from .service import COMPONENT_FIELDS


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service

    @app.route("/api/payroll", methods=["GET"], endpoint="list_payroll")
    @login_required
    def list_payroll():
        args = request.args
        if current_role().is_privileged:
            employee_id = optional_int(args.get("employee_id"), "employee_id")
        else:
            employee_id = current_user_id()
        result = service.list_records(
            employee_id=employee_id,
            month=optional_int(args.get("month"), "month"),
            year=optional_int(args.get("year"), "year"),
            page=optional_int(args.get("page"), "page"),
            limit=optional_int(args.get("limit"), "limit"),
        )
        return ok(result)

    @app.route("/api/payroll", methods=["POST"], endpoint="create_payroll")
    @roles_required(Role.ADMIN)
    def create_payroll():
        body = json_body()
        created = service.create_record(
            employee_id=optional_int(body.get("employee_id"), "employee_id"),
            month=body.get("month"),
            year=body.get("year"),
            basic_salary=body.get("basic_salary"),
            **{name: body[name] for name in COMPONENT_FIELDS if name in body},
        )
        return ok(created, "Payroll record created", status=201)

    @app.route("/api/payroll/<int:payroll_id>/status", methods=["PATCH"], endpoint="update_payroll_status")
    @roles_required(Role.ADMIN)
    def update_payroll_status(payroll_id: int):
        updated = service.update_status(payroll_id, json_body().get("status", ""))
        return ok(updated, "Payroll status updated")
