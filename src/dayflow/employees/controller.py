from __future__ import annotations

from datetime import timedelta

from flask import Flask, request, session

from ..common.web import current_user_id, json_body, login_required, ok, optional_int, roles_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        body = json_body()
        s_user = container.auth_service.authenticate(body.get("email", ""), body.get("password", ""))

        session.clear()
        session.permanent = bool(body.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=7)

        session["user_id"] = s_user.user_id
        session["name"] = s_user.display_name
        session["role"] = s_user.role.value

        return ok(
            {"id": s_user.user_id, "name": s_user.display_name, "email": s_user.email, "role": s_user.role.value},
            "Logged in successfully",
        )

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok(message="Logged out")

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return ok(container.employee_service.profile(current_user_id()))

    service = container.employee_service

    @app.route("/api/employees/profile", methods=["GET"], endpoint="own_profile")
    @login_required
    def own_profile():
        return ok(service.profile(current_user_id()))

    @app.route("/api/employees/profile", methods=["PUT"], endpoint="update_own_profile")
    @login_required
    def update_own_profile():
        updated = service.update_profile(current_user_id(), json_body())
        session["name"] = updated["name"]
        return ok(updated, "Profile updated")

    @app.route("/api/employees", methods=["GET"], endpoint="list_employees")
    @roles_required(Role.ADMIN, Role.HR)
    def list_employees():
        args = request.args
        result = service.list_employees(
            page=optional_int(args.get("page"), "page"),
            limit=optional_int(args.get("limit"), "limit"),
            search=args.get("search"),
        )
        return ok(result)

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="get_employee")
    @roles_required(Role.ADMIN, Role.HR)
    def get_employee(employee_id: int):
        return ok(service.get_employee(employee_id))

    @app.route("/api/employees/<int:employee_id>/status", methods=["PATCH"], endpoint="update_employee_status")
    @roles_required(Role.ADMIN)
    def update_employee_status(employee_id: int):
        updated = service.update_status(employee_id, json_body().get("status"), actor_id=current_user_id())
        return ok(updated, "Employee status updated successfully")
