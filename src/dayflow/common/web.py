"""Flask helpers shared by the controllers: session guards, JSON envelope, error mapping."""

from __future__ import annotations

import logging
from datetime import date
from functools import wraps

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DomainError, StorageError, UnauthorizedError, ValidationError
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)


def ok(data=None, message: str | None = None, status: int = 200):
    body = {"success": True, "data": data}
    if message:
        body["message"] = message
    return jsonify(body), status


def current_user_id() -> int:
    if "user_id" not in session:
        raise UnauthorizedError()
    return int(session["user_id"])


def current_role() -> Role:
    try:
        return Role(session.get("role"))
    except ValueError:
        raise UnauthorizedError()


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        current_user_id()
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            current_user_id()
            if current_role() not in roles:
                raise AuthorizationError()
            return view(*args, **kwargs)

        return wrapper

    return decorator


def json_body() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def optional_date(value: str | None, field_name: str) -> date | None:
    if not value:
        return None
    try:
        return parse_iso_date(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")


def required_date(value: str | None, field_name: str) -> date:
    parsed = optional_date(value, field_name)
    if parsed is None:
        raise ValidationError(f"{field_name} is required")
    return parsed


def optional_int(value, field_name: str) -> int | None:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(StorageError)
    def handle_storage_error(e: StorageError):
        logger.error("Storage failure on %s %s", request.method, request.path, exc_info=e)
        return jsonify({"success": False, "message": StorageError.default_message}), 500

    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return jsonify({"success": False, "message": str(e)}), e.status_code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return jsonify({"success": False, "message": e.description}), e.code
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"success": False, "message": StorageError.default_message}), 500
