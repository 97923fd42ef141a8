from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime, time
from enum import Enum
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    DuplicatePunchError,
    ValidationError,
)
from ..core.session import Principal

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (DuplicatePunchError, 409),
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
)


def to_jsonable(value: Any) -> Any:
    """Dataclasses, enums and date/time values as plain JSON types."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value) if f.name != "pin"}
    if isinstance(value, dict):
        return {str(to_jsonable(k)): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def ok(data: Any = None, status: int = 200, **extra):
    body = {"success": True, "data": to_jsonable(data)}
    body.update({k: to_jsonable(v) for k, v in extra.items()})
    return jsonify(body), status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def json_body() -> dict:
    return request.get_json(silent=True) or {}


def current_principal() -> Optional[Principal]:
    if "employee_id" not in session:
        return None
    try:
        return Principal(employee_id=int(session["employee_id"]), role=Role(session.get("role", Role.EMPLOYEE.value)))
    except (TypeError, ValueError):
        session.clear()
        return None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        principal = current_principal()
        if principal is None:
            return fail("Please sign in to continue", 401)
        return view(principal, *args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        principal = current_principal()
        if principal is None:
            return fail("Please sign in to continue", 401)
        if not principal.is_admin:
            return fail("Permission denied", 403)
        return view(principal, *args, **kwargs)

    return wrapper


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        for error_type, status in _STATUS_BY_ERROR:
            if isinstance(e, error_type):
                return fail(str(e), status)
        return fail(str(e), 400)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        # HTTP errors (404, 405, ...) keep their status code.
        code = getattr(e, "code", None)
        if isinstance(code, int) and 400 <= code < 600 and hasattr(e, "get_response"):
            return fail(getattr(e, "description", str(e)), code)
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return fail("Internal server error", 500)
