"""Helpers shared by the JSON controllers: auth guards, school scoping, errors."""

from __future__ import annotations

import enum
import logging
from dataclasses import asdict, is_dataclass
from functools import wraps
from typing import Any, Dict

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import UserType
from ..core.exceptions import (
    AttendanceConflictError,
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def json_ok(message: str = "OK", status: int = 200, **data: Any):
    return jsonify({"success": True, "message": message, **data}), status


def json_error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def to_json_dict(obj: Any) -> Any:
    if is_dataclass(obj):
        return {k: to_json_dict(v) for k, v in asdict(obj).items()}
    if isinstance(obj, dict):
        return {k: to_json_dict(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_json_dict(v) for v in obj]
    if isinstance(obj, enum.Enum):
        return obj.value
    return obj


def payload() -> Dict[str, Any]:
    return request.get_json(silent=True) or {}


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_type" not in session:
            raise AuthenticationError("Please log in to continue")
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_type" not in session:
            raise AuthenticationError("Please log in to continue")
        if session.get("user_type") != UserType.ADMIN.value:
            raise AuthorizationError("You do not have permission")
        return view(*args, **kwargs)

    return wrapper


def operator_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_type" not in session:
            raise AuthenticationError("Please log in to continue")
        if session.get("user_type") != UserType.OPERATOR.value:
            raise AuthorizationError("You do not have permission")
        return view(*args, **kwargs)

    return wrapper


def is_admin() -> bool:
    return session.get("user_type") == UserType.ADMIN.value


def current_school() -> str:
    """School the request works on.

    Operators are bound to the school they logged in with. The admin may pick
    any school with a ``school`` query/body parameter.
    """
    if is_admin():
        school = request.args.get("school") or payload().get("school") or session.get("school_name")
    else:
        school = session.get("school_name")
    school = (school or "").strip()
    if not school:
        raise ValidationError("No school selected")
    return school


def ensure_same_school(school_name: str) -> None:
    """Hide records of other schools from operators."""
    if not is_admin() and school_name != session.get("school_name"):
        raise NotFoundError("Not found")


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(AttendanceConflictError)
    def _conflict(e):
        return json_error(str(e), 409)

    @app.errorhandler(ValidationError)
    def _invalid(e):
        return json_error(str(e), 400)

    @app.errorhandler(NotFoundError)
    def _not_found(e):
        return json_error(str(e), 404)

    @app.errorhandler(AuthenticationError)
    def _unauthenticated(e):
        return json_error(str(e), 401)

    @app.errorhandler(AuthorizationError)
    def _forbidden(e):
        return json_error(str(e), 403)

    @app.errorhandler(DomainError)
    def _domain(e):
        return json_error(str(e), 400)

    @app.errorhandler(Exception)
    def _unexpected(e):
        if isinstance(e, HTTPException):
            return json_error(e.description or e.name, e.code or 500)
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return json_error("Internal server error", 500)


def register_storage_unavailable(app: Flask) -> None:
    """Answer every request with 503 when the database could not be opened."""

    @app.before_request
    def _unavailable():
        return json_error("cannot initialize storage", 503)
