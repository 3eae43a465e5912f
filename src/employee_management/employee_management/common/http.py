from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request, session
from flask.json.provider import DefaultJSONProvider
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    DomainError,
    InsufficientBalanceError,
    NotFoundError,
    ValidationError,
)
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)


class ApiJSONProvider(DefaultJSONProvider):
    """Dates as ISO strings, money as strings with two decimals."""

    @staticmethod
    def default(o: Any) -> Any:
        if isinstance(o, datetime):
            return o.isoformat(timespec="seconds")
        if isinstance(o, date):
            return o.isoformat()
        if isinstance(o, Decimal):
            return str(o)
        return DefaultJSONProvider.default(o)


def ok(data: Any = None, message: str = "", status: int = 200):
    return jsonify({"success": True, "message": message, "data": data}), status


def fail(message: str, status: int, **extra):
    body = {"success": False, "message": message}
    body.update(extra)
    return jsonify(body), status


def json_body() -> dict:
    return request.get_json(silent=True) or {}


def body_date(body: dict, key: str) -> date:
    value = body.get(key)
    if not value:
        raise ValidationError(f"{key} is required")
    return parse_iso_date(str(value))


def body_datetime(body: dict, key: str) -> Optional[datetime]:
    value = body.get(key)
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(f"{key} must be an ISO date-time")


def current_user_id() -> int:
    return int(session["user_id"])


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Please log in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Please log in to continue", 401)
        if session.get("role") != Role.ADMIN.value:
            raise AuthorizationError("Admin access required")
        return view(*args, **kwargs)

    return wrapper


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(InsufficientBalanceError)
    def _insufficient(e: InsufficientBalanceError):
        return fail(str(e), 400, shortfall=e.shortfall, available=e.available)

    @app.errorhandler(ValidationError)
    def _invalid(e: ValidationError):
        return fail(str(e), 400)

    @app.errorhandler(ConflictError)
    def _conflict(e: ConflictError):
        return fail(str(e), 409)

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return fail(str(e), 404)

    @app.errorhandler(AuthorizationError)
    def _forbidden(e: AuthorizationError):
        return fail(str(e) or "Not authorized", 403)

    @app.errorhandler(DomainError)
    def _domain(e: DomainError):
        return fail(str(e), 400)

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return fail(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return fail("Internal server error", 500)
