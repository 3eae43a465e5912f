from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_decimal(value, field_name: str) -> Decimal:
    try:
        result = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not result.is_finite():
        raise ValidationError(f"{field_name} must be a number")
    return result


def require_non_negative(value, field_name: str) -> Decimal:
    result = require_decimal(value, field_name)
    if result < 0:
        raise ValidationError(f"{field_name} must be >= 0")
    return result


def require_enum(enum_cls: type[E], value, field_name: str) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


def require_id_list(values, field_name: str) -> list[int]:
    if not values or isinstance(values, (str, bytes)):
        raise ValidationError(f"{field_name} must be a non-empty list")
    try:
        return [int(v) for v in values]
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must contain numeric ids")
