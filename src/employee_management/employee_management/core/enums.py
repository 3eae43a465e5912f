from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for access checks."""

    ADMIN = "ADMIN"
    EMPLOYEE = "EMPLOYEE"


class EmployeeStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class AttendanceStatus(str, Enum):
    """Day status stored on an attendance record."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    HALF_DAY = "HALF_DAY"
    ON_LEAVE = "ON_LEAVE"
    WFH = "WFH"
    PERSONAL_HOLIDAY = "PERSONAL_HOLIDAY"
    HOLIDAY = "HOLIDAY"


class RequestStatus(str, Enum):
    """Approval workflow state (leave / personal holiday)."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class ComponentType(str, Enum):
    EARNING = "EARNING"
    DEDUCTION = "DEDUCTION"


class CalcType(str, Enum):
    FIXED = "FIXED"
    PERCENTAGE = "PERCENTAGE"


class PayrollStatus(str, Enum):
    GENERATED = "GENERATED"
    PAID = "PAID"


class RolloverMode(str, Enum):
    """Year-end handling of unused leave."""

    CARRY = "carry"
    LAPSE = "lapse"
