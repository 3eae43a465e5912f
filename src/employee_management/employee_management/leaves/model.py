from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import RequestStatus


@dataclass(frozen=True)
class LeaveType:
    leave_type_id: int
    code: str
    name: str
    default_days: float
    is_carry_forward: bool = False
    max_carry_forward: float = 0
    is_active: bool = True


@dataclass(frozen=True)
class LeaveBalance:
    """Per employee, leave type and year. remaining = total - used + carried_over."""

    employee_id: int
    leave_type_id: int
    year: int
    total: float
    used: float
    remaining: float
    carried_over: float = 0


@dataclass(frozen=True)
class LeaveRequest:
    leave_id: int
    employee_id: int
    leave_type_id: int
    from_date: date
    to_date: date
    days: float
    reason: str
    status: RequestStatus
    is_half_day: bool = False
    created_at: Optional[datetime] = None
    admin_comment: Optional[str] = None
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None


@dataclass(frozen=True)
class PersonalHolidayBalance:
    employee_id: int
    year: int
    total: float
    used: float
    remaining: float


@dataclass(frozen=True)
class PersonalHolidayRequest:
    request_id: int
    employee_id: int
    from_date: date
    to_date: date
    days: float
    reason: str
    status: RequestStatus
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    admin_comment: Optional[str] = None
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
