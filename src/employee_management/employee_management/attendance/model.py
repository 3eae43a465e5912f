from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, RequestStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance row per employee per day."""

    employee_id: int
    work_date: date
    status: AttendanceStatus
    attendance_id: Optional[int] = None
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    hours_worked: Optional[float] = None
    check_in_lat: Optional[float] = None
    check_in_lng: Optional[float] = None
    check_out_lat: Optional[float] = None
    check_out_lng: Optional[float] = None
    is_wfh: bool = False
    is_manual_override: bool = False
    override_reason: Optional[str] = None
    override_by: Optional[int] = None


@dataclass(frozen=True)
class AttendanceSummary:
    """Monthly counts used for pay: leave and holidays count as present."""

    present_days: int
    lop_days: int
    half_day_count: int
    by_status: dict = field(default_factory=dict)

    @property
    def total_lop(self) -> float:
        return self.lop_days + 0.5 * self.half_day_count


@dataclass(frozen=True)
class WfhRequest:
    """Work-from-home permission for one employee and day."""

    request_id: int
    employee_id: int
    work_date: date
    reason: str
    status: RequestStatus
    created_at: Optional[datetime] = None
    admin_comment: Optional[str] = None
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None


@dataclass(frozen=True)
class OutOfRangeCheckIn:
    """A recorded check-in whose coordinates fall outside the nearest office radius."""

    record: AttendanceRecord
    distance: int
    location_name: Optional[str]
    radius: int
