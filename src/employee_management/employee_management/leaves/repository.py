from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import LeaveBalance, LeaveRequest, LeaveType, PersonalHolidayBalance, PersonalHolidayRequest


class LeaveRepository(Protocol):
    # Leave types
    def get_leave_type(self, leave_type_id: int) -> Optional[LeaveType]:
        raise NotImplementedError

    def list_leave_types(self, *, active_only: bool = True) -> Sequence[LeaveType]:
        raise NotImplementedError

    def create_leave_type(
        self,
        *,
        code: str,
        name: str,
        default_days: float,
        is_carry_forward: bool,
        max_carry_forward: float,
    ) -> int:
        raise NotImplementedError

    def update_leave_type(self, leave_type: LeaveType) -> bool:
        """Overwrite name, default days, carry-forward rules and the active flag. The code never changes."""

        raise NotImplementedError

    # Balances
    def get_balance(self, *, employee_id: int, leave_type_id: int, year: int) -> Optional[LeaveBalance]:
        raise NotImplementedError

    def list_balances(self, *, year: int, employee_id: Optional[int] = None) -> Sequence[LeaveBalance]:
        raise NotImplementedError

    def consume_balance(self, *, employee_id: int, leave_type_id: int, year: int, days: float) -> bool:
        """used += days, remaining -= days. False when missing or remaining < days."""

        raise NotImplementedError

    def upsert_rollover_balance(
        self,
        *,
        employee_id: int,
        leave_type_id: int,
        year: int,
        total: float,
        carried_over: float,
    ) -> None:
        """Create the year's balance, or reset total/carry keeping days already used."""

        raise NotImplementedError

    # Requests
    def create_leave(
        self,
        *,
        employee_id: int,
        leave_type_id: int,
        from_date: date,
        to_date: date,
        days: float,
        is_half_day: bool,
        reason: str,
    ) -> int:
        raise NotImplementedError

    def get_leave(self, leave_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def find_overlapping(self, *, employee_id: int, from_date: date, to_date: date) -> Optional[LeaveRequest]:
        """First PENDING/APPROVED leave intersecting [from_date, to_date]."""

        raise NotImplementedError

    def list_leaves(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def decide_leave(
        self,
        *,
        leave_id: int,
        status: RequestStatus,
        decided_by: Optional[int],
        decided_at: datetime,
        admin_comment: Optional[str] = None,
    ) -> bool:
        """Move a PENDING leave to ``status``. False when it is no longer pending."""

        raise NotImplementedError


class PersonalHolidayRepository(Protocol):
    def get_balance(self, employee_id: int, year: int) -> Optional[PersonalHolidayBalance]:
        raise NotImplementedError

    def list_balances(self, *, year: int) -> Sequence[PersonalHolidayBalance]:
        raise NotImplementedError

    def set_balance(self, *, employee_id: int, year: int, total: float) -> PersonalHolidayBalance:
        """Create the year's balance or resize it, keeping days already used."""

        raise NotImplementedError

    def consume_balance(self, *, employee_id: int, year: int, days: float) -> bool:
        """used += days, remaining -= days. False when missing or remaining < days."""

        raise NotImplementedError

    def create_request(
        self,
        *,
        employee_id: int,
        from_date: date,
        to_date: date,
        days: float,
        reason: str,
        description: Optional[str],
    ) -> int:
        raise NotImplementedError

    def get_request(self, request_id: int) -> Optional[PersonalHolidayRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[PersonalHolidayRequest]:
        raise NotImplementedError

    def decide_request(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        decided_by: int,
        decided_at: datetime,
        admin_comment: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError
