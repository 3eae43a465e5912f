from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..attendance.day_counter import is_working_weekday, leave_days_between
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import iter_days, now_local
from ..common.validators import require_enum, require_non_empty, require_non_negative
from ..core.enums import AttendanceStatus, RequestStatus, RolloverMode
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    InsufficientBalanceError,
    NotFoundError,
    ValidationError,
)
from ..holidays.repository import HolidayRepository
from .model import LeaveBalance, LeaveRequest, LeaveType
from .repository import LeaveRepository
from .unit_of_work import LeaveUnitOfWork

logger = logging.getLogger(__name__)


def mark_attendance_range(
    attendance: AttendanceRepository,
    *,
    employee_id: int,
    from_date: date,
    to_date: date,
    status: AttendanceStatus,
) -> int:
    """Upsert ``status`` on every non-Sunday day of the range. Returns the number of days marked."""
    marked = 0
    for day in iter_days(from_date, to_date):
        if not is_working_weekday(day):
            continue
        attendance.upsert_status(employee_id=employee_id, work_date=day, status=status)
        marked += 1
    return marked


def _insufficient(available: float, days: float) -> InsufficientBalanceError:
    return InsufficientBalanceError(
        f"Insufficient leave balance. Available: {available:g} days, requested: {days:g}",
        requested=days,
        available=available,
    )


class LeaveService:
    def __init__(self, leaves: LeaveRepository, holidays: HolidayRepository, uow: LeaveUnitOfWork):
        self._leaves = leaves
        self._holidays = holidays
        self._uow = uow

    # Leave types

    def list_leave_types(self, *, include_inactive: bool = False) -> Sequence[LeaveType]:
        return self._leaves.list_leave_types(active_only=not include_inactive)

    def create_leave_type(
        self,
        *,
        code: str,
        name: str,
        default_days,
        is_carry_forward: bool = False,
        max_carry_forward=0,
    ) -> int:
        return self._leaves.create_leave_type(
            code=require_non_empty(code, "Code").upper(),
            name=require_non_empty(name, "Name"),
            default_days=float(require_non_negative(default_days, "Default days")),
            is_carry_forward=bool(is_carry_forward),
            max_carry_forward=float(require_non_negative(max_carry_forward or 0, "Max carry forward")),
        )

    def update_leave_type(
        self,
        leave_type_id: int,
        *,
        name: Optional[str] = None,
        default_days=None,
        is_carry_forward: Optional[bool] = None,
        max_carry_forward=None,
        is_active: Optional[bool] = None,
    ) -> LeaveType:
        """Change only the fields that are given. Existing balances keep their totals."""
        current = self._leaves.get_leave_type(int(leave_type_id))
        if not current:
            raise NotFoundError("Leave type not found")

        updated = replace(
            current,
            name=current.name if name is None else require_non_empty(name, "Name"),
            default_days=(
                current.default_days if default_days is None
                else float(require_non_negative(default_days, "Default days"))
            ),
            is_carry_forward=current.is_carry_forward if is_carry_forward is None else bool(is_carry_forward),
            max_carry_forward=(
                current.max_carry_forward if max_carry_forward is None
                else float(require_non_negative(max_carry_forward, "Max carry forward"))
            ),
            is_active=current.is_active if is_active is None else bool(is_active),
        )
        self._leaves.update_leave_type(updated)
        return updated

    # Balances

    def balances(self, employee_id: int, *, year: int) -> Sequence[LeaveBalance]:
        return self._leaves.list_balances(year=int(year), employee_id=int(employee_id))

    # Requests

    def apply(
        self,
        *,
        employee_id: int,
        leave_type_id: int,
        from_date: date,
        to_date: date,
        reason: str,
        is_half_day: bool = False,
    ) -> int:
        if to_date < from_date:
            raise ValidationError("End date must be on or after start date")
        reason = require_non_empty(reason, "Reason")
        leave_type = self._leaves.get_leave_type(int(leave_type_id))
        if not leave_type or not leave_type.is_active:
            raise NotFoundError("Leave type not found")

        days = leave_days_between(from_date, to_date, is_half_day, self._holidays.is_public_holiday)
        if days <= 0:
            raise ValidationError("Selected dates contain no working days")

        balance = self._leaves.get_balance(
            employee_id=int(employee_id),
            leave_type_id=int(leave_type_id),
            year=from_date.year,
        )
        available = balance.remaining if balance else 0
        if available < days:
            raise _insufficient(available, days)

        if self._leaves.find_overlapping(employee_id=int(employee_id), from_date=from_date, to_date=to_date):
            raise ConflictError("You already have a leave application for these dates")

        return self._leaves.create_leave(
            employee_id=int(employee_id),
            leave_type_id=int(leave_type_id),
            from_date=from_date,
            to_date=to_date,
            days=days,
            is_half_day=bool(is_half_day),
            reason=reason,
        )

    def _get_pending(self, leave_id: int) -> LeaveRequest:
        leave = self._leaves.get_leave(int(leave_id))
        if not leave:
            raise NotFoundError("Leave not found")
        if leave.status != RequestStatus.PENDING:
            raise ValidationError("Leave is not in pending state")
        return leave

    def approve(self, leave_id: int, *, admin_id: int, comment: str = "", now: datetime | None = None) -> None:
        """Approve atomically: status, balance and attendance rows commit together or not at all."""
        leave = self._get_pending(leave_id)
        day_status = AttendanceStatus.HALF_DAY if leave.is_half_day else AttendanceStatus.ON_LEAVE

        with self._uow.transaction() as tx:
            balance = tx.leaves.get_balance(
                employee_id=leave.employee_id,
                leave_type_id=leave.leave_type_id,
                year=leave.from_date.year,
            )
            if balance is None:
                raise NotFoundError("Leave balance not found")
            if balance.remaining < leave.days:
                raise _insufficient(balance.remaining, leave.days)

            if not tx.leaves.decide_leave(
                leave_id=leave.leave_id,
                status=RequestStatus.APPROVED,
                decided_by=int(admin_id),
                decided_at=now or now_local(),
                admin_comment=(comment or "").strip() or None,
            ):
                raise ValidationError("Leave is not in pending state")

            if not tx.leaves.consume_balance(
                employee_id=leave.employee_id,
                leave_type_id=leave.leave_type_id,
                year=leave.from_date.year,
                days=leave.days,
            ):
                raise _insufficient(balance.remaining, leave.days)

            marked = mark_attendance_range(
                tx.attendance,
                employee_id=leave.employee_id,
                from_date=leave.from_date,
                to_date=leave.to_date,
                status=day_status,
            )

        logger.info("Leave %s approved by %s (%g days, %d attendance rows)", leave.leave_id, admin_id, leave.days, marked)

    def reject(self, leave_id: int, *, admin_id: int, comment: str, now: datetime | None = None) -> None:
        comment = require_non_empty(comment, "Rejection comment")
        leave = self._get_pending(leave_id)
        if not self._leaves.decide_leave(
            leave_id=leave.leave_id,
            status=RequestStatus.REJECTED,
            decided_by=int(admin_id),
            decided_at=now or now_local(),
            admin_comment=comment,
        ):
            raise ValidationError("Leave is not in pending state")

    def cancel(self, leave_id: int, *, employee_id: int, now: datetime | None = None) -> None:
        leave = self._leaves.get_leave(int(leave_id))
        if not leave:
            raise NotFoundError("Leave not found")
        if leave.employee_id != int(employee_id):
            raise AuthorizationError("Not authorized")
        if leave.status == RequestStatus.APPROVED:
            raise ValidationError("Cannot cancel an approved leave")
        if not self._leaves.decide_leave(
            leave_id=leave.leave_id,
            status=RequestStatus.CANCELLED,
            decided_by=None,
            decided_at=now or now_local(),
        ):
            raise ValidationError("Only pending leaves can be cancelled")

    def list_leaves(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[str] = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        status_enum = require_enum(RequestStatus, status, "Status") if status else None
        return self._leaves.list_leaves(employee_id=employee_id, status=status_enum, limit=limit)

    # Year end

    def year_end_rollover(self, *, year: int, mode=RolloverMode.LAPSE) -> int:
        """Open ``year + 1`` balances from ``year``. Safe to re-run for the same year."""
        mode = require_enum(RolloverMode, mode, "Mode")
        types = {t.leave_type_id: t for t in self._leaves.list_leave_types(active_only=False)}
        next_year = int(year) + 1

        processed = 0
        for balance in self._leaves.list_balances(year=int(year)):
            leave_type = types.get(balance.leave_type_id)
            carry = 0.0
            if mode == RolloverMode.CARRY and leave_type and leave_type.is_active and leave_type.is_carry_forward:
                carry = max(min(balance.remaining, leave_type.max_carry_forward or 0), 0)
            total = leave_type.default_days if leave_type and leave_type.default_days else balance.total

            self._leaves.upsert_rollover_balance(
                employee_id=balance.employee_id,
                leave_type_id=balance.leave_type_id,
                year=next_year,
                total=total,
                carried_over=carry,
            )
            processed += 1

        logger.info("Year-end %s -> %s (%s): %d balances", year, next_year, mode.value, processed)
        return processed
