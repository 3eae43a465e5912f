from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_enum, require_non_empty, require_non_negative
from ..core.constants import DEFAULT_PERSONAL_HOLIDAY_QUOTA
from ..core.enums import AttendanceStatus, RequestStatus
from ..core.exceptions import InsufficientBalanceError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import PersonalHolidayBalance, PersonalHolidayRequest
from .repository import PersonalHolidayRepository
from .service import mark_attendance_range
from .unit_of_work import LeaveUnitOfWork

logger = logging.getLogger(__name__)


def _insufficient(balance: Optional[PersonalHolidayBalance], days: float) -> InsufficientBalanceError:
    available = balance.remaining if balance else 0
    return InsufficientBalanceError(
        f"Insufficient personal holiday balance. Available: {available:g} days",
        requested=days,
        available=available,
    )


class PersonalHolidayService:
    """Personal holidays draw on a small yearly quota and count calendar days.

    Each calendar year has its own balance row. A request is charged to the
    year of its first day.
    """

    def __init__(self, repo: PersonalHolidayRepository, employees: EmployeeRepository, uow: LeaveUnitOfWork):
        self._repo = repo
        self._employees = employees
        self._uow = uow

    def get_balance(self, employee_id: int, *, year: int) -> PersonalHolidayBalance:
        balance = self._repo.get_balance(int(employee_id), int(year))
        if balance is None:
            balance = self._repo.set_balance(
                employee_id=int(employee_id),
                year=int(year),
                total=DEFAULT_PERSONAL_HOLIDAY_QUOTA,
            )
        return balance

    def set_quota(self, employee_id: int, *, year: int, total) -> PersonalHolidayBalance:
        total = float(require_non_negative(total, "Total"))
        return self._repo.set_balance(employee_id=int(employee_id), year=int(year), total=total)

    def set_bulk_quota(self, *, year: int, total) -> int:
        """Give every active employee the same quota for ``year``. Returns how many were updated."""
        total = float(require_non_negative(total, "Total"))
        employees = self._employees.list_active()
        for employee in employees:
            self._repo.set_balance(employee_id=employee.employee_id, year=int(year), total=total)
        logger.info("Personal holiday quota for %s set to %g days for %d employees", year, total, len(employees))
        return len(employees)

    def year_end_reset(self, *, year: int) -> int:
        """Open ``year + 1`` with each employee's quota and nothing used. Unused days lapse."""
        next_year = int(year) + 1
        processed = 0
        for balance in self._repo.list_balances(year=int(year)):
            self._repo.set_balance(employee_id=balance.employee_id, year=next_year, total=balance.total)
            processed += 1
        logger.info("Personal holiday year-end %s -> %s: %d balances", year, next_year, processed)
        return processed

    def apply(
        self,
        *,
        employee_id: int,
        from_date: date,
        to_date: date,
        reason: str,
        description: Optional[str] = None,
    ) -> int:
        if to_date < from_date:
            raise ValidationError("End date must be on or after start date")
        reason = require_non_empty(reason, "Reason")

        days = float((to_date - from_date).days + 1)
        balance = self.get_balance(employee_id, year=from_date.year)
        if balance.remaining < days:
            raise _insufficient(balance, days)

        return self._repo.create_request(
            employee_id=int(employee_id),
            from_date=from_date,
            to_date=to_date,
            days=days,
            reason=reason,
            description=(description or "").strip() or None,
        )

    def _get_pending(self, request_id: int) -> PersonalHolidayRequest:
        request = self._repo.get_request(int(request_id))
        if not request:
            raise NotFoundError("Request not found")
        if request.status != RequestStatus.PENDING:
            raise ValidationError("Request is not in pending state")
        return request

    def approve(self, request_id: int, *, admin_id: int, comment: str = "", now: datetime | None = None) -> None:
        request = self._get_pending(request_id)
        year = request.from_date.year

        with self._uow.transaction() as tx:
            balance = tx.personal_holidays.get_balance(request.employee_id, year)
            if balance is None:
                raise NotFoundError("Personal holiday balance not found")
            if balance.remaining < request.days:
                raise _insufficient(balance, request.days)

            if not tx.personal_holidays.decide_request(
                request_id=request.request_id,
                status=RequestStatus.APPROVED,
                decided_by=int(admin_id),
                decided_at=now or now_local(),
                admin_comment=(comment or "").strip() or None,
            ):
                raise ValidationError("Request is not in pending state")

            if not tx.personal_holidays.consume_balance(employee_id=request.employee_id, year=year, days=request.days):
                raise _insufficient(balance, request.days)

            mark_attendance_range(
                tx.attendance,
                employee_id=request.employee_id,
                from_date=request.from_date,
                to_date=request.to_date,
                status=AttendanceStatus.PERSONAL_HOLIDAY,
            )

        logger.info("Personal holiday %s approved by %s", request.request_id, admin_id)

    def reject(self, request_id: int, *, admin_id: int, comment: str, now: datetime | None = None) -> None:
        comment = require_non_empty(comment, "Rejection comment")
        request = self._get_pending(request_id)
        if not self._repo.decide_request(
            request_id=request.request_id,
            status=RequestStatus.REJECTED,
            decided_by=int(admin_id),
            decided_at=now or now_local(),
            admin_comment=comment,
        ):
            raise ValidationError("Request is not in pending state")

    def list_requests(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[str] = None,
        limit: int = 200,
    ) -> Sequence[PersonalHolidayRequest]:
        status_enum = require_enum(RequestStatus, status, "Status") if status else None
        return self._repo.list_requests(employee_id=employee_id, status=status_enum, limit=limit)
