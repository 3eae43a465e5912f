from datetime import date, datetime

import pytest

from src.employee_management.employee_management.core.enums import AttendanceStatus, RequestStatus
from src.employee_management.employee_management.core.exceptions import (
    AuthorizationError,
    ConflictError,
    InsufficientBalanceError,
    NotFoundError,
    ValidationError,
)
from src.employee_management.employee_management.leaves.service import LeaveService

from tests.fakes import FakeUnitOfWork, InMemoryAttendance, InMemoryHolidays, InMemoryLeaves, InMemoryPersonalHolidays

MON, TUE, WED = date(2024, 6, 3), date(2024, 6, 4), date(2024, 6, 5)
NOW = datetime(2024, 6, 1, 9, 0)


class FailingAttendance(InMemoryAttendance):
    def __init__(self, fail_on: date):
        super().__init__()
        self.fail_on = fail_on

    def upsert_status(self, *, employee_id, work_date, status):
        if work_date == self.fail_on:
            raise RuntimeError("disk full")
        super().upsert_status(employee_id=employee_id, work_date=work_date, status=status)


def _setup(attendance=None, holidays=()):
    leaves = InMemoryLeaves()
    casual = leaves.create_leave_type(code="CL", name="Casual", default_days=12, is_carry_forward=True, max_carry_forward=5)
    sick = leaves.create_leave_type(code="SL", name="Sick", default_days=8, is_carry_forward=False, max_carry_forward=0)
    attendance = attendance or InMemoryAttendance()
    uow = FakeUnitOfWork(leaves, InMemoryPersonalHolidays(), attendance)
    svc = LeaveService(leaves, InMemoryHolidays(holidays), uow)
    return svc, leaves, attendance, uow, casual, sick


def test_insufficient_balance_reports_shortfall():
    svc, leaves, _, _, casual, _ = _setup()
    leaves.add_balance(1, casual, 2024, total=5)

    # Mon 3rd .. Sat 8th = 6 working days
    with pytest.raises(InsufficientBalanceError) as exc:
        svc.apply(employee_id=1, leave_type_id=casual, from_date=MON, to_date=date(2024, 6, 8), reason="Trip")

    assert exc.value.shortfall == 1
    assert exc.value.available == 5
    assert leaves.leaves == {}


def test_missing_balance_counts_as_zero():
    svc, _, _, _, _, sick = _setup()

    with pytest.raises(InsufficientBalanceError) as exc:
        svc.apply(employee_id=1, leave_type_id=sick, from_date=MON, to_date=MON, reason="Flu")

    assert exc.value.shortfall == 1


def test_apply_excludes_holidays_and_sundays():
    svc, leaves, _, _, casual, _ = _setup(holidays=[TUE])
    leaves.add_balance(1, casual, 2024, total=12)

    leave_id = svc.apply(employee_id=1, leave_type_id=casual, from_date=date(2024, 6, 1), to_date=WED, reason="Family")

    # Sat 1st, Sun 2nd (skip), Mon 3rd, Tue 4th (holiday), Wed 5th
    assert leaves.get_leave(leave_id).days == 3


def test_apply_validations():
    svc, leaves, _, _, casual, _ = _setup()
    leaves.add_balance(1, casual, 2024, total=12)

    with pytest.raises(ValidationError):
        svc.apply(employee_id=1, leave_type_id=casual, from_date=WED, to_date=MON, reason="x")
    with pytest.raises(ValidationError):
        svc.apply(employee_id=1, leave_type_id=casual, from_date=MON, to_date=MON, reason="  ")
    with pytest.raises(ValidationError):
        svc.apply(employee_id=1, leave_type_id=casual, from_date=date(2024, 6, 2), to_date=date(2024, 6, 2), reason="Sunday")
    with pytest.raises(NotFoundError):
        svc.apply(employee_id=1, leave_type_id=99, from_date=MON, to_date=MON, reason="x")


def test_overlap_with_pending_leave_conflicts():
    svc, leaves, _, _, casual, _ = _setup()
    leaves.add_balance(1, casual, 2024, total=12)
    svc.apply(employee_id=1, leave_type_id=casual, from_date=MON, to_date=WED, reason="First")

    with pytest.raises(ConflictError):
        svc.apply(employee_id=1, leave_type_id=casual, from_date=WED, to_date=date(2024, 6, 7), reason="Second")


def test_half_day_leave_costs_half():
    svc, leaves, attendance, _, casual, _ = _setup()
    leaves.add_balance(1, casual, 2024, total=1)
    leave_id = svc.apply(employee_id=1, leave_type_id=casual, from_date=MON, to_date=MON, reason="Dentist", is_half_day=True)

    svc.approve(leave_id, admin_id=9, now=NOW)

    assert leaves.get_balance(employee_id=1, leave_type_id=casual, year=2024).remaining == 0.5
    assert attendance.get_for_employee_and_date(1, MON).status == AttendanceStatus.HALF_DAY


def test_approve_three_days_marks_attendance_and_balance():
    svc, leaves, attendance, uow, casual, _ = _setup()
    leaves.add_balance(1, casual, 2024, total=10)
    leave_id = svc.apply(employee_id=1, leave_type_id=casual, from_date=MON, to_date=WED, reason="Trip")

    svc.approve(leave_id, admin_id=9, comment="Enjoy", now=NOW)

    balance = leaves.get_balance(employee_id=1, leave_type_id=casual, year=2024)
    assert (balance.used, balance.remaining) == (3, 7)
    assert [r.status for r in attendance.find_in_range(1, MON, WED)] == [AttendanceStatus.ON_LEAVE] * 3
    leave = leaves.get_leave(leave_id)
    assert leave.status == RequestStatus.APPROVED
    assert leave.decided_by == 9
    assert uow.commits == 1


def test_approve_rolls_back_everything_on_failure():
    svc, leaves, attendance, uow, casual, _ = _setup(attendance=FailingAttendance(fail_on=WED))
    leaves.add_balance(1, casual, 2024, total=10)
    leave_id = svc.apply(employee_id=1, leave_type_id=casual, from_date=MON, to_date=WED, reason="Trip")

    with pytest.raises(RuntimeError):
        svc.approve(leave_id, admin_id=9, now=NOW)

    balance = uow.tx.leaves.get_balance(employee_id=1, leave_type_id=casual, year=2024)
    assert (balance.used, balance.remaining) == (0, 10)
    assert uow.tx.attendance.find_in_range(1, MON, WED) == []
    assert uow.tx.leaves.get_leave(leave_id).status == RequestStatus.PENDING
    assert uow.rollbacks == 1


def test_approve_twice_is_rejected():
    svc, leaves, _, _, casual, _ = _setup()
    leaves.add_balance(1, casual, 2024, total=10)
    leave_id = svc.apply(employee_id=1, leave_type_id=casual, from_date=MON, to_date=MON, reason="x")
    svc.approve(leave_id, admin_id=9, now=NOW)

    with pytest.raises(ValidationError):
        svc.approve(leave_id, admin_id=9, now=NOW)


def test_reject_requires_comment():
    svc, leaves, _, _, casual, _ = _setup()
    leaves.add_balance(1, casual, 2024, total=10)
    leave_id = svc.apply(employee_id=1, leave_type_id=casual, from_date=MON, to_date=MON, reason="x")

    with pytest.raises(ValidationError):
        svc.reject(leave_id, admin_id=9, comment="")

    svc.reject(leave_id, admin_id=9, comment="Release week", now=NOW)
    assert leaves.get_leave(leave_id).status == RequestStatus.REJECTED
    assert leaves.get_balance(employee_id=1, leave_type_id=casual, year=2024).remaining == 10


def test_cancel_own_pending_only():
    svc, leaves, _, _, casual, _ = _setup()
    leaves.add_balance(1, casual, 2024, total=10)
    leave_id = svc.apply(employee_id=1, leave_type_id=casual, from_date=MON, to_date=MON, reason="x")

    with pytest.raises(AuthorizationError):
        svc.cancel(leave_id, employee_id=2)

    svc.cancel(leave_id, employee_id=1, now=NOW)
    assert leaves.get_leave(leave_id).status == RequestStatus.CANCELLED

    other = svc.apply(employee_id=1, leave_type_id=casual, from_date=TUE, to_date=TUE, reason="y")
    svc.approve(other, admin_id=9, now=NOW)
    with pytest.raises(ValidationError):
        svc.cancel(other, employee_id=1)


def test_rollover_carry_mode_caps_carry_forward():
    svc, leaves, _, _, casual, sick = _setup()
    leaves.add_balance(1, casual, 2024, total=12, used=4)
    leaves.add_balance(1, sick, 2024, total=8, used=1)

    processed = svc.year_end_rollover(year=2024, mode="carry")

    assert processed == 2
    cl = leaves.get_balance(employee_id=1, leave_type_id=casual, year=2025)
    assert (cl.total, cl.used, cl.carried_over, cl.remaining) == (12, 0, 5, 17)
    sl = leaves.get_balance(employee_id=1, leave_type_id=sick, year=2025)
    assert (sl.carried_over, sl.remaining) == (0, 8)


def test_rollover_lapse_mode_and_rerun():
    svc, leaves, _, _, casual, _ = _setup()
    leaves.add_balance(1, casual, 2024, total=12, used=10)

    svc.year_end_rollover(year=2024, mode="lapse")
    svc.year_end_rollover(year=2024, mode="lapse")

    cl = leaves.get_balance(employee_id=1, leave_type_id=casual, year=2025)
    assert (cl.total, cl.carried_over, cl.remaining) == (12, 0, 12)
    assert len(leaves.list_balances(year=2025)) == 1


def test_rollover_rejects_unknown_mode():
    svc, *_ = _setup()

    with pytest.raises(ValidationError):
        svc.year_end_rollover(year=2024, mode="keep")


def test_create_leave_type_validates():
    svc, leaves, *_ = _setup()

    with pytest.raises(ValidationError):
        svc.create_leave_type(code="", name="Earned", default_days=15)

    leave_type_id = svc.create_leave_type(code="el", name="Earned", default_days="15", is_carry_forward=True, max_carry_forward=10)
    assert leaves.get_leave_type(leave_type_id).code == "EL"
    assert len(svc.list_leave_types()) == 3


def test_second_approval_over_balance_is_refused_and_rolled_back():
    svc, leaves, attendance, uow, casual, _ = _setup()
    leaves.add_balance(1, casual, 2024, total=5)
    first = svc.apply(employee_id=1, leave_type_id=casual, from_date=MON, to_date=WED, reason="Trip")
    second = svc.apply(employee_id=1, leave_type_id=casual, from_date=date(2024, 6, 10), to_date=date(2024, 6, 12), reason="Wedding")
    svc.approve(first, admin_id=9, now=NOW)

    with pytest.raises(InsufficientBalanceError) as exc:
        svc.approve(second, admin_id=9, now=NOW)

    assert exc.value.shortfall == 1
    assert exc.value.available == 2
    balance = leaves.get_balance(employee_id=1, leave_type_id=casual, year=2024)
    assert (balance.used, balance.remaining) == (3, 2)
    assert leaves.get_leave(second).status == RequestStatus.PENDING
    assert attendance.find_in_range(1, date(2024, 6, 10), date(2024, 6, 12)) == []
    assert uow.rollbacks == 1


def test_update_leave_type_changes_given_fields_only():
    svc, leaves, _, _, casual, _ = _setup()

    updated = svc.update_leave_type(casual, name="Casual leave", max_carry_forward="3")

    assert (updated.code, updated.name, updated.default_days) == ("CL", "Casual leave", 12)
    assert (updated.is_carry_forward, updated.max_carry_forward) == (True, 3)
    assert leaves.get_leave_type(casual) == updated


def test_deactivated_leave_type_is_hidden_by_default():
    svc, _, _, _, _, sick = _setup()

    svc.update_leave_type(sick, is_active=False)

    assert [t.code for t in svc.list_leave_types()] == ["CL"]
    assert len(svc.list_leave_types(include_inactive=True)) == 2


def test_update_leave_type_validates():
    svc, _, _, _, casual, _ = _setup()

    with pytest.raises(NotFoundError):
        svc.update_leave_type(99, name="Ghost")
    with pytest.raises(ValidationError):
        svc.update_leave_type(casual, name="  ")
    with pytest.raises(ValidationError):
        svc.update_leave_type(casual, default_days=-2)
