from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import RequestStatus
from ..database.mysql_base import MySQLRepository, fetchall, fetchone
from .model import LeaveBalance, LeaveRequest, LeaveType, PersonalHolidayBalance, PersonalHolidayRequest
from .repository import LeaveRepository, PersonalHolidayRepository

_LEAVE_COLUMNS = """
    leave_id, employee_id, leave_type_id, from_date, to_date, days, is_half_day, reason,
    status, created_at, admin_comment, decided_by, decided_at
"""

_HOLIDAY_COLUMNS = """
    request_id, employee_id, from_date, to_date, days, reason, description,
    status, created_at, admin_comment, decided_by, decided_at
"""


def _to_leave_type(r: dict) -> LeaveType:
    return LeaveType(
        leave_type_id=int(r["leave_type_id"]),
        code=r["code"],
        name=r["name"],
        default_days=float(r["default_days"]),
        is_carry_forward=bool(r["is_carry_forward"]),
        max_carry_forward=float(r.get("max_carry_forward") or 0),
        is_active=bool(r["is_active"]),
    )


def _to_balance(r: dict) -> LeaveBalance:
    return LeaveBalance(
        employee_id=int(r["employee_id"]),
        leave_type_id=int(r["leave_type_id"]),
        year=int(r["year"]),
        total=float(r["total"]),
        used=float(r["used"]),
        remaining=float(r["remaining"]),
        carried_over=float(r.get("carried_over") or 0),
    )


def _to_leave(r: dict) -> LeaveRequest:
    return LeaveRequest(
        leave_id=int(r["leave_id"]),
        employee_id=int(r["employee_id"]),
        leave_type_id=int(r["leave_type_id"]),
        from_date=r["from_date"],
        to_date=r["to_date"],
        days=float(r["days"]),
        is_half_day=bool(r["is_half_day"]),
        reason=r["reason"],
        status=RequestStatus(r["status"]),
        created_at=r.get("created_at"),
        admin_comment=r.get("admin_comment"),
        decided_by=r.get("decided_by"),
        decided_at=r.get("decided_at"),
    )


def _to_holiday_balance(r: dict) -> PersonalHolidayBalance:
    return PersonalHolidayBalance(
        employee_id=int(r["employee_id"]),
        year=int(r["year"]),
        total=float(r["total"]),
        used=float(r["used"]),
        remaining=float(r["remaining"]),
    )


def _to_holiday_request(r: dict) -> PersonalHolidayRequest:
    return PersonalHolidayRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        from_date=r["from_date"],
        to_date=r["to_date"],
        days=float(r["days"]),
        reason=r["reason"],
        description=r.get("description"),
        status=RequestStatus(r["status"]),
        created_at=r.get("created_at"),
        admin_comment=r.get("admin_comment"),
        decided_by=r.get("decided_by"),
        decided_at=r.get("decided_at"),
    )


def _filters(employee_id: Optional[int], status: Optional[RequestStatus]) -> tuple[str, list]:
    clauses = ["1=1"]
    params: list[object] = []
    if employee_id is not None:
        clauses.append("employee_id=%s")
        params.append(int(employee_id))
    if status is not None:
        clauses.append("status=%s")
        params.append(status.value)
    return " AND ".join(clauses), params


class MySQLLeaveRepository(MySQLRepository, LeaveRepository):
    # Leave types
    def get_leave_type(self, leave_type_id: int) -> Optional[LeaveType]:
        with self._cursor() as cur:
            cur.execute("SELECT * FROM leave_types WHERE leave_type_id=%s", (int(leave_type_id),))
            row = fetchone(cur)
            return _to_leave_type(row) if row else None

    def list_leave_types(self, *, active_only: bool = True) -> Sequence[LeaveType]:
        sql = "SELECT * FROM leave_types"
        if active_only:
            sql += " WHERE is_active=1"
        with self._cursor() as cur:
            cur.execute(sql + " ORDER BY name ASC")
            return [_to_leave_type(r) for r in fetchall(cur)]

    def create_leave_type(
        self,
        *,
        code: str,
        name: str,
        default_days: float,
        is_carry_forward: bool,
        max_carry_forward: float,
    ) -> int:
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO leave_types(code, name, default_days, is_carry_forward, max_carry_forward)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (code, name, default_days, int(is_carry_forward), max_carry_forward),
            )
            return int(cur.lastrowid)

    def update_leave_type(self, leave_type: LeaveType) -> bool:
        with self._cursor() as cur:
            cur.execute(
                """
                UPDATE leave_types
                SET name=%s, default_days=%s, is_carry_forward=%s, max_carry_forward=%s, is_active=%s
                WHERE leave_type_id=%s
                """,
                (
                    leave_type.name,
                    leave_type.default_days,
                    int(leave_type.is_carry_forward),
                    leave_type.max_carry_forward,
                    int(leave_type.is_active),
                    int(leave_type.leave_type_id),
                ),
            )
            return cur.rowcount > 0

    # Balances
    def get_balance(self, *, employee_id: int, leave_type_id: int, year: int) -> Optional[LeaveBalance]:
        with self._cursor() as cur:
            cur.execute(
                """
                SELECT employee_id, leave_type_id, year, total, used, remaining, carried_over
                FROM leave_balances
                WHERE employee_id=%s AND leave_type_id=%s AND year=%s
                """,
                (int(employee_id), int(leave_type_id), int(year)),
            )
            row = fetchone(cur)
            return _to_balance(row) if row else None

    def list_balances(self, *, year: int, employee_id: Optional[int] = None) -> Sequence[LeaveBalance]:
        where, params = _filters(employee_id, None)
        with self._cursor() as cur:
            cur.execute(
                f"""
                SELECT employee_id, leave_type_id, year, total, used, remaining, carried_over
                FROM leave_balances
                WHERE {where} AND year=%s
                ORDER BY employee_id ASC, leave_type_id ASC
                """,
                (*params, int(year)),
            )
            return [_to_balance(r) for r in fetchall(cur)]

    def consume_balance(self, *, employee_id: int, leave_type_id: int, year: int, days: float) -> bool:
        with self._cursor() as cur:
            cur.execute(
                """
                UPDATE leave_balances
                SET used=used+%s, remaining=remaining-%s
                WHERE employee_id=%s AND leave_type_id=%s AND year=%s AND remaining >= %s
                """,
                (days, days, int(employee_id), int(leave_type_id), int(year), days),
            )
            return cur.rowcount > 0

    def upsert_rollover_balance(
        self,
        *,
        employee_id: int,
        leave_type_id: int,
        year: int,
        total: float,
        carried_over: float,
    ) -> None:
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO leave_balances(employee_id, leave_type_id, year, total, used, remaining, carried_over)
                VALUES(%s,%s,%s,%s,0,%s,%s)
                ON DUPLICATE KEY UPDATE
                    total=VALUES(total),
                    carried_over=VALUES(carried_over),
                    remaining=VALUES(total)-used+VALUES(carried_over)
                """,
                (int(employee_id), int(leave_type_id), int(year), total, total + carried_over, carried_over),
            )

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
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO leaves(employee_id, leave_type_id, from_date, to_date, days, is_half_day, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    int(leave_type_id),
                    from_date,
                    to_date,
                    days,
                    int(is_half_day),
                    reason,
                    RequestStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get_leave(self, leave_id: int) -> Optional[LeaveRequest]:
        with self._cursor() as cur:
            cur.execute(f"SELECT {_LEAVE_COLUMNS} FROM leaves WHERE leave_id=%s", (int(leave_id),))
            row = fetchone(cur)
            return _to_leave(row) if row else None

    def find_overlapping(self, *, employee_id: int, from_date: date, to_date: date) -> Optional[LeaveRequest]:
        with self._cursor() as cur:
            cur.execute(
                f"""
                SELECT {_LEAVE_COLUMNS}
                FROM leaves
                WHERE employee_id=%s
                  AND status IN (%s, %s)
                  AND from_date <= %s AND to_date >= %s
                ORDER BY from_date ASC
                LIMIT 1
                """,
                (
                    int(employee_id),
                    RequestStatus.PENDING.value,
                    RequestStatus.APPROVED.value,
                    to_date,
                    from_date,
                ),
            )
            row = fetchone(cur)
            return _to_leave(row) if row else None

    def list_leaves(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        where, params = _filters(employee_id, status)
        with self._cursor() as cur:
            cur.execute(
                f"SELECT {_LEAVE_COLUMNS} FROM leaves WHERE {where} ORDER BY created_at DESC LIMIT %s",
                (*params, int(limit)),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def decide_leave(
        self,
        *,
        leave_id: int,
        status: RequestStatus,
        decided_by: Optional[int],
        decided_at: datetime,
        admin_comment: Optional[str] = None,
    ) -> bool:
        with self._cursor() as cur:
            cur.execute(
                """
                UPDATE leaves
                SET status=%s, decided_by=%s, decided_at=%s, admin_comment=%s
                WHERE leave_id=%s AND status=%s
                """,
                (status.value, decided_by, decided_at, admin_comment, int(leave_id), RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0


class MySQLPersonalHolidayRepository(MySQLRepository, PersonalHolidayRepository):
    def get_balance(self, employee_id: int, year: int) -> Optional[PersonalHolidayBalance]:
        with self._cursor() as cur:
            cur.execute(
                """
                SELECT employee_id, year, total, used, remaining
                FROM personal_holiday_balances
                WHERE employee_id=%s AND year=%s
                """,
                (int(employee_id), int(year)),
            )
            row = fetchone(cur)
            return _to_holiday_balance(row) if row else None

    def list_balances(self, *, year: int) -> Sequence[PersonalHolidayBalance]:
        with self._cursor() as cur:
            cur.execute(
                """
                SELECT employee_id, year, total, used, remaining
                FROM personal_holiday_balances
                WHERE year=%s
                ORDER BY employee_id ASC
                """,
                (int(year),),
            )
            return [_to_holiday_balance(r) for r in fetchall(cur)]

    def set_balance(self, *, employee_id: int, year: int, total: float) -> PersonalHolidayBalance:
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO personal_holiday_balances(employee_id, year, total, used, remaining)
                VALUES(%s,%s,%s,0,%s)
                ON DUPLICATE KEY UPDATE
                    total=VALUES(total),
                    remaining=VALUES(total)-used
                """,
                (int(employee_id), int(year), total, total),
            )
        return self.get_balance(employee_id, year)

    def consume_balance(self, *, employee_id: int, year: int, days: float) -> bool:
        with self._cursor() as cur:
            cur.execute(
                """
                UPDATE personal_holiday_balances
                SET used=used+%s, remaining=remaining-%s
                WHERE employee_id=%s AND year=%s AND remaining >= %s
                """,
                (days, days, int(employee_id), int(year), days),
            )
            return cur.rowcount > 0

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
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO personal_holidays(employee_id, from_date, to_date, days, reason, description, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(employee_id), from_date, to_date, days, reason, description, RequestStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get_request(self, request_id: int) -> Optional[PersonalHolidayRequest]:
        with self._cursor() as cur:
            cur.execute(f"SELECT {_HOLIDAY_COLUMNS} FROM personal_holidays WHERE request_id=%s", (int(request_id),))
            row = fetchone(cur)
            return _to_holiday_request(row) if row else None

    def list_requests(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[PersonalHolidayRequest]:
        where, params = _filters(employee_id, status)
        with self._cursor() as cur:
            cur.execute(
                f"SELECT {_HOLIDAY_COLUMNS} FROM personal_holidays WHERE {where} ORDER BY created_at DESC LIMIT %s",
                (*params, int(limit)),
            )
            return [_to_holiday_request(r) for r in fetchall(cur)]

    def decide_request(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        decided_by: int,
        decided_at: datetime,
        admin_comment: Optional[str] = None,
    ) -> bool:
        with self._cursor() as cur:
            cur.execute(
                """
                UPDATE personal_holidays
                SET status=%s, decided_by=%s, decided_at=%s, admin_comment=%s
                WHERE request_id=%s AND status=%s
                """,
                (status.value, int(decided_by), decided_at, admin_comment, int(request_id), RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0
