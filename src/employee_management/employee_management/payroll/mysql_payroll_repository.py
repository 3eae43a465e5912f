from __future__ import annotations

import json
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..common.money import to_decimal
from ..core.enums import PayrollStatus
from ..database.mysql_base import MySQLRepository, fetchall, fetchone
from .model import ComponentSnapshot, Payroll, PayrollSnapshot
from .repository import PayrollRepository

_SELECT = """
    SELECT p.payroll_id, p.employee_id, p.month, p.working_days, p.present_days, p.lop_days,
           p.half_day_count, p.basic_salary, p.gross_salary, p.total_deductions, p.lop_amount,
           p.half_day_amount, p.net_salary, p.components, p.status, p.override_amount,
           p.override_reason, p.paid_date, p.paid_by, e.name AS employee_name
    FROM payrolls p
    JOIN employees e ON e.employee_id = p.employee_id
"""


def _to_payroll(r: dict) -> Payroll:
    raw = r.get("components") or "[]"
    items = json.loads(raw) if isinstance(raw, (str, bytes, bytearray)) else raw
    override = r.get("override_amount")
    return Payroll(
        payroll_id=int(r["payroll_id"]),
        employee_id=int(r["employee_id"]),
        month=r["month"],
        working_days=int(r["working_days"]),
        present_days=int(r["present_days"]),
        lop_days=float(r["lop_days"]),
        half_day_count=int(r["half_day_count"]),
        basic_salary=to_decimal(r["basic_salary"]),
        gross_salary=to_decimal(r["gross_salary"]),
        total_deductions=to_decimal(r["total_deductions"]),
        lop_amount=to_decimal(r["lop_amount"]),
        half_day_amount=to_decimal(r["half_day_amount"]),
        net_salary=to_decimal(r["net_salary"]),
        components=tuple(ComponentSnapshot.from_dict(c) for c in items),
        status=PayrollStatus(r["status"]),
        override_amount=to_decimal(override) if override is not None else None,
        override_reason=r.get("override_reason"),
        paid_date=r.get("paid_date"),
        paid_by=r.get("paid_by"),
        employee_name=r.get("employee_name"),
    )


class MySQLPayrollRepository(MySQLRepository, PayrollRepository):
    def upsert_payroll(self, *, employee_id: int, month: date, snapshot: PayrollSnapshot) -> int:
        components = json.dumps([c.as_dict() for c in snapshot.components])
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO payrolls(
                    employee_id, month, working_days, present_days, lop_days, half_day_count,
                    basic_salary, gross_salary, total_deductions, lop_amount, half_day_amount,
                    net_salary, components, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    payroll_id=LAST_INSERT_ID(payroll_id),
                    working_days=VALUES(working_days),
                    present_days=VALUES(present_days),
                    lop_days=VALUES(lop_days),
                    half_day_count=VALUES(half_day_count),
                    basic_salary=VALUES(basic_salary),
                    gross_salary=VALUES(gross_salary),
                    total_deductions=VALUES(total_deductions),
                    lop_amount=VALUES(lop_amount),
                    half_day_amount=VALUES(half_day_amount),
                    net_salary=VALUES(net_salary),
                    components=VALUES(components),
                    status=VALUES(status),
                    override_amount=NULL,
                    override_reason=NULL,
                    paid_date=NULL,
                    paid_by=NULL
                """,
                (
                    int(employee_id),
                    month,
                    snapshot.working_days,
                    snapshot.present_days,
                    snapshot.lop_days,
                    snapshot.half_day_count,
                    snapshot.basic_salary,
                    snapshot.gross_salary,
                    snapshot.total_deductions,
                    snapshot.lop_amount,
                    snapshot.half_day_amount,
                    snapshot.net_salary,
                    components,
                    PayrollStatus.GENERATED.value,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, payroll_id: int) -> Optional[Payroll]:
        with self._cursor() as cur:
            cur.execute(_SELECT + " WHERE p.payroll_id=%s", (int(payroll_id),))
            row = fetchone(cur)
            return _to_payroll(row) if row else None

    def list_for_month(self, month: date) -> Sequence[Payroll]:
        with self._cursor() as cur:
            cur.execute(_SELECT + " WHERE p.month=%s ORDER BY e.name ASC", (month,))
            return [_to_payroll(r) for r in fetchall(cur)]

    def list_paid_for_employee(self, employee_id: int, *, limit: int) -> Sequence[Payroll]:
        with self._cursor() as cur:
            cur.execute(
                _SELECT + " WHERE p.employee_id=%s AND p.status=%s ORDER BY p.month DESC LIMIT %s",
                (int(employee_id), PayrollStatus.PAID.value, int(limit)),
            )
            return [_to_payroll(r) for r in fetchall(cur)]

    def set_override(self, *, payroll_id: int, net_salary: Decimal, reason: str) -> bool:
        with self._cursor() as cur:
            cur.execute(
                """
                UPDATE payrolls
                SET override_amount=%s, override_reason=%s, net_salary=%s
                WHERE payroll_id=%s
                """,
                (net_salary, reason, net_salary, int(payroll_id)),
            )
            return cur.rowcount > 0

    def mark_paid(self, *, payroll_ids: Sequence[int], paid_by: int, paid_date: datetime) -> int:
        ids = [int(i) for i in payroll_ids]
        if not ids:
            return 0
        placeholders = ",".join(["%s"] * len(ids))
        with self._cursor() as cur:
            cur.execute(
                f"UPDATE payrolls SET status=%s, paid_date=%s, paid_by=%s WHERE payroll_id IN ({placeholders})",
                (PayrollStatus.PAID.value, paid_date, int(paid_by), *ids),
            )
            return int(cur.rowcount)
