from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import EmployeeStatus, Role
from ..database.mysql_base import MySQLRepository, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository


def _to_employee(row: dict) -> Employee:
    return Employee(
        employee_id=int(row["employee_id"]),
        code=row["code"],
        name=row["name"],
        email=row.get("email"),
        role=Role(row["role"]),
        status=EmployeeStatus(row["status"]),
    )


class MySQLEmployeeRepository(MySQLRepository, EmployeeRepository):
    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with self._cursor() as cur:
            cur.execute(
                "SELECT employee_id, code, name, email, role, status FROM employees WHERE employee_id=%s",
                (int(employee_id),),
            )
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def list_active(self) -> Sequence[Employee]:
        with self._cursor() as cur:
            cur.execute(
                """
                SELECT employee_id, code, name, email, role, status
                FROM employees
                WHERE status=%s
                ORDER BY name ASC
                """,
                (EmployeeStatus.ACTIVE.value,),
            )
            return [_to_employee(r) for r in fetchall(cur)]
