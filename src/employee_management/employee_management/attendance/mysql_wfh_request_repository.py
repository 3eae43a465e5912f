from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import RequestStatus
from ..database.mysql_base import MySQLRepository, fetchall, fetchone
from .model import WfhRequest
from .repository import WfhRequestRepository

_COLUMNS = "request_id, employee_id, work_date, reason, status, created_at, admin_comment, decided_by, decided_at"


def _to_request(r: dict) -> WfhRequest:
    return WfhRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        reason=r["reason"],
        status=RequestStatus(r["status"]),
        created_at=r.get("created_at"),
        admin_comment=r.get("admin_comment"),
        decided_by=r.get("decided_by"),
        decided_at=r.get("decided_at"),
    )


class MySQLWfhRequestRepository(MySQLRepository, WfhRequestRepository):
    def create(self, *, employee_id: int, work_date: date, reason: str) -> int:
        with self._cursor() as cur:
            cur.execute(
                "INSERT INTO wfh_requests(employee_id, work_date, reason, status) VALUES(%s,%s,%s,%s)",
                (int(employee_id), work_date, reason, RequestStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get(self, request_id: int) -> Optional[WfhRequest]:
        with self._cursor() as cur:
            cur.execute(f"SELECT {_COLUMNS} FROM wfh_requests WHERE request_id=%s", (int(request_id),))
            row = fetchone(cur)
            return _to_request(row) if row else None

    def find_for_date(self, employee_id: int, work_date: date) -> Optional[WfhRequest]:
        with self._cursor() as cur:
            cur.execute(
                f"SELECT {_COLUMNS} FROM wfh_requests WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            row = fetchone(cur)
            return _to_request(row) if row else None

    def list_requests(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[WfhRequest]:
        clauses = ["1=1"]
        params: list[object] = []
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        with self._cursor() as cur:
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM wfh_requests
                WHERE {" AND ".join(clauses)}
                ORDER BY work_date DESC
                LIMIT %s
                """,
                (*params, int(limit)),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def decide(
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
                UPDATE wfh_requests
                SET status=%s, decided_by=%s, decided_at=%s, admin_comment=%s
                WHERE request_id=%s AND status=%s
                """,
                (status.value, int(decided_by), decided_at, admin_comment, int(request_id), RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0
