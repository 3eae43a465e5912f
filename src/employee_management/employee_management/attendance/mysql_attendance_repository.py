from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.mysql_base import MySQLRepository, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, employee_id, work_date, status, check_in_time, check_out_time, hours_worked,
    check_in_lat, check_in_lng, check_out_lat, check_out_lng, is_wfh,
    is_manual_override, override_reason, override_by
"""


def _opt_float(value) -> Optional[float]:
    return float(value) if value is not None else None


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        hours_worked=_opt_float(r.get("hours_worked")),
        check_in_lat=_opt_float(r.get("check_in_lat")),
        check_in_lng=_opt_float(r.get("check_in_lng")),
        check_out_lat=_opt_float(r.get("check_out_lat")),
        check_out_lng=_opt_float(r.get("check_out_lng")),
        is_wfh=bool(r.get("is_wfh")),
        is_manual_override=bool(r.get("is_manual_override")),
        override_reason=r.get("override_reason"),
        override_by=r.get("override_by"),
    )


class MySQLAttendanceRepository(MySQLRepository, AttendanceRepository):
    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with self._cursor() as cur:
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            row = fetchone(cur)
            return _to_record(row) if row else None

    def find_in_range(self, employee_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with self._cursor() as cur:
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC
                """,
                (int(employee_id), start_date, end_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_recent_geo_checkins(self, *, limit: int) -> Sequence[AttendanceRecord]:
        with self._cursor() as cur:
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE check_in_lat IS NOT NULL AND check_in_lng IS NOT NULL
                  AND is_manual_override=0 AND is_wfh=0
                ORDER BY check_in_time DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def save(self, record: AttendanceRecord) -> None:
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO attendance_records(
                    employee_id, work_date, status, check_in_time, check_out_time, hours_worked,
                    check_in_lat, check_in_lng, check_out_lat, check_out_lng, is_wfh,
                    is_manual_override, override_reason, override_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status),
                    check_in_time=VALUES(check_in_time),
                    check_out_time=VALUES(check_out_time),
                    hours_worked=VALUES(hours_worked),
                    check_in_lat=VALUES(check_in_lat),
                    check_in_lng=VALUES(check_in_lng),
                    check_out_lat=VALUES(check_out_lat),
                    check_out_lng=VALUES(check_out_lng),
                    is_wfh=VALUES(is_wfh),
                    is_manual_override=VALUES(is_manual_override),
                    override_reason=VALUES(override_reason),
                    override_by=VALUES(override_by)
                """,
                (
                    record.employee_id,
                    record.work_date,
                    record.status.value,
                    record.check_in_time,
                    record.check_out_time,
                    record.hours_worked,
                    record.check_in_lat,
                    record.check_in_lng,
                    record.check_out_lat,
                    record.check_out_lng,
                    int(record.is_wfh),
                    int(record.is_manual_override),
                    record.override_reason,
                    record.override_by,
                ),
            )

    def upsert_status(self, *, employee_id: int, work_date: date, status: AttendanceStatus) -> None:
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO attendance_records(employee_id, work_date, status)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE status=VALUES(status)
                """,
                (int(employee_id), work_date, status.value),
            )
