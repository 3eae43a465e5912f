from __future__ import annotations

from datetime import date
from typing import Sequence

from ..database.mysql_base import MySQLRepository, fetchall, fetchone
from .model import Holiday
from .repository import HolidayRepository


class MySQLHolidayRepository(MySQLRepository, HolidayRepository):
    def is_public_holiday(self, day: date) -> bool:
        with self._cursor() as cur:
            cur.execute("SELECT 1 AS hit FROM holidays WHERE holiday_date=%s LIMIT 1", (day,))
            return fetchone(cur) is not None

    def list_for_year(self, year: int) -> Sequence[Holiday]:
        with self._cursor() as cur:
            cur.execute(
                """
                SELECT holiday_id, name, holiday_date, type
                FROM holidays
                WHERE YEAR(holiday_date)=%s
                ORDER BY holiday_date ASC
                """,
                (int(year),),
            )
            return [
                Holiday(
                    holiday_id=int(r["holiday_id"]),
                    name=r["name"],
                    holiday_date=r["holiday_date"],
                    type=r["type"],
                )
                for r in fetchall(cur)
            ]

    def create(self, *, name: str, holiday_date: date, type: str) -> int:
        with self._cursor() as cur:
            cur.execute(
                "INSERT INTO holidays(name, holiday_date, type) VALUES(%s,%s,%s)",
                (name, holiday_date, type),
            )
            return int(cur.lastrowid)

    def delete(self, holiday_id: int) -> bool:
        with self._cursor() as cur:
            cur.execute("DELETE FROM holidays WHERE holiday_id=%s", (int(holiday_id),))
            return cur.rowcount > 0
