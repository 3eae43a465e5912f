from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import ContextManager, Iterator, Protocol

from ..attendance.mysql_attendance_repository import MySQLAttendanceRepository
from ..attendance.repository import AttendanceRepository
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .mysql_leave_repository import MySQLLeaveRepository, MySQLPersonalHolidayRepository
from .repository import LeaveRepository, PersonalHolidayRepository


@dataclass(frozen=True)
class LeaveTransaction:
    """Repositories sharing one transaction."""

    leaves: LeaveRepository
    personal_holidays: PersonalHolidayRepository
    attendance: AttendanceRepository


class LeaveUnitOfWork(Protocol):
    def transaction(self) -> ContextManager[LeaveTransaction]:
        """Commit when the block exits normally, roll everything back on error."""

        raise NotImplementedError


class MySQLLeaveUnitOfWork(LeaveUnitOfWork):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def transaction(self) -> Iterator[LeaveTransaction]:
        with db_cursor(self._conn_factory) as (_, cur):
            yield LeaveTransaction(
                leaves=MySQLLeaveRepository(self._conn_factory, cursor=cur),
                personal_holidays=MySQLPersonalHolidayRepository(self._conn_factory, cursor=cur),
                attendance=MySQLAttendanceRepository(self._conn_factory, cursor=cur),
            )
