from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, RequestStatus
from .model import AttendanceRecord, WfhRequest


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def find_in_range(self, employee_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        """Rows with start_date <= work_date <= end_date, oldest first."""

        raise NotImplementedError

    def list_recent_geo_checkins(self, *, limit: int) -> Sequence[AttendanceRecord]:
        """Self-service office check-ins that recorded coordinates, newest first.

        Manual overrides and work-from-home days are excluded.
        """

        raise NotImplementedError

    def save(self, record: AttendanceRecord) -> None:
        """Insert or fully replace the row keyed by (employee_id, work_date)."""

        raise NotImplementedError

    def upsert_status(self, *, employee_id: int, work_date: date, status: AttendanceStatus) -> None:
        """Set only the status, creating the row if missing."""

        raise NotImplementedError


class WfhRequestRepository(Protocol):
    def create(self, *, employee_id: int, work_date: date, reason: str) -> int:
        raise NotImplementedError

    def get(self, request_id: int) -> Optional[WfhRequest]:
        raise NotImplementedError

    def find_for_date(self, employee_id: int, work_date: date) -> Optional[WfhRequest]:
        """Any request of the employee for that day, whatever its status."""

        raise NotImplementedError

    def list_requests(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[WfhRequest]:
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        decided_by: int,
        decided_at: datetime,
        admin_comment: Optional[str] = None,
    ) -> bool:
        """Move a PENDING request to ``status``. False when it is no longer pending."""

        raise NotImplementedError
