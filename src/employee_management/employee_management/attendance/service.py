from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import month_range, now_local
from ..common.validators import require_enum, require_non_empty
from ..core.constants import DEFAULT_GEO_RADIUS_METERS, OUT_OF_RANGE_SCAN_LIMIT
from ..core.enums import AttendanceStatus, RequestStatus
from ..core.exceptions import ConflictError, ValidationError
from ..geofence.repository import GeoLocationRepository
from ..geofence.validator import validate_geo_location
from ..settings.model import CompanySettings
from .day_counter import summarize_month
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, OutOfRangeCheckIn
from .repository import AttendanceRepository, WfhRequestRepository

logger = logging.getLogger(__name__)


def _hours_between(start: datetime, end: datetime) -> float:
    return round((end - start).total_seconds() / 3600, 2)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        geo_locations: GeoLocationRepository,
        wfh_requests: WfhRequestRepository,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
    ):
        self._attendance = attendance
        self._geo_locations = geo_locations
        self._wfh_requests = wfh_requests
        self._factory = strategy_factory or AttendanceStrategyFactory()

    def _enforce_geo_fence(self, latitude: float, longitude: float) -> None:
        geo = validate_geo_location(latitude, longitude, self._geo_locations.list_active())
        if not geo.valid:
            radius = (geo.location.radius if geo.location else None) or DEFAULT_GEO_RADIUS_METERS
            logger.info("Check-in rejected: %sm from %s", geo.distance, geo.location.name if geo.location else "-")
            raise ValidationError(f"You are {geo.distance}m away from office. Must be within {radius}m to check in.")

    def _wfh_approved(self, employee_id: int, day: date) -> bool:
        request = self._wfh_requests.find_for_date(int(employee_id), day)
        return bool(request and request.status == RequestStatus.APPROVED)

    def check_in(
        self,
        employee_id: int,
        *,
        settings: CompanySettings,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        """Record today's check-in. Work from home needs an approved request for the day."""
        now = now or now_local()
        today = now.date()

        existing = self._attendance.get_for_employee_and_date(employee_id, today)
        if existing and existing.check_in_time:
            raise ConflictError("Already checked in today")

        work_from_home = self._wfh_approved(employee_id, today)
        has_coords = latitude is not None and longitude is not None
        if settings.geo_fence_enabled and not work_from_home and has_coords:
            self._enforce_geo_fence(float(latitude), float(longitude))

        decision = self._factory.for_checkin(work_from_home=work_from_home).decide_checkin(work_from_home=work_from_home)
        record = AttendanceRecord(
            attendance_id=existing.attendance_id if existing else None,
            employee_id=int(employee_id),
            work_date=today,
            status=decision.status,
            check_in_time=now,
            check_in_lat=float(latitude) if latitude is not None else None,
            check_in_lng=float(longitude) if longitude is not None else None,
            is_wfh=bool(work_from_home),
        )
        self._attendance.save(record)
        return record

    def check_out(
        self,
        employee_id: int,
        *,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        record = self._attendance.get_for_employee_and_date(employee_id, now.date())
        if not record or not record.check_in_time:
            raise ValidationError("You haven't checked in today")
        if record.check_out_time is not None:
            raise ConflictError("Already checked out today")

        hours = _hours_between(record.check_in_time, now)
        decision = self._factory.for_checkout(hours_worked=hours).decide_checkout(hours_worked=hours, current=record.status)

        updated = replace(
            record,
            check_out_time=now,
            check_out_lat=float(latitude) if latitude is not None else None,
            check_out_lng=float(longitude) if longitude is not None else None,
            hours_worked=hours,
            status=decision.status,
        )
        self._attendance.save(updated)
        return updated

    def get_today_record(self, employee_id: int, today: date) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_employee_and_date(employee_id, today)

    def manual_override(
        self,
        *,
        admin_id: int,
        employee_id: int,
        work_date: date,
        status,
        reason: str,
        check_in: Optional[datetime] = None,
        check_out: Optional[datetime] = None,
    ) -> AttendanceRecord:
        status = require_enum(AttendanceStatus, status, "Status")
        reason = require_non_empty(reason, "Reason")
        if check_in and check_out and check_out < check_in:
            raise ValidationError("Check-out cannot be before check-in")

        existing = self._attendance.get_for_employee_and_date(employee_id, work_date)
        record = AttendanceRecord(
            attendance_id=existing.attendance_id if existing else None,
            employee_id=int(employee_id),
            work_date=work_date,
            status=status,
            check_in_time=check_in,
            check_out_time=check_out,
            hours_worked=_hours_between(check_in, check_out) if check_in and check_out else None,
            is_manual_override=True,
            override_reason=reason,
            override_by=int(admin_id),
        )
        self._attendance.save(record)
        logger.info("Attendance override employee=%s date=%s status=%s by=%s", employee_id, work_date, status.value, admin_id)
        return record

    def monthly_summary(self, employee_id: int, *, month: str) -> dict:
        rng = month_range(month)
        records = self._attendance.find_in_range(employee_id, rng.start, rng.end)
        summary = summarize_month(records)
        return {
            "month": rng.label,
            "records": list(records),
            "summary": {
                "present_days": summary.present_days,
                "lop_days": summary.lop_days,
                "half_day_count": summary.half_day_count,
                "total_lop": summary.total_lop,
                "by_status": summary.by_status,
            },
        }

    def out_of_range_checkins(self, *, limit: int = OUT_OF_RANGE_SCAN_LIMIT) -> Sequence[OutOfRangeCheckIn]:
        """Scan the latest ``limit`` office check-ins and keep those outside the fence."""
        locations = self._geo_locations.list_active()
        flagged = []
        for record in self._attendance.list_recent_geo_checkins(limit=int(limit)):
            geo = validate_geo_location(record.check_in_lat, record.check_in_lng, locations)
            if geo.valid:
                continue
            flagged.append(
                OutOfRangeCheckIn(
                    record=record,
                    distance=geo.distance,
                    location_name=geo.location.name if geo.location else None,
                    radius=(geo.location.radius if geo.location else None) or DEFAULT_GEO_RADIUS_METERS,
                )
            )
        return flagged
