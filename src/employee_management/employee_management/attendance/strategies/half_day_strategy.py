from __future__ import annotations

from ...core.constants import HALF_DAY_HOURS_THRESHOLD
from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class HalfDayStrategy(AttendanceStrategy):
    """Short day on checkout: downgrade to HALF_DAY."""

    def decide_checkin(self, *, work_from_home: bool) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.WFH if work_from_home else AttendanceStatus.PRESENT)

    def decide_checkout(self, *, hours_worked: float, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(
            status=AttendanceStatus.HALF_DAY,
            note=f"Worked {hours_worked:.2f}h (< {HALF_DAY_HOURS_THRESHOLD}h)",
        )
