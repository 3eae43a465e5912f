from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """Office check-in, check-out keeps the day's status."""

    def decide_checkin(self, *, work_from_home: bool) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)

    def decide_checkout(self, *, hours_worked: float, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=current)
