from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class RemoteStrategy(AttendanceStrategy):
    """Approved work-from-home day."""

    def decide_checkin(self, *, work_from_home: bool) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.WFH)

    def decide_checkout(self, *, hours_worked: float, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=current)
