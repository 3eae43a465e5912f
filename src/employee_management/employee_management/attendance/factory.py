from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import HALF_DAY_HOURS_THRESHOLD
from .strategies.base import AttendanceStrategy
from .strategies.half_day_strategy import HalfDayStrategy
from .strategies.normal_strategy import NormalStrategy
from .strategies.remote_strategy import RemoteStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    half_day_threshold_hours: float = HALF_DAY_HOURS_THRESHOLD

    def for_checkin(self, *, work_from_home: bool) -> AttendanceStrategy:
        if work_from_home:
            return RemoteStrategy()
        return NormalStrategy()

    def for_checkout(self, *, hours_worked: float) -> AttendanceStrategy:
        if hours_worked < self.half_day_threshold_hours:
            return HalfDayStrategy()
        return NormalStrategy()
