from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ...attendance.model import AttendanceSummary
from ..model import PayrollSnapshot, SalaryComponent, SalaryStructure


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def component_amount(self, component: SalaryComponent, basic_salary: Decimal) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def compute(self, structure: SalaryStructure, attendance: AttendanceSummary, working_days: int) -> PayrollSnapshot:
        raise NotImplementedError
