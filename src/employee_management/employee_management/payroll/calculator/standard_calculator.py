from __future__ import annotations

from decimal import Decimal

from ...attendance.model import AttendanceSummary
from ...common.money import ZERO, round_money, to_decimal
from ...core.enums import CalcType, ComponentType
from ..model import ComponentSnapshot, PayrollSnapshot, SalaryComponent, SalaryStructure
from .base import PayrollCalculator


def _per_day_deduction(gross: Decimal, working_days: int, days: float) -> Decimal:
    if not working_days or not days:
        return ZERO
    return round_money(gross / Decimal(working_days) * to_decimal(days))


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: gross = basic + earnings; LOP and half days are pro-rated on gross.

    The half-day amount is charged on top of the LOP amount even though
    total LOP already includes half a day per half-day record.
    """

    def component_amount(self, component: SalaryComponent, basic_salary: Decimal) -> Decimal:
        if component.calc_type == CalcType.PERCENTAGE:
            return round_money(to_decimal(basic_salary) * to_decimal(component.value) / 100)
        return to_decimal(component.value)

    def compute(self, structure: SalaryStructure, attendance: AttendanceSummary, working_days: int) -> PayrollSnapshot:
        basic = to_decimal(structure.basic_salary)
        snapshot = tuple(
            ComponentSnapshot(
                component_id=c.component_id,
                name=c.name,
                type=c.type,
                calc_type=c.calc_type,
                value=to_decimal(c.value),
                amount=self.component_amount(c, basic),
            )
            for c in structure.components
        )

        total_earnings = sum((c.amount for c in snapshot if c.type == ComponentType.EARNING), ZERO)
        component_deductions = sum((c.amount for c in snapshot if c.type == ComponentType.DEDUCTION), ZERO)

        gross = basic + total_earnings
        lop_amount = _per_day_deduction(gross, working_days, attendance.total_lop)
        half_day_amount = _per_day_deduction(gross, working_days, attendance.half_day_count * 0.5)
        total_deductions = component_deductions + lop_amount + half_day_amount

        return PayrollSnapshot(
            working_days=int(working_days),
            present_days=attendance.present_days,
            lop_days=attendance.total_lop,
            half_day_count=attendance.half_day_count,
            basic_salary=basic,
            total_earnings=total_earnings,
            gross_salary=gross,
            component_deductions=component_deductions,
            lop_amount=lop_amount,
            half_day_amount=half_day_amount,
            total_deductions=total_deductions,
            net_salary=max(ZERO, gross - total_deductions),
            components=snapshot,
        )
