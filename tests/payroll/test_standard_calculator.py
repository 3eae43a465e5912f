from dataclasses import replace
from decimal import Decimal

import pytest

from src.employee_management.employee_management.attendance.model import AttendanceSummary
from src.employee_management.employee_management.core.enums import CalcType, ComponentType
from src.employee_management.employee_management.payroll.calculator.standard_calculator import StandardPayrollCalculator
from src.employee_management.employee_management.payroll.model import SalaryComponent, SalaryStructure

HRA = SalaryComponent(name="HRA", type=ComponentType.EARNING, calc_type=CalcType.PERCENTAGE, value=Decimal("40"))
PF = SalaryComponent(name="PF", type=ComponentType.DEDUCTION, calc_type=CalcType.PERCENTAGE, value=Decimal("12"))
PROF_TAX = SalaryComponent(name="ProfTax", type=ComponentType.DEDUCTION, calc_type=CalcType.FIXED, value=Decimal("200"))


def _summary(lop=0, half=0, present=0):
    return AttendanceSummary(present_days=present, lop_days=lop, half_day_count=half)


def test_worked_example():
    structure = SalaryStructure(employee_id=1, basic_salary=Decimal("50000"), components=(HRA, PF, PROF_TAX))

    snap = StandardPayrollCalculator().compute(structure, _summary(lop=2, present=24), 26)

    assert snap.total_earnings == Decimal("20000.00")
    assert snap.gross_salary == Decimal("70000.00")
    assert snap.component_deductions == Decimal("6200.00")
    assert snap.lop_amount == Decimal("5384.62")
    assert snap.half_day_amount == Decimal("0.00")
    assert snap.total_deductions == Decimal("11584.62")
    assert snap.net_salary == Decimal("58415.38")
    assert [c.amount for c in snap.components] == [Decimal("20000.00"), Decimal("6000.00"), Decimal("200")]


def test_half_days_are_charged_twice():
    structure = SalaryStructure(employee_id=1, basic_salary=Decimal("26000"))

    snap = StandardPayrollCalculator().compute(structure, _summary(half=2), 26)

    # total LOP = 1 day, plus a separate half-day charge of 1 day
    assert snap.lop_days == 1.0
    assert snap.lop_amount == Decimal("1000.00")
    assert snap.half_day_amount == Decimal("1000.00")
    assert snap.net_salary == Decimal("24000.00")


def test_percentage_rounds_half_up_to_cents():
    calc = StandardPayrollCalculator()
    comp = SalaryComponent(name="X", type=ComponentType.EARNING, calc_type=CalcType.PERCENTAGE, value=Decimal("12.5"))

    # 1234.5 * 12.5% = 154.3125
    assert calc.component_amount(comp, Decimal("1234.50")) == Decimal("154.31")
    # 0.1 * 5% = 0.005
    assert calc.component_amount(replace(comp, value=Decimal("5")), Decimal("0.10")) == Decimal("0.01")


@pytest.mark.parametrize("basic", ["0", "1000", "25000.50", "99999.99"])
def test_percentage_monotonic_and_fixed_constant(basic):
    calc = StandardPayrollCalculator()
    lower = Decimal(basic)
    higher = lower + Decimal("100")

    assert calc.component_amount(HRA, lower) <= calc.component_amount(HRA, higher)
    assert calc.component_amount(PROF_TAX, lower) == calc.component_amount(PROF_TAX, higher) == Decimal("200")


def test_component_order_does_not_change_totals():
    calc = StandardPayrollCalculator()
    a = SalaryStructure(employee_id=1, basic_salary=Decimal("30000"), components=(HRA, PF, PROF_TAX))
    b = SalaryStructure(employee_id=1, basic_salary=Decimal("30000"), components=(PROF_TAX, PF, HRA))

    sa = calc.compute(a, _summary(lop=1), 26)
    sb = calc.compute(b, _summary(lop=1), 26)

    assert (sa.gross_salary, sa.total_deductions, sa.net_salary) == (sb.gross_salary, sb.total_deductions, sb.net_salary)


def test_net_never_negative():
    heavy = SalaryComponent(name="Loan", type=ComponentType.DEDUCTION, calc_type=CalcType.FIXED, value=Decimal("90000"))
    structure = SalaryStructure(employee_id=1, basic_salary=Decimal("10000"), components=(heavy,))

    snap = StandardPayrollCalculator().compute(structure, _summary(lop=30), 26)

    assert snap.net_salary == Decimal("0.00")


def test_zero_working_days_means_no_lop_charge():
    structure = SalaryStructure(employee_id=1, basic_salary=Decimal("10000"))

    snap = StandardPayrollCalculator().compute(structure, _summary(lop=3, half=1), 0)

    assert snap.lop_amount == Decimal("0.00")
    assert snap.half_day_amount == Decimal("0.00")
