from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import CalcType, ComponentType, PayrollStatus
from ..core.exceptions import ComputationSkipped


@dataclass(frozen=True)
class SalaryComponent:
    """Earning or deduction line item of a salary structure."""

    name: str
    type: ComponentType
    calc_type: CalcType
    value: Decimal
    is_active: bool = True
    order: int = 0
    component_id: Optional[int] = None


@dataclass(frozen=True)
class SalaryStructure:
    employee_id: int
    basic_salary: Decimal
    components: tuple[SalaryComponent, ...] = ()
    structure_id: Optional[int] = None


@dataclass(frozen=True)
class SalaryTemplate:
    """Reusable basic salary and component list, copied into structures on apply."""

    template_id: int
    name: str
    basic_salary: Decimal
    components: tuple[SalaryComponent, ...] = ()
    description: Optional[str] = None


@dataclass(frozen=True)
class ComponentSnapshot:
    """Component as resolved at generation time, detached from the live structure."""

    name: str
    type: ComponentType
    calc_type: CalcType
    value: Decimal
    amount: Decimal
    component_id: Optional[int] = None

    def as_dict(self) -> dict:
        return {
            "id": self.component_id,
            "name": self.name,
            "type": self.type.value,
            "calc_type": self.calc_type.value,
            "value": str(self.value),
            "amount": str(self.amount),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ComponentSnapshot":
        return cls(
            component_id=data.get("id"),
            name=data["name"],
            type=ComponentType(data["type"]),
            calc_type=CalcType(data["calc_type"]),
            value=Decimal(str(data["value"])),
            amount=Decimal(str(data["amount"])),
        )


@dataclass(frozen=True)
class PayrollSnapshot:
    """Computed figures for one employee and month."""

    working_days: int
    present_days: int
    lop_days: float
    half_day_count: int
    basic_salary: Decimal
    total_earnings: Decimal
    gross_salary: Decimal
    component_deductions: Decimal
    lop_amount: Decimal
    half_day_amount: Decimal
    total_deductions: Decimal
    net_salary: Decimal
    components: tuple[ComponentSnapshot, ...] = ()


@dataclass(frozen=True)
class Payroll:
    """Stored payroll row. ``net_salary`` reflects an override when one was applied."""

    payroll_id: int
    employee_id: int
    month: date
    working_days: int
    present_days: int
    lop_days: float
    half_day_count: int
    basic_salary: Decimal
    gross_salary: Decimal
    total_deductions: Decimal
    lop_amount: Decimal
    half_day_amount: Decimal
    net_salary: Decimal
    components: tuple[ComponentSnapshot, ...]
    status: PayrollStatus
    override_amount: Optional[Decimal] = None
    override_reason: Optional[str] = None
    paid_date: Optional[datetime] = None
    paid_by: Optional[int] = None
    employee_name: Optional[str] = None


@dataclass
class GenerationResult:
    month: date
    generated: int = 0
    skipped_employee_ids: list[int] = field(default_factory=list)
    errors: list[ComputationSkipped] = field(default_factory=list)
