from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..attendance.day_counter import summarize_month, working_days_in_month
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_range, now_local
from ..common.money import ZERO
from ..common.validators import require_enum, require_id_list, require_non_empty, require_non_negative
from ..core.constants import DEFAULT_SLIP_LIMIT
from ..core.enums import CalcType, ComponentType, PayrollStatus
from ..core.exceptions import ComputationSkipped, NotFoundError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..settings.model import CompanySettings
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import GenerationResult, Payroll, SalaryComponent, SalaryStructure, SalaryTemplate
from .repository import PayrollRepository, SalaryStructureRepository, SalaryTemplateRepository

logger = logging.getLogger(__name__)


class PayrollService:
    def __init__(
        self,
        structures: SalaryStructureRepository,
        payrolls: PayrollRepository,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        templates: SalaryTemplateRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._structures = structures
        self._templates = templates
        self._payrolls = payrolls
        self._attendance = attendance
        self._employees = employees
        self._calculator = calculator or StandardPayrollCalculator()

    # Salary structure

    def get_structure(self, employee_id: int) -> SalaryStructure:
        structure = self._structures.get_structure(int(employee_id))
        if structure is None:
            return SalaryStructure(employee_id=int(employee_id), basic_salary=ZERO, components=())
        return structure

    @staticmethod
    def _parse_components(items: Iterable[dict]) -> list[SalaryComponent]:
        parsed = []
        for i, item in enumerate(items):
            label = f"Component #{i + 1}"
            is_active = item.get("is_active", True) is not False
            if not is_active:
                continue
            parsed.append(
                SalaryComponent(
                    name=require_non_empty(item.get("name"), f"{label} name"),
                    type=require_enum(ComponentType, item.get("type"), f"{label} type"),
                    calc_type=require_enum(CalcType, item.get("calc_type") or CalcType.FIXED.value, f"{label} calc type"),
                    value=require_non_negative(item.get("value"), f"{label} value"),
                    is_active=True,
                    order=len(parsed),
                )
            )
        return parsed

    def save_structure(self, employee_id: int, *, basic_salary, components: Iterable[dict] = ()) -> SalaryStructure:
        if not self._employees.get_by_id(int(employee_id)):
            raise NotFoundError("Employee not found")

        basic = require_non_negative(basic_salary, "Basic salary")
        parsed = self._parse_components(components)
        return self._structures.replace_structure(employee_id=int(employee_id), basic_salary=basic, components=parsed)

    # Salary templates

    def list_templates(self) -> Sequence[SalaryTemplate]:
        return self._templates.list_templates()

    def save_template(
        self,
        *,
        name: str,
        basic_salary,
        components: Iterable[dict] = (),
        description: Optional[str] = None,
    ) -> SalaryTemplate:
        """Create the template, or overwrite the one that already has this name."""
        template_id = self._templates.upsert_template(
            name=require_non_empty(name, "Template name"),
            description=(description or "").strip() or None,
            basic_salary=require_non_negative(basic_salary, "Basic salary"),
            components=self._parse_components(components),
        )
        return self._templates.get_template(template_id)

    def apply_template(self, template_id: int, employee_ids: Sequence[int]) -> int:
        """Replace the salary structure of each employee with the template. All ids are checked first."""
        template = self._templates.get_template(int(template_id))
        if not template:
            raise NotFoundError("Template not found")
        ids = require_id_list(employee_ids, "Employees")
        missing = [i for i in ids if not self._employees.get_by_id(i)]
        if missing:
            raise NotFoundError(f"Employee not found: {', '.join(str(i) for i in missing)}")

        for employee_id in ids:
            self._structures.replace_structure(
                employee_id=employee_id,
                basic_salary=template.basic_salary,
                components=template.components,
            )
        logger.info("Salary template %s applied to %d employees", template.name, len(ids))
        return len(ids)

    # Generation

    def _generate_for(self, employee: Employee, structure: SalaryStructure, *, rng, working_days: int) -> None:
        records = self._attendance.find_in_range(employee.employee_id, rng.start, rng.end)
        snapshot = self._calculator.compute(structure, summarize_month(records), working_days)
        self._payrolls.upsert_payroll(employee_id=employee.employee_id, month=rng.start, snapshot=snapshot)

    def generate(self, month: str, *, settings: CompanySettings) -> GenerationResult:
        """Generate (or regenerate) payrolls of every active employee for ``month`` (YYYY-MM).

        Regenerating overwrites existing rows, PAID ones included.
        """
        rng = month_range(month)
        working_days = working_days_in_month(rng.year, rng.month, settings.working_days_per_month)
        result = GenerationResult(month=rng.start)

        for employee in self._employees.list_active():
            try:
                structure = self._structures.get_structure(employee.employee_id)
                if structure is None or not structure.basic_salary:
                    result.skipped_employee_ids.append(employee.employee_id)
                    continue
                self._generate_for(employee, structure, rng=rng, working_days=working_days)
                result.generated += 1
            except Exception as exc:
                logger.warning("Payroll %s skipped for employee %s: %s", rng.label, employee.employee_id, exc)
                result.errors.append(
                    ComputationSkipped(employee_id=employee.employee_id, employee_name=employee.name, reason=str(exc))
                )

        logger.info(
            "Payroll %s generated=%d skipped=%d errors=%d",
            rng.label,
            result.generated,
            len(result.skipped_employee_ids),
            len(result.errors),
        )
        return result

    # Payroll rows

    def get_payroll(self, payroll_id: int) -> Payroll:
        payroll = self._payrolls.get_by_id(int(payroll_id))
        if not payroll:
            raise NotFoundError("Payroll not found")
        return payroll

    def override_salary(self, payroll_id: int, *, net_salary, reason: str) -> Payroll:
        self.get_payroll(payroll_id)
        amount = require_non_negative(net_salary, "Net salary")
        reason = require_non_empty(reason, "Reason")
        self._payrolls.set_override(payroll_id=int(payroll_id), net_salary=amount, reason=reason)
        return self.get_payroll(payroll_id)

    def mark_paid(self, payroll_id: int, *, paid_by: int, now: datetime | None = None) -> Payroll:
        self.get_payroll(payroll_id)
        self._payrolls.mark_paid(payroll_ids=[int(payroll_id)], paid_by=int(paid_by), paid_date=now or now_local())
        return self.get_payroll(payroll_id)

    def bulk_mark_paid(self, payroll_ids: Sequence[int], *, paid_by: int, now: datetime | None = None) -> int:
        return self._payrolls.mark_paid(
            payroll_ids=require_id_list(payroll_ids, "Payrolls"),
            paid_by=int(paid_by),
            paid_date=now or now_local(),
        )

    def list_month(self, month: str) -> dict:
        rng = month_range(month)
        payrolls = list(self._payrolls.list_for_month(rng.start))
        summary = {
            "total_gross": sum((p.gross_salary for p in payrolls), ZERO),
            "total_net": sum((p.net_salary for p in payrolls), ZERO),
            "total_deductions": sum((p.total_deductions for p in payrolls), ZERO),
            "paid": sum(1 for p in payrolls if p.status == PayrollStatus.PAID),
            "total": len(payrolls),
        }
        return {"month": rng.label, "payrolls": payrolls, "summary": summary}

    def employee_slips(self, employee_id: int, *, limit: int = DEFAULT_SLIP_LIMIT) -> Sequence[Payroll]:
        return self._payrolls.list_paid_for_employee(int(employee_id), limit=int(limit))
