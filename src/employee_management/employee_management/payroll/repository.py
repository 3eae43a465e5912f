from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import Payroll, PayrollSnapshot, SalaryComponent, SalaryStructure, SalaryTemplate


class SalaryStructureRepository(Protocol):
    def get_structure(self, employee_id: int) -> Optional[SalaryStructure]:
        raise NotImplementedError

    def replace_structure(
        self,
        *,
        employee_id: int,
        basic_salary: Decimal,
        components: Sequence[SalaryComponent],
    ) -> SalaryStructure:
        """Upsert the structure and delete-and-recreate all of its components."""

        raise NotImplementedError


class SalaryTemplateRepository(Protocol):
    def list_templates(self) -> Sequence[SalaryTemplate]:
        """All templates ordered by name."""

        raise NotImplementedError

    def get_template(self, template_id: int) -> Optional[SalaryTemplate]:
        raise NotImplementedError

    def upsert_template(
        self,
        *,
        name: str,
        description: Optional[str],
        basic_salary: Decimal,
        components: Sequence[SalaryComponent],
    ) -> int:
        """Insert or overwrite the template with this name and return its id."""

        raise NotImplementedError


class PayrollRepository(Protocol):
    def upsert_payroll(self, *, employee_id: int, month: date, snapshot: PayrollSnapshot) -> int:
        """Insert or overwrite the (employee, month) row with status GENERATED."""

        raise NotImplementedError

    def get_by_id(self, payroll_id: int) -> Optional[Payroll]:
        raise NotImplementedError

    def list_for_month(self, month: date) -> Sequence[Payroll]:
        raise NotImplementedError

    def list_paid_for_employee(self, employee_id: int, *, limit: int) -> Sequence[Payroll]:
        raise NotImplementedError

    def set_override(self, *, payroll_id: int, net_salary: Decimal, reason: str) -> bool:
        raise NotImplementedError

    def mark_paid(self, *, payroll_ids: Sequence[int], paid_by: int, paid_date: datetime) -> int:
        """Return the number of rows updated."""

        raise NotImplementedError
