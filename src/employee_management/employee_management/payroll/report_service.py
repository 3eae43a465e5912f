from __future__ import annotations

from dataclasses import dataclass

from ..common.datetime_utils import month_range
from ..common.money import ZERO
from ..core.enums import PayrollStatus
from ..employees.repository import EmployeeRepository
from .repository import PayrollRepository


@dataclass(frozen=True)
class ReportData:
    month: str
    rows: list[dict]
    summary: dict


class PayrollReportService:
    """Month-level payroll and loss-of-pay figures built from generated payroll rows."""

    def __init__(self, payrolls: PayrollRepository, employees: EmployeeRepository):
        self._payrolls = payrolls
        self._employees = employees

    def build_payroll_report(self, month: str) -> ReportData:
        rng = month_range(month)
        payrolls = sorted(self._payrolls.list_for_month(rng.start), key=lambda p: (p.employee_name or "", p.employee_id))

        rows = []
        for p in payrolls:
            employee = self._employees.get_by_id(p.employee_id)
            rows.append(
                {
                    "employee_id": p.employee_id,
                    "employee_code": employee.code if employee else None,
                    "name": p.employee_name or (employee.name if employee else None),
                    "basic": p.basic_salary,
                    "gross": p.gross_salary,
                    "deductions": p.total_deductions,
                    "lop_days": p.lop_days,
                    "lop_amount": p.lop_amount,
                    "net": p.net_salary,
                    "status": p.status.value,
                }
            )

        summary = {
            "total_gross": sum((p.gross_salary for p in payrolls), ZERO),
            "total_net": sum((p.net_salary for p in payrolls), ZERO),
            "total_deductions": sum((p.total_deductions for p in payrolls), ZERO),
            "total_lop": sum((p.lop_amount for p in payrolls), ZERO),
            "paid": sum(1 for p in payrolls if p.status == PayrollStatus.PAID),
            "total": len(payrolls),
        }
        return ReportData(month=rng.label, rows=rows, summary=summary)

    def build_lop_report(self, month: str) -> ReportData:
        """Active employees whose payroll for ``month`` carries loss of pay."""
        rng = month_range(month)
        by_employee = {p.employee_id: p for p in self._payrolls.list_for_month(rng.start)}

        rows = []
        for employee in self._employees.list_active():
            p = by_employee.get(employee.employee_id)
            if p is None or p.lop_days <= 0:
                continue
            rows.append(
                {
                    "employee_id": employee.employee_id,
                    "employee_code": employee.code,
                    "name": employee.name,
                    "working_days": p.working_days,
                    "present_days": p.present_days,
                    "lop_days": p.lop_days,
                    "lop_amount": p.lop_amount,
                }
            )

        summary = {
            "total_lop_days": sum(r["lop_days"] for r in rows),
            "total_lop_amount": sum((r["lop_amount"] for r in rows), ZERO),
            "employees": len(rows),
        }
        return ReportData(month=rng.label, rows=rows, summary=summary)
