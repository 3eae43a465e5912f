from datetime import date, datetime
from decimal import Decimal

import pytest

from src.employee_management.employee_management.attendance.model import AttendanceRecord
from src.employee_management.employee_management.core.enums import AttendanceStatus, EmployeeStatus, PayrollStatus
from src.employee_management.employee_management.core.exceptions import NotFoundError, ValidationError
from src.employee_management.employee_management.employees.model import Employee
from src.employee_management.employee_management.payroll.service import PayrollService
from src.employee_management.employee_management.settings.model import CompanySettings

from tests.fakes import InMemoryAttendance, InMemoryEmployees, InMemoryPayrolls, InMemoryStructures, InMemoryTemplates

JUNE = date(2024, 6, 1)
STANDARD_COMPONENTS = [
    {"name": "HRA", "type": "EARNING", "calc_type": "PERCENTAGE", "value": 40},
    {"name": "PF", "type": "DEDUCTION", "calc_type": "PERCENTAGE", "value": 12},
    {"name": "ProfTax", "type": "DEDUCTION", "calc_type": "FIXED", "value": "200"},
]


class ExplodingStructures(InMemoryStructures):
    def __init__(self, bad_employee_id: int):
        super().__init__()
        self.bad_employee_id = bad_employee_id

    def get_structure(self, employee_id: int):
        if employee_id == self.bad_employee_id:
            raise RuntimeError("corrupt structure")
        return super().get_structure(employee_id)


def _setup(structures=None, employees=None, records=(), templates=None):
    employees = employees or InMemoryEmployees(
        [Employee(1, "E001", "Asha"), Employee(2, "E002", "Bruno"), Employee(3, "E003", "Chen")]
    )
    structures = structures if structures is not None else InMemoryStructures()
    payrolls = InMemoryPayrolls(employees)
    attendance = InMemoryAttendance(records)
    templates = templates if templates is not None else InMemoryTemplates()
    svc = PayrollService(structures, payrolls, attendance, employees, templates)
    return svc, payrolls


def _absent(employee_id: int, day: int) -> AttendanceRecord:
    return AttendanceRecord(employee_id=employee_id, work_date=date(2024, 6, day), status=AttendanceStatus.ABSENT)


def test_generate_worked_example_with_working_days_override():
    svc, payrolls = _setup(records=[_absent(1, 4), _absent(1, 5)])
    svc.save_structure(1, basic_salary="50000", components=STANDARD_COMPONENTS)

    result = svc.generate("2024-06", settings=CompanySettings(working_days_per_month=26))

    assert result.generated == 1
    assert result.skipped_employee_ids == [2, 3]
    assert result.errors == []
    payroll = payrolls.list_for_month(JUNE)[0]
    assert payroll.net_salary == Decimal("58415.38")
    assert payroll.lop_days == 2.0
    assert payroll.status == PayrollStatus.GENERATED


def test_generate_uses_calendar_working_days_without_override():
    svc, payrolls = _setup()
    svc.save_structure(1, basic_salary="25000")

    svc.generate("2024-06", settings=CompanySettings())

    # June 2024 has 5 Sundays
    assert payrolls.list_for_month(JUNE)[0].working_days == 25


def test_regeneration_is_idempotent():
    svc, payrolls = _setup(records=[_absent(1, 4)])
    svc.save_structure(1, basic_salary="41000", components=STANDARD_COMPONENTS)
    settings = CompanySettings()

    svc.generate("2024-06", settings=settings)
    first = payrolls.list_for_month(JUNE)
    svc.generate("2024-06", settings=settings)
    second = payrolls.list_for_month(JUNE)

    assert first == second
    assert len(second) == 1


def test_one_failure_does_not_abort_batch():
    structures = ExplodingStructures(bad_employee_id=2)
    svc, payrolls = _setup(structures=structures)
    svc.save_structure(1, basic_salary="30000")
    svc.save_structure(3, basic_salary="32000")

    result = svc.generate("2024-06", settings=CompanySettings())

    assert result.generated == 2
    assert [e.employee_id for e in result.errors] == [2]
    assert result.errors[0].as_dict() == {"employee_id": 2, "employee": "Bruno", "error": "corrupt structure"}
    assert {p.employee_id for p in payrolls.list_for_month(JUNE)} == {1, 3}


def test_inactive_employees_and_zero_basic_are_skipped():
    employees = InMemoryEmployees(
        [Employee(1, "E001", "Asha"), Employee(2, "E002", "Bruno", status=EmployeeStatus.INACTIVE)]
    )
    svc, payrolls = _setup(employees=employees)
    svc.save_structure(1, basic_salary="0")
    svc.save_structure(2, basic_salary="10000")

    result = svc.generate("2024-06", settings=CompanySettings())

    assert result.generated == 0
    assert result.skipped_employee_ids == [1]
    assert payrolls.list_for_month(JUNE) == []


def test_bad_month_is_rejected():
    svc, _ = _setup()

    with pytest.raises(ValidationError):
        svc.generate("2024-13", settings=CompanySettings())


def test_save_structure_validation_and_inactive_components():
    svc, _ = _setup()

    with pytest.raises(NotFoundError):
        svc.save_structure(42, basic_salary="1000")
    with pytest.raises(ValidationError):
        svc.save_structure(1, basic_salary="-1")
    with pytest.raises(ValidationError):
        svc.save_structure(1, basic_salary="1000", components=[{"name": "X", "type": "BONUS", "value": 1}])
    with pytest.raises(ValidationError):
        svc.save_structure(1, basic_salary="1000", components=[{"name": "X", "type": "EARNING", "value": -5}])

    structure = svc.save_structure(
        1,
        basic_salary="1000",
        components=[
            {"name": "Old", "type": "EARNING", "calc_type": "FIXED", "value": 10, "is_active": False},
            {"name": "Meal", "type": "EARNING", "value": 50},
        ],
    )
    assert [c.name for c in structure.components] == ["Meal"]
    assert svc.get_structure(1).basic_salary == Decimal("1000")
    assert svc.get_structure(3).basic_salary == Decimal("0")


def test_override_then_mark_paid():
    svc, payrolls = _setup()
    svc.save_structure(1, basic_salary="30000")
    svc.generate("2024-06", settings=CompanySettings())
    payroll_id = payrolls.list_for_month(JUNE)[0].payroll_id

    overridden = svc.override_salary(payroll_id, net_salary="29500.50", reason="Advance recovered")
    assert overridden.net_salary == Decimal("29500.50")
    assert overridden.override_amount == Decimal("29500.50")
    assert overridden.status == PayrollStatus.GENERATED

    paid = svc.mark_paid(payroll_id, paid_by=9, now=datetime(2024, 7, 1, 10, 0))
    assert paid.status == PayrollStatus.PAID
    assert paid.paid_by == 9
    assert [p.payroll_id for p in svc.employee_slips(1)] == [payroll_id]


def test_override_and_mark_paid_unknown_payroll():
    svc, _ = _setup()

    with pytest.raises(NotFoundError):
        svc.override_salary(7, net_salary="1", reason="x")
    with pytest.raises(NotFoundError):
        svc.mark_paid(7, paid_by=1)
    with pytest.raises(ValidationError):
        svc.bulk_mark_paid([], paid_by=1)


def test_list_month_summary():
    svc, payrolls = _setup()
    svc.save_structure(1, basic_salary="30000")
    svc.save_structure(2, basic_salary="20000")
    svc.generate("2024-06", settings=CompanySettings())
    ids = [p.payroll_id for p in payrolls.list_for_month(JUNE)]
    svc.bulk_mark_paid(ids[:1], paid_by=1)

    data = svc.list_month("2024-06")

    assert data["summary"]["total"] == 2
    assert data["summary"]["paid"] == 1
    assert data["summary"]["total_gross"] == Decimal("50000")
    assert data["summary"]["total_net"] == Decimal("50000")


def test_save_template_overwrites_by_name():
    templates = InMemoryTemplates()
    svc, _ = _setup(templates=templates)

    first = svc.save_template(name="Engineer L1", basic_salary="40000", components=STANDARD_COMPONENTS)
    second = svc.save_template(name="Engineer L1", basic_salary="42000", description=" Revised ")

    assert second.template_id == first.template_id
    assert second.basic_salary == Decimal("42000")
    assert second.description == "Revised"
    assert second.components == ()
    assert [t.name for t in svc.list_templates()] == ["Engineer L1"]
    with pytest.raises(ValidationError):
        svc.save_template(name=" ", basic_salary="1000")


def test_apply_template_replaces_structures():
    structures = InMemoryStructures()
    svc, _ = _setup(structures=structures)
    svc.save_structure(1, basic_salary="10000")
    template = svc.save_template(name="Engineer L1", basic_salary="40000", components=STANDARD_COMPONENTS)

    assert svc.apply_template(template.template_id, [1, "2"]) == 2

    for employee_id in (1, 2):
        structure = svc.get_structure(employee_id)
        assert structure.basic_salary == Decimal("40000")
        assert [c.name for c in structure.components] == ["HRA", "PF", "ProfTax"]
    assert structures.get_structure(3) is None


def test_apply_template_checks_ids_before_writing():
    structures = InMemoryStructures()
    svc, _ = _setup(structures=structures)
    template = svc.save_template(name="Engineer L1", basic_salary="40000")

    with pytest.raises(NotFoundError) as exc:
        svc.apply_template(template.template_id, [1, 41, 42])
    assert "41, 42" in str(exc.value)
    assert structures.get_structure(1) is None

    with pytest.raises(NotFoundError):
        svc.apply_template(99, [1])
    with pytest.raises(ValidationError):
        svc.apply_template(template.template_id, [])
    with pytest.raises(ValidationError):
        svc.apply_template(template.template_id, ["abc"])
