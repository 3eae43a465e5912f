from datetime import date

import pytest

from src.employee_management.employee_management.attendance.service import AttendanceService
from src.employee_management.employee_management.attendance.wfh_service import WfhRequestService
from src.employee_management.employee_management.container import Container
from src.employee_management.employee_management.employees.model import Employee
from src.employee_management.employee_management.geofence.model import GeoLocation
from src.employee_management.employee_management.geofence.service import GeoFenceService
from src.employee_management.employee_management.leaves.personal_holiday_service import PersonalHolidayService
from src.employee_management.employee_management.leaves.service import LeaveService
from src.employee_management.employee_management.main import create_app
from src.employee_management.employee_management.payroll.report_service import PayrollReportService
from src.employee_management.employee_management.payroll.service import PayrollService
from src.employee_management.employee_management.settings.service import SettingsService

from tests.fakes import (
    FakeUnitOfWork,
    InMemoryAttendance,
    InMemoryEmployees,
    InMemoryGeoLocations,
    InMemoryHolidays,
    InMemoryLeaves,
    InMemoryPayrolls,
    InMemoryPersonalHolidays,
    InMemorySettings,
    InMemoryStructures,
    InMemoryTemplates,
    InMemoryWfhRequests,
)


@pytest.fixture
def app(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")

    employees = InMemoryEmployees([Employee(1, "E001", "Asha")])
    attendance = InMemoryAttendance()
    geo = InMemoryGeoLocations([GeoLocation(1, "HQ", 12.9716, 77.5946, 100)])
    holidays = InMemoryHolidays()
    settings = InMemorySettings()
    structures = InMemoryStructures()
    payrolls = InMemoryPayrolls(employees)
    leaves = InMemoryLeaves()
    leaves.create_leave_type(code="CL", name="Casual", default_days=12, is_carry_forward=False, max_carry_forward=0)
    leaves.add_balance(1, 1, 2024, total=5)
    personal = InMemoryPersonalHolidays()
    wfh = InMemoryWfhRequests()
    templates = InMemoryTemplates()
    uow = FakeUnitOfWork(leaves, personal, attendance)

    container = Container(
        conn=None,
        employees_repo=employees,
        attendance_repo=attendance,
        wfh_requests_repo=wfh,
        geo_locations_repo=geo,
        holidays_repo=holidays,
        settings_repo=settings,
        structures_repo=structures,
        templates_repo=templates,
        payrolls_repo=payrolls,
        leaves_repo=leaves,
        personal_holidays_repo=personal,
        settings_service=SettingsService(settings, holidays),
        geo_fence_service=GeoFenceService(geo),
        attendance_service=AttendanceService(attendance, geo, wfh),
        wfh_service=WfhRequestService(wfh),
        payroll_service=PayrollService(structures, payrolls, attendance, employees, templates),
        payroll_report_service=PayrollReportService(payrolls, employees),
        leave_service=LeaveService(leaves, holidays, uow),
        personal_holiday_service=PersonalHolidayService(personal, employees, uow),
    )
    return create_app(container=container)


def _login(client, user_id=1, role="EMPLOYEE"):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role


def test_requires_login(app):
    resp = app.test_client().get("/api/leaves/balance")

    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_admin_route_forbidden_for_employee(app):
    client = app.test_client()
    _login(client)

    resp = client.post("/api/admin/payroll/generate", json={"month": "2024-06"})

    assert resp.status_code == 403


def test_insufficient_balance_maps_to_400_with_shortfall(app):
    client = app.test_client()
    _login(client)

    resp = client.post(
        "/api/leaves",
        json={"leave_type_id": 1, "from_date": "2024-06-03", "to_date": "2024-06-08", "reason": "Trip"},
    )

    body = resp.get_json()
    assert resp.status_code == 400
    assert body["shortfall"] == 1


def test_overlap_maps_to_409(app):
    client = app.test_client()
    _login(client)
    payload = {"leave_type_id": 1, "from_date": "2024-06-03", "to_date": "2024-06-04", "reason": "Trip"}

    assert client.post("/api/leaves", json=payload).status_code == 201
    assert client.post("/api/leaves", json=payload).status_code == 409


def test_unknown_payroll_maps_to_404(app):
    client = app.test_client()
    _login(client, role="ADMIN")

    resp = client.put("/api/admin/payroll/99/paid")

    assert resp.status_code == 404
    assert resp.get_json()["message"] == "Payroll not found"


def test_bad_date_maps_to_400(app):
    client = app.test_client()
    _login(client, role="ADMIN")

    resp = client.post("/api/admin/holidays", json={"name": "X", "date": "15-08-2024"})

    assert resp.status_code == 400


def test_generate_and_list_payroll_as_json(app):
    client = app.test_client()
    _login(client, role="ADMIN")

    saved = client.put(
        "/api/admin/salary/1",
        json={"basic_salary": 50000, "components": [{"name": "HRA", "type": "EARNING", "calc_type": "PERCENTAGE", "value": 40}]},
    )
    assert saved.status_code == 200

    generated = client.post("/api/admin/payroll/generate", json={"month": "2024-06"}).get_json()
    assert generated["data"]["generated"] == 1
    assert generated["data"]["month"] == date(2024, 6, 1).isoformat()

    listed = client.get("/api/admin/payroll?month=2024-06").get_json()["data"]
    assert listed["summary"]["total_gross"] == "70000.00"
    assert listed["payrolls"][0]["components"][0]["amount"] == "20000.00"
    assert listed["payrolls"][0]["status"] == "GENERATED"


def test_checkin_ignores_client_wfh_flag(app):
    client = app.test_client()
    _login(client)

    resp = client.post("/api/attendance/checkin", json={"latitude": 13.5, "longitude": 78.0, "work_from_home": True})

    assert resp.status_code == 400
    assert "away from office" in resp.get_json()["message"]


def test_approved_wfh_request_allows_remote_checkin(app):
    client = app.test_client()
    _login(client)
    created = client.post("/api/attendance/wfh-requests", json={"date": date.today().isoformat(), "reason": "Plumber"})
    assert created.status_code == 201
    request_id = created.get_json()["data"]["request_id"]

    _login(client, user_id=9, role="ADMIN")
    approved = client.put(f"/api/admin/attendance/wfh-requests/{request_id}/approve", json={})
    assert approved.get_json()["data"]["status"] == "APPROVED"

    _login(client)
    resp = client.post("/api/attendance/checkin", json={"latitude": 13.5, "longitude": 78.0})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["is_wfh"] is True


def test_non_numeric_radius_maps_to_400(app):
    client = app.test_client()
    _login(client, role="ADMIN")

    resp = client.post("/api/admin/geo-locations", json={"name": "Annex", "latitude": 12.9, "longitude": 77.5, "radius": "wide"})

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Radius must be a number"


def test_personal_holiday_year_end_and_bulk_quota(app):
    client = app.test_client()
    _login(client, role="ADMIN")

    bulk = client.put("/api/admin/personal-holidays/quota", json={"year": 2024, "total": 4}).get_json()
    assert bulk["data"] == {"updated": 1, "year": 2024}

    reset = client.post("/api/admin/personal-holidays/year-end", json={"year": 2024}).get_json()
    assert reset["data"] == {"processed": 1, "year": 2025}

    assert client.post("/api/admin/personal-holidays/year-end", json={"year": "last"}).status_code == 400
