from __future__ import annotations

from dataclasses import dataclass

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.mysql_wfh_request_repository import MySQLWfhRequestRepository
from .attendance.service import AttendanceService
from .attendance.wfh_service import WfhRequestService
from .core.constants import HALF_DAY_HOURS_THRESHOLD
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .geofence.mysql_geo_location_repository import MySQLGeoLocationRepository
from .geofence.service import GeoFenceService
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .leaves.mysql_leave_repository import MySQLLeaveRepository, MySQLPersonalHolidayRepository
from .leaves.personal_holiday_service import PersonalHolidayService
from .leaves.service import LeaveService
from .leaves.unit_of_work import MySQLLeaveUnitOfWork
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.mysql_salary_structure_repository import MySQLSalaryStructureRepository
from .payroll.mysql_salary_template_repository import MySQLSalaryTemplateRepository
from .payroll.report_service import PayrollReportService
from .payroll.service import PayrollService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.service import SettingsService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    employees_repo: MySQLEmployeeRepository
    attendance_repo: MySQLAttendanceRepository
    wfh_requests_repo: MySQLWfhRequestRepository
    geo_locations_repo: MySQLGeoLocationRepository
    holidays_repo: MySQLHolidayRepository
    settings_repo: MySQLSettingsRepository
    structures_repo: MySQLSalaryStructureRepository
    templates_repo: MySQLSalaryTemplateRepository
    payrolls_repo: MySQLPayrollRepository
    leaves_repo: MySQLLeaveRepository
    personal_holidays_repo: MySQLPersonalHolidayRepository

    settings_service: SettingsService
    geo_fence_service: GeoFenceService
    attendance_service: AttendanceService
    wfh_service: WfhRequestService
    payroll_service: PayrollService
    payroll_report_service: PayrollReportService
    leave_service: LeaveService
    personal_holiday_service: PersonalHolidayService


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    wfh_requests_repo = MySQLWfhRequestRepository(conn)
    geo_locations_repo = MySQLGeoLocationRepository(conn)
    holidays_repo = MySQLHolidayRepository(conn)
    settings_repo = MySQLSettingsRepository(conn)
    structures_repo = MySQLSalaryStructureRepository(conn)
    templates_repo = MySQLSalaryTemplateRepository(conn)
    payrolls_repo = MySQLPayrollRepository(conn)
    leaves_repo = MySQLLeaveRepository(conn)
    personal_holidays_repo = MySQLPersonalHolidayRepository(conn)
    uow = MySQLLeaveUnitOfWork(conn)

    attendance_service = AttendanceService(
        attendance_repo,
        geo_locations_repo,
        wfh_requests_repo,
        strategy_factory=AttendanceStrategyFactory(half_day_threshold_hours=HALF_DAY_HOURS_THRESHOLD),
    )

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        wfh_requests_repo=wfh_requests_repo,
        geo_locations_repo=geo_locations_repo,
        holidays_repo=holidays_repo,
        settings_repo=settings_repo,
        structures_repo=structures_repo,
        templates_repo=templates_repo,
        payrolls_repo=payrolls_repo,
        leaves_repo=leaves_repo,
        personal_holidays_repo=personal_holidays_repo,
        settings_service=SettingsService(settings_repo, holidays_repo),
        geo_fence_service=GeoFenceService(geo_locations_repo),
        attendance_service=attendance_service,
        wfh_service=WfhRequestService(wfh_requests_repo),
        payroll_service=PayrollService(structures_repo, payrolls_repo, attendance_repo, employees_repo, templates_repo),
        payroll_report_service=PayrollReportService(payrolls_repo, employees_repo),
        leave_service=LeaveService(leaves_repo, holidays_repo, uow),
        personal_holiday_service=PersonalHolidayService(personal_holidays_repo, employees_repo, uow),
    )
