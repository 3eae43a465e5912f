from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local
from ..common.http import admin_required, body_date, body_datetime, current_user_id, json_body, login_required, ok
from ..container import Container
from ..core.exceptions import ValidationError


def _coord(body: dict, key: str):
    value = body.get(key)
    if value in (None, ""):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be a number")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/checkin", methods=["POST"], endpoint="attendance_checkin")
    @login_required
    def checkin():
        body = json_body()
        record = container.attendance_service.check_in(
            current_user_id(),
            settings=container.settings_service.current(),
            latitude=_coord(body, "latitude"),
            longitude=_coord(body, "longitude"),
        )
        message = "Checked in (work from home)" if record.is_wfh else "Checked in"
        return ok(record, message)

    @app.route("/api/attendance/checkout", methods=["POST"], endpoint="attendance_checkout")
    @login_required
    def checkout():
        body = json_body()
        record = container.attendance_service.check_out(
            current_user_id(),
            latitude=_coord(body, "latitude"),
            longitude=_coord(body, "longitude"),
        )
        return ok(record, f"Checked out. Hours worked: {record.hours_worked}")

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def today():
        return ok(container.attendance_service.get_today_record(current_user_id(), now_local().date()))

    @app.route("/api/attendance/monthly", methods=["GET"], endpoint="attendance_monthly")
    @login_required
    def monthly():
        month = request.args.get("month") or now_local().strftime("%Y-%m")
        return ok(container.attendance_service.monthly_summary(current_user_id(), month=month))

    @app.route("/api/admin/attendance/<int:employee_id>/monthly", methods=["GET"], endpoint="admin_attendance_monthly")
    @admin_required
    def admin_monthly(employee_id: int):
        month = request.args.get("month") or now_local().strftime("%Y-%m")
        return ok(container.attendance_service.monthly_summary(employee_id, month=month))

    @app.route("/api/admin/attendance/override", methods=["POST"], endpoint="admin_attendance_override")
    @admin_required
    def override():
        body = json_body()
        record = container.attendance_service.manual_override(
            admin_id=current_user_id(),
            employee_id=int(body.get("employee_id") or 0),
            work_date=body_date(body, "date"),
            status=body.get("status"),
            reason=body.get("reason", ""),
            check_in=body_datetime(body, "check_in"),
            check_out=body_datetime(body, "check_out"),
        )
        return ok(record, "Attendance updated")

    @app.route("/api/admin/attendance/out-of-range", methods=["GET"], endpoint="admin_attendance_out_of_range")
    @admin_required
    def out_of_range():
        return ok(container.attendance_service.out_of_range_checkins())

    # Work from home requests

    @app.route("/api/attendance/wfh-requests", methods=["POST"], endpoint="wfh_request_create")
    @login_required
    def wfh_request():
        body = json_body()
        request_id = container.wfh_service.request(
            employee_id=current_user_id(),
            work_date=body_date(body, "date"),
            reason=body.get("reason", ""),
        )
        return ok({"request_id": request_id}, "WFH request submitted", 201)

    @app.route("/api/attendance/wfh-requests", methods=["GET"], endpoint="wfh_request_my_list")
    @login_required
    def my_wfh_requests():
        return ok(container.wfh_service.list_requests(employee_id=current_user_id(), status=request.args.get("status")))

    @app.route("/api/admin/attendance/wfh-requests", methods=["GET"], endpoint="wfh_request_admin_list")
    @admin_required
    def admin_wfh_requests():
        employee_id = request.args.get("employee_id", type=int)
        return ok(container.wfh_service.list_requests(employee_id=employee_id, status=request.args.get("status")))

    @app.route("/api/admin/attendance/wfh-requests/<int:request_id>/approve", methods=["PUT"], endpoint="wfh_request_approve")
    @admin_required
    def approve_wfh(request_id: int):
        decided = container.wfh_service.approve(request_id, admin_id=current_user_id(), comment=json_body().get("comment", ""))
        return ok(decided, "WFH request approved")

    @app.route("/api/admin/attendance/wfh-requests/<int:request_id>/reject", methods=["PUT"], endpoint="wfh_request_reject")
    @admin_required
    def reject_wfh(request_id: int):
        decided = container.wfh_service.reject(request_id, admin_id=current_user_id(), comment=json_body().get("comment", ""))
        return ok(decided, "WFH request rejected")
