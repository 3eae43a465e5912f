from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local
from ..common.http import admin_required, body_date, current_user_id, json_body, login_required, ok
from ..container import Container
from ..core.enums import RolloverMode
from ..core.exceptions import ValidationError


def _year_arg() -> int:
    value = request.args.get("year")
    try:
        return int(value) if value else now_local().year
    except ValueError:
        raise ValidationError("Year must be an integer")


def _body_year(body: dict) -> int:
    try:
        return int(body.get("year") or now_local().year)
    except (TypeError, ValueError):
        raise ValidationError("Year must be an integer")


def register(app: Flask, container: Container) -> None:
    leaves = container.leave_service
    personal = container.personal_holiday_service

    # Leave types and balances

    @app.route("/api/leaves/types", methods=["GET"], endpoint="leave_types")
    @login_required
    def leave_types():
        return ok(leaves.list_leave_types())

    @app.route("/api/admin/leaves/types", methods=["POST"], endpoint="leave_type_create")
    @admin_required
    def create_leave_type():
        body = json_body()
        leave_type_id = leaves.create_leave_type(
            code=body.get("code", ""),
            name=body.get("name", ""),
            default_days=body.get("default_days", 0),
            is_carry_forward=bool(body.get("is_carry_forward")),
            max_carry_forward=body.get("max_carry_forward", 0),
        )
        return ok({"leave_type_id": leave_type_id}, "Leave type created", 201)

    @app.route("/api/admin/leaves/types", methods=["GET"], endpoint="leave_type_admin_list")
    @admin_required
    def admin_leave_types():
        return ok(leaves.list_leave_types(include_inactive=True))

    @app.route("/api/admin/leaves/types/<int:leave_type_id>", methods=["PUT"], endpoint="leave_type_update")
    @admin_required
    def update_leave_type(leave_type_id: int):
        body = json_body()
        leave_type = leaves.update_leave_type(
            leave_type_id,
            name=body.get("name"),
            default_days=body.get("default_days"),
            is_carry_forward=body.get("is_carry_forward"),
            max_carry_forward=body.get("max_carry_forward"),
            is_active=body.get("is_active"),
        )
        return ok(leave_type, "Leave type updated")

    @app.route("/api/leaves/balance", methods=["GET"], endpoint="leave_balance")
    @login_required
    def balance():
        return ok(leaves.balances(current_user_id(), year=_year_arg()))

    # Requests

    @app.route("/api/leaves", methods=["GET"], endpoint="leave_my_list")
    @login_required
    def my_leaves():
        return ok(leaves.list_leaves(employee_id=current_user_id(), status=request.args.get("status")))

    @app.route("/api/leaves", methods=["POST"], endpoint="leave_apply")
    @login_required
    def apply():
        body = json_body()
        leave_id = leaves.apply(
            employee_id=current_user_id(),
            leave_type_id=int(body.get("leave_type_id") or 0),
            from_date=body_date(body, "from_date"),
            to_date=body_date(body, "to_date"),
            reason=body.get("reason", ""),
            is_half_day=bool(body.get("is_half_day")),
        )
        return ok({"leave_id": leave_id}, "Leave application submitted", 201)

    @app.route("/api/leaves/<int:leave_id>/cancel", methods=["PUT"], endpoint="leave_cancel")
    @login_required
    def cancel(leave_id: int):
        leaves.cancel(leave_id, employee_id=current_user_id())
        return ok(message="Leave cancelled")

    @app.route("/api/admin/leaves", methods=["GET"], endpoint="leave_admin_list")
    @admin_required
    def admin_leaves():
        employee_id = request.args.get("employee_id", type=int)
        return ok(leaves.list_leaves(employee_id=employee_id, status=request.args.get("status")))

    @app.route("/api/admin/leaves/<int:leave_id>/approve", methods=["PUT"], endpoint="leave_approve")
    @admin_required
    def approve(leave_id: int):
        leaves.approve(leave_id, admin_id=current_user_id(), comment=json_body().get("comment", ""))
        return ok(message="Leave approved")

    @app.route("/api/admin/leaves/<int:leave_id>/reject", methods=["PUT"], endpoint="leave_reject")
    @admin_required
    def reject(leave_id: int):
        leaves.reject(leave_id, admin_id=current_user_id(), comment=json_body().get("comment", ""))
        return ok(message="Leave rejected")

    @app.route("/api/admin/leaves/year-end", methods=["POST"], endpoint="leave_year_end")
    @admin_required
    def year_end():
        body = json_body()
        year = _body_year(body)
        processed = leaves.year_end_rollover(year=year, mode=body.get("mode") or RolloverMode.LAPSE.value)
        return ok({"processed": processed, "year": year + 1}, f"Year-end processed for {processed} balances")

    # Personal holidays

    @app.route("/api/personal-holidays/balance", methods=["GET"], endpoint="personal_holiday_balance")
    @login_required
    def personal_balance():
        return ok(personal.get_balance(current_user_id(), year=_year_arg()))

    @app.route("/api/personal-holidays", methods=["GET"], endpoint="personal_holiday_my_list")
    @login_required
    def personal_list():
        return ok(personal.list_requests(employee_id=current_user_id(), status=request.args.get("status")))

    @app.route("/api/personal-holidays", methods=["POST"], endpoint="personal_holiday_apply")
    @login_required
    def personal_apply():
        body = json_body()
        request_id = personal.apply(
            employee_id=current_user_id(),
            from_date=body_date(body, "from_date"),
            to_date=body_date(body, "to_date"),
            reason=body.get("reason", ""),
            description=body.get("description"),
        )
        return ok({"request_id": request_id}, "Personal holiday request submitted", 201)

    @app.route("/api/admin/personal-holidays/<int:request_id>/approve", methods=["PUT"], endpoint="personal_holiday_approve")
    @admin_required
    def personal_approve(request_id: int):
        personal.approve(request_id, admin_id=current_user_id(), comment=json_body().get("comment", ""))
        return ok(message="Personal holiday approved")

    @app.route("/api/admin/personal-holidays/<int:request_id>/reject", methods=["PUT"], endpoint="personal_holiday_reject")
    @admin_required
    def personal_reject(request_id: int):
        personal.reject(request_id, admin_id=current_user_id(), comment=json_body().get("comment", ""))
        return ok(message="Personal holiday rejected")

    @app.route("/api/admin/personal-holidays/quota/<int:employee_id>", methods=["PUT"], endpoint="personal_holiday_quota")
    @admin_required
    def personal_quota(employee_id: int):
        body = json_body()
        balance = personal.set_quota(employee_id, year=_body_year(body), total=body.get("total"))
        return ok(balance, "Quota updated")

    @app.route("/api/admin/personal-holidays/quota", methods=["PUT"], endpoint="personal_holiday_bulk_quota")
    @admin_required
    def personal_bulk_quota():
        body = json_body()
        year = _body_year(body)
        updated = personal.set_bulk_quota(year=year, total=body.get("total"))
        return ok({"updated": updated, "year": year}, f"Quota set for {updated} employees")

    @app.route("/api/admin/personal-holidays/year-end", methods=["POST"], endpoint="personal_holiday_year_end")
    @admin_required
    def personal_year_end():
        year = _body_year(json_body())
        processed = personal.year_end_reset(year=year)
        return ok({"processed": processed, "year": year + 1}, "Year-end reset complete")
