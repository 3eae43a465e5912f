from __future__ import annotations

from flask import Flask, request, session

from ..common.http import admin_required, current_user_id, json_body, login_required, ok
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError


def _month_arg() -> str:
    month = request.args.get("month")
    if not month:
        raise ValidationError("Month is required (YYYY-MM)")
    return month


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/salary/<int:employee_id>", methods=["GET"], endpoint="salary_structure_get")
    @admin_required
    def get_structure(employee_id: int):
        return ok(container.payroll_service.get_structure(employee_id))

    @app.route("/api/admin/salary/<int:employee_id>", methods=["PUT"], endpoint="salary_structure_save")
    @admin_required
    def save_structure(employee_id: int):
        body = json_body()
        structure = container.payroll_service.save_structure(
            employee_id,
            basic_salary=body.get("basic_salary"),
            components=body.get("components") or [],
        )
        return ok(structure, "Salary structure saved")

    @app.route("/api/admin/salary-templates", methods=["GET"], endpoint="salary_template_list")
    @admin_required
    def list_templates():
        return ok(container.payroll_service.list_templates())

    @app.route("/api/admin/salary-templates", methods=["POST"], endpoint="salary_template_save")
    @admin_required
    def save_template():
        body = json_body()
        template = container.payroll_service.save_template(
            name=body.get("name", ""),
            description=body.get("description"),
            basic_salary=body.get("basic_salary"),
            components=body.get("components") or [],
        )
        return ok(template, "Template saved", 201)

    @app.route("/api/admin/salary-templates/<int:template_id>/apply", methods=["POST"], endpoint="salary_template_apply")
    @admin_required
    def apply_template(template_id: int):
        count = container.payroll_service.apply_template(template_id, json_body().get("employee_ids") or [])
        return ok({"updated": count}, f"Template applied to {count} employees")

    @app.route("/api/admin/payroll/generate", methods=["POST"], endpoint="payroll_generate")
    @admin_required
    def generate():
        month = json_body().get("month")
        if not month:
            raise ValidationError("Month is required (YYYY-MM)")
        result = container.payroll_service.generate(month, settings=container.settings_service.current())
        data = {
            "month": result.month,
            "generated": result.generated,
            "skipped": result.skipped_employee_ids,
            "errors": [e.as_dict() for e in result.errors],
        }
        return ok(data, f"Payroll generated for {result.generated} employees")

    @app.route("/api/admin/payroll", methods=["GET"], endpoint="payroll_list")
    @admin_required
    def list_month():
        return ok(container.payroll_service.list_month(_month_arg()))

    @app.route("/api/admin/payroll/<int:payroll_id>/override", methods=["PUT"], endpoint="payroll_override")
    @admin_required
    def override(payroll_id: int):
        body = json_body()
        payroll = container.payroll_service.override_salary(
            payroll_id,
            net_salary=body.get("net_salary"),
            reason=body.get("reason", ""),
        )
        return ok(payroll, "Salary overridden")

    @app.route("/api/admin/payroll/<int:payroll_id>/paid", methods=["PUT"], endpoint="payroll_mark_paid")
    @admin_required
    def mark_paid(payroll_id: int):
        return ok(container.payroll_service.mark_paid(payroll_id, paid_by=current_user_id()), "Marked as paid")

    @app.route("/api/admin/payroll/bulk-paid", methods=["PUT"], endpoint="payroll_bulk_paid")
    @admin_required
    def bulk_paid():
        ids = json_body().get("payroll_ids") or []
        count = container.payroll_service.bulk_mark_paid(ids, paid_by=current_user_id())
        return ok({"updated": count}, f"{count} payrolls marked as paid")

    @app.route("/api/payroll/<int:payroll_id>", methods=["GET"], endpoint="payroll_slip")
    @login_required
    def slip(payroll_id: int):
        payroll = container.payroll_service.get_payroll(payroll_id)
        if session.get("role") != Role.ADMIN.value and payroll.employee_id != current_user_id():
            raise AuthorizationError("Not authorized")
        return ok(payroll)

    @app.route("/api/payroll/my-slips", methods=["GET"], endpoint="payroll_my_slips")
    @login_required
    def my_slips():
        return ok(container.payroll_service.employee_slips(current_user_id()))

    # Reports

    @app.route("/api/admin/reports/payroll", methods=["GET"], endpoint="report_payroll")
    @admin_required
    def payroll_report():
        return ok(container.payroll_report_service.build_payroll_report(_month_arg()))

    @app.route("/api/admin/reports/lop", methods=["GET"], endpoint="report_lop")
    @admin_required
    def lop_report():
        return ok(container.payroll_report_service.build_lop_report(_month_arg()))
