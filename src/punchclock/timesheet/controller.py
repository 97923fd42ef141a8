from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.http import admin_required, login_required, ok
from ..common.validators import optional_int, require_int
from ..container import Container
from ..core.exceptions import AuthorizationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/timesheet/month", methods=["GET"], endpoint="timesheet_month")
    @login_required
    def timesheet_month(principal):
        today = now_local().date()
        employee_id = optional_int(request.args.get("employee_id"), "Employee") or principal.employee_id
        if employee_id != principal.employee_id and not principal.is_admin:
            employee = container.employee_service.get(employee_id)
            if employee.manager_id != principal.employee_id:
                raise AuthorizationError("Permission denied")

        sheet = container.timesheet_service.build_month(
            employee_id,
            require_int(request.args.get("year", today.year), "Year"),
            require_int(request.args.get("month", today.month), "Month"),
        )
        return ok(
            {
                "employee_id": sheet.employee.employee_id,
                "name": sheet.employee.name,
                "year": sheet.year,
                "month": sheet.month,
                "days": sheet.days,
                "total_hours": sheet.total_hours,
            }
        )

    @app.route("/api/admin/timesheet/table", methods=["GET"], endpoint="admin_timesheet_table")
    @admin_required
    def admin_timesheet_table(principal):
        table = container.timesheet_service.build_table(
            parse_iso_date(request.args.get("start", "")),
            parse_iso_date(request.args.get("end", "")),
            department=request.args.get("department") or None,
            employee_id=optional_int(request.args.get("employee_id"), "Employee"),
        )
        return ok(table)
