from __future__ import annotations

from datetime import timedelta

from flask import Flask, request, session

from ..common.http import admin_required, fail, json_body, login_required, ok
from ..container import Container


def _employee_json(e) -> dict:
    return {
        "employee_id": e.employee_id,
        "name": e.name,
        "masked_pin": e.masked_pin,
        "department": e.department,
        "manager_id": e.manager_id,
        "role": e.role.value,
        "is_active": e.is_active,
        "schedule": {
            "work_start": e.work_start.strftime("%H:%M") if e.work_start else None,
            "work_end": e.work_end.strftime("%H:%M") if e.work_end else None,
            "breaks": [
                [s.strftime("%H:%M") if s else None, t.strftime("%H:%M") if t else None]
                for s, t in (
                    (e.break1_start, e.break1_end),
                    (e.break2_start, e.break2_end),
                    (e.break3_start, e.break3_end),
                )
            ],
        },
    }


def _employee_fields(body: dict) -> dict:
    return dict(
        name=body.get("name", ""),
        pin=body.get("pin", ""),
        department=body.get("department"),
        manager_id=body.get("manager_id"),
        role=body.get("role", "employee"),
        schedule=body.get("schedule"),
    )


def register(app: Flask, container: Container) -> None:
    app.permanent_session_lifetime = timedelta(days=7)

    @app.route("/api/session", methods=["POST"], endpoint="login")
    def login():
        body = json_body()
        employee = container.attendance_service.identify(body.get("pin", ""))

        session.clear()
        session.permanent = bool(body.get("remember_me"))
        session["employee_id"] = employee.employee_id
        session["role"] = employee.role.value
        return ok(_employee_json(employee))

    @app.route("/api/session", methods=["DELETE"], endpoint="logout")
    def logout():
        session.clear()
        return ok()

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me(principal):
        employee = container.employee_service.get(principal.employee_id)
        if not employee.is_active:
            session.clear()
            return fail("Account is deactivated", 401)
        return ok(_employee_json(employee))

    @app.route("/api/me/reports", methods=["GET"], endpoint="my_direct_reports")
    @login_required
    def my_direct_reports(principal):
        return ok([_employee_json(e) for e in container.employee_service.list_direct_reports(principal)])

    @app.route("/api/admin/employees", methods=["GET"], endpoint="admin_employees")
    @admin_required
    def admin_employees(principal):
        department = request.args.get("department") or None
        return ok([_employee_json(e) for e in container.employee_service.list_active(department=department)])

    @app.route("/api/admin/employees", methods=["POST"], endpoint="admin_create_employee")
    @admin_required
    def admin_create_employee(principal):
        employee_id = container.employee_service.create(principal, **_employee_fields(json_body()))
        return ok({"employee_id": employee_id}, status=201)

    @app.route("/api/admin/employees/<int:employee_id>", methods=["PUT"], endpoint="admin_update_employee")
    @admin_required
    def admin_update_employee(principal, employee_id: int):
        container.employee_service.update(principal, employee_id=employee_id, **_employee_fields(json_body()))
        return ok()

    @app.route("/api/admin/employees/<int:employee_id>/deactivate", methods=["POST"], endpoint="admin_deactivate_employee")
    @admin_required
    def admin_deactivate_employee(principal, employee_id: int):
        container.employee_service.deactivate(principal, employee_id=employee_id)
        return ok()

    @app.route("/api/admin/employees/<int:employee_id>/reactivate", methods=["POST"], endpoint="admin_reactivate_employee")
    @admin_required
    def admin_reactivate_employee(principal, employee_id: int):
        container.employee_service.reactivate(principal, employee_id=employee_id)
        return ok()
