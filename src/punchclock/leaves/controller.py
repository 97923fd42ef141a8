from __future__ import annotations

from flask import Flask

from ..common.http import admin_required, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/leave-types", methods=["GET"], endpoint="leave_types")
    @login_required
    def leave_types(principal):
        return ok(container.leave_type_service.list_active())

    @app.route("/api/admin/leave-types", methods=["GET"], endpoint="admin_leave_types")
    @admin_required
    def admin_leave_types(principal):
        return ok(container.leave_type_service.list_all())

    @app.route("/api/admin/leave-types", methods=["POST"], endpoint="admin_create_leave_type")
    @admin_required
    def admin_create_leave_type(principal):
        body = json_body()
        leave_type_id = container.leave_type_service.create(
            principal,
            name=body.get("name", ""),
            code=body.get("code", ""),
            color=body.get("color"),
            sort_order=int(body.get("sort_order") or 0),
        )
        return ok({"leave_type_id": leave_type_id}, status=201)

    @app.route("/api/admin/leave-types/<int:leave_type_id>", methods=["PUT"], endpoint="admin_update_leave_type")
    @admin_required
    def admin_update_leave_type(principal, leave_type_id: int):
        body = json_body()
        container.leave_type_service.update(
            principal,
            leave_type_id=leave_type_id,
            name=body.get("name", ""),
            color=body.get("color"),
            sort_order=int(body.get("sort_order") or 0),
            code=body.get("code"),
        )
        return ok()

    @app.route("/api/admin/leave-types/<int:leave_type_id>/active", methods=["POST"], endpoint="admin_toggle_leave_type")
    @admin_required
    def admin_toggle_leave_type(principal, leave_type_id: int):
        container.leave_type_service.set_active(
            principal, leave_type_id=leave_type_id, is_active=bool(json_body().get("is_active", True))
        )
        return ok()
