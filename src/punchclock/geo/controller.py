from __future__ import annotations

from flask import Flask

from ..common.http import admin_required, json_body, login_required, ok
from ..container import Container


def _location_fields(body: dict) -> dict:
    return dict(
        name=body.get("name", ""),
        latitude=body.get("latitude"),
        longitude=body.get("longitude"),
        radius_meters=body.get("radius_meters"),
        description=body.get("description"),
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/api/locations", methods=["GET"], endpoint="locations")
    @login_required
    def locations(principal):
        return ok(container.location_service.list_active())

    @app.route("/api/admin/locations", methods=["GET"], endpoint="admin_locations")
    @admin_required
    def admin_locations(principal):
        return ok(container.location_service.list_all())

    @app.route("/api/admin/locations", methods=["POST"], endpoint="admin_create_location")
    @admin_required
    def admin_create_location(principal):
        location_id = container.location_service.create(principal, **_location_fields(json_body()))
        return ok({"location_id": location_id}, status=201)

    @app.route("/api/admin/locations/<int:location_id>", methods=["PUT"], endpoint="admin_update_location")
    @admin_required
    def admin_update_location(principal, location_id: int):
        container.location_service.update(principal, location_id=location_id, **_location_fields(json_body()))
        return ok()

    @app.route("/api/admin/locations/<int:location_id>/active", methods=["POST"], endpoint="admin_toggle_location")
    @admin_required
    def admin_toggle_location(principal, location_id: int):
        container.location_service.set_active(
            principal, location_id=location_id, is_active=bool(json_body().get("is_active", True))
        )
        return ok()

    @app.route("/api/admin/locations/<int:location_id>", methods=["DELETE"], endpoint="admin_delete_location")
    @admin_required
    def admin_delete_location(principal, location_id: int):
        container.location_service.delete(principal, location_id=location_id)
        return ok()
