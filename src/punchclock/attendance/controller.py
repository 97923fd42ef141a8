from __future__ import annotations

from typing import Optional

from flask import Flask, current_app

from ..common.http import admin_required, json_body, login_required, ok
from ..container import Container
from ..core.constants import DEFAULT_GEOLOCATION_TIMEOUT_MS
from ..core.exceptions import ValidationError
from ..geo.engine import DEFAULT_COMPANY_LOCATION, format_distance
from ..geo.model import GeoPoint


def _position(body: dict) -> Optional[GeoPoint]:
    """Browser geolocation from the request body; None when the device gave none."""
    lat, lon = body.get("latitude"), body.get("longitude")
    if lat is None or lon is None:
        return None
    try:
        accuracy = body.get("accuracy")
        return GeoPoint(
            latitude=float(lat),
            longitude=float(lon),
            accuracy=float(accuracy) if accuracy is not None else None,
        )
    except (TypeError, ValueError):
        raise ValidationError("Invalid coordinates")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/kiosk/settings", methods=["GET"], endpoint="kiosk_settings")
    def kiosk_settings():
        locations = container.location_service.list_active() or [DEFAULT_COMPANY_LOCATION]
        return ok(
            {
                "locations": locations,
                "geolocation_timeout_ms": current_app.config.get(
                    "GEOLOCATION_TIMEOUT_MS", DEFAULT_GEOLOCATION_TIMEOUT_MS
                ),
            }
        )

    @app.route("/api/kiosk/punch", methods=["POST"], endpoint="kiosk_punch")
    def kiosk_punch():
        body = json_body()
        outcome = container.attendance_service.kiosk_punch(
            body.get("pin", ""),
            body.get("check_type", ""),
            _position(body),
        )
        rc = outcome.range_check
        return ok(
            {
                "employee": {
                    "employee_id": outcome.employee.employee_id,
                    "name": outcome.employee.name,
                    "department": outcome.employee.department,
                },
                "punch": outcome.punch,
                "range_check": {
                    "within_range": rc.within_range,
                    "distance_meters": rc.distance_meters,
                    "distance": format_distance(rc.distance_meters),
                    "location": rc.location.name if rc.location else None,
                }
                if rc
                else None,
                "recent": outcome.recent,
            },
            status=201,
        )

    @app.route("/api/kiosk/recent", methods=["POST"], endpoint="kiosk_recent")
    def kiosk_recent():
        employee = container.attendance_service.identify(json_body().get("pin", ""))
        return ok(container.attendance_service.recent_punches(employee.employee_id))

    @app.route("/api/me/punches", methods=["GET"], endpoint="my_punches")
    @login_required
    def my_punches(principal):
        return ok(container.attendance_service.recent_punches(principal.employee_id))

    @app.route("/api/admin/punches/<int:punch_id>", methods=["DELETE"], endpoint="admin_delete_punch")
    @admin_required
    def admin_delete_punch(principal, punch_id: int):
        container.attendance_service.delete_punch(principal, punch_id=punch_id)
        return ok()
