from __future__ import annotations

from flask import Flask, request

from ..common.http import admin_required, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/cars", methods=["GET"], endpoint="cars")
    @login_required
    def cars(principal):
        return ok(container.car_service.list_cars())

    @app.route("/api/admin/cars", methods=["GET"], endpoint="admin_cars")
    @admin_required
    def admin_cars(principal):
        include_inactive = request.args.get("all") == "1"
        return ok(container.car_service.list_cars(only_active=not include_inactive))

    @app.route("/api/admin/cars", methods=["POST"], endpoint="admin_save_car")
    @admin_required
    def admin_save_car(principal):
        body = json_body()
        car_id = container.car_service.save(
            principal,
            plate_number=body.get("plate_number", ""),
            model=body.get("model", ""),
            status=body.get("status", "AVAILABLE"),
            car_id=body.get("car_id"),
            is_active=bool(body.get("is_active", True)),
            last_mileage=body.get("last_mileage"),
        )
        return ok({"car_id": car_id}, status=201 if body.get("car_id") is None else 200)
