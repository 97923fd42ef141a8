from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date, parse_iso_datetime
from ..common.http import json_body, login_required, ok
from ..common.validators import optional_int, require_int
from ..container import Container
from ..core.enums import ReviewMode


def register(app: Flask, container: Container) -> None:
    @app.route("/api/requests/leave", methods=["POST"], endpoint="submit_leave")
    @login_required
    def submit_leave(principal):
        body = json_body()
        request_id = container.request_service.submit_leave(
            principal,
            leave_type_id=require_int(body.get("leave_type_id"), "Leave type"),
            start_at=parse_iso_datetime(body.get("start_at", "")),
            end_at=parse_iso_datetime(body.get("end_at", "")),
            reason=body.get("reason", ""),
            car_id=optional_int(body.get("car_id"), "Car"),
        )
        return ok({"request_id": request_id}, status=201)

    @app.route("/api/requests/makeup", methods=["POST"], endpoint="submit_makeup")
    @login_required
    def submit_makeup(principal):
        body = json_body()
        request_id = container.request_service.submit_makeup(
            principal,
            request_date=parse_iso_date(body.get("request_date", "")),
            request_time=body.get("request_time", ""),
            check_type=body.get("check_type", ""),
            reason=body.get("reason", ""),
        )
        return ok({"request_id": request_id}, status=201)

    @app.route("/api/requests/car", methods=["POST"], endpoint="submit_car_request")
    @login_required
    def submit_car_request(principal):
        body = json_body()
        request_id = container.request_service.submit_car_request(
            principal,
            car_id=require_int(body.get("car_id"), "Car"),
            start_at=parse_iso_datetime(body.get("start_at", "")),
            end_at=parse_iso_datetime(body.get("end_at", "")),
            purpose=body.get("purpose", ""),
        )
        return ok({"request_id": request_id}, status=201)

    @app.route("/api/requests/mine", methods=["GET"], endpoint="my_requests")
    @login_required
    def my_requests(principal):
        return ok(container.request_service.list_my_requests(principal))

    @app.route("/api/requests/pending-summary", methods=["GET"], endpoint="pending_summary")
    @login_required
    def pending_summary(principal):
        return ok(container.request_service.pending_summary(principal))

    @app.route("/api/requests/<kind>", methods=["GET"], endpoint="review_list")
    @login_required
    def review_list(principal, kind: str):
        rows = container.request_service.list_for_review(
            principal,
            kind=kind,
            mode=request.args.get("mode", ReviewMode.SUPERVISOR.value),
            status=request.args.get("status", "ALL"),
        )
        return ok(rows)

    @app.route("/api/requests/<kind>/<int:request_id>/approve", methods=["POST"], endpoint="approve_request")
    @login_required
    def approve_request(principal, kind: str, request_id: int):
        body = json_body()
        container.request_service.approve(
            principal,
            kind=kind,
            request_id=request_id,
            mode=body.get("mode", ReviewMode.SUPERVISOR.value),
            comment=body.get("comment", ""),
        )
        return ok()

    @app.route("/api/requests/<kind>/<int:request_id>/reject", methods=["POST"], endpoint="reject_request")
    @login_required
    def reject_request(principal, kind: str, request_id: int):
        body = json_body()
        container.request_service.reject(
            principal,
            kind=kind,
            request_id=request_id,
            mode=body.get("mode", ReviewMode.SUPERVISOR.value),
            comment=body.get("comment", ""),
        )
        return ok()
