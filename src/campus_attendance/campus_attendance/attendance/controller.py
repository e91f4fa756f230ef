from __future__ import annotations

from typing import Any

from flask import Flask, request

from ..common.datetime_utils import parse_optional_date
from ..common.http import current_actor, json_body, json_response, make_auth_required, message
from ..common.validators import require_bool, require_int
from ..container import Container
from ..core.exceptions import ValidationError
from .service import Arrival


def _parse_arrivals(items: Any) -> list[Arrival]:
    if not isinstance(items, list):
        raise ValidationError("arrivals must be a list")
    arrivals = []
    for item in items:
        if not isinstance(item, dict):
            raise ValidationError("Each arrival must be an object")
        arrivals.append(
            Arrival(
                employee_id=require_int(item.get("employee_id"), "employee_id"),
                has_car=require_bool(item.get("has_car"), "has_car"),
                plate_number=item.get("plate_number"),
            )
        )
    return arrivals


def _parse_ids(items: Any) -> list[int]:
    if not isinstance(items, list):
        raise ValidationError("employee_ids must be a list")
    return [require_int(v, "employee_id") for v in items]


def register(app: Flask, container: Container) -> None:
    auth_required = make_auth_required(container.auth_service)
    records = container.attendance_service
    gate = container.gate_service

    @app.route("/attendance", methods=["GET"], endpoint="list_attendance")
    @auth_required
    def list_attendance():
        start = parse_optional_date(request.args.get("startDate"))
        end = parse_optional_date(request.args.get("endDate"))
        return json_response(records.list_records(start_date=start, end_date=end))

    @app.route("/attendance", methods=["POST"], endpoint="create_attendance")
    @auth_required
    def create_attendance():
        return json_response(gate.create_record(current_actor(), json_body()), 201)

    @app.route("/attendance/<int:record_id>", methods=["PUT"], endpoint="update_attendance")
    @auth_required
    def update_attendance(record_id: int):
        body = json_body()
        return json_response(gate.set_exit_time(current_actor(), record_id, body.get("time_out")))

    @app.route("/attendance/<int:record_id>", methods=["DELETE"], endpoint="delete_attendance")
    @auth_required
    def delete_attendance(record_id: int):
        gate.delete_record(current_actor(), record_id)
        return message("Attendance record deleted successfully")

    @app.route("/attendance/entry", methods=["POST"], endpoint="mark_entry")
    @auth_required
    def mark_entry():
        arrivals = _parse_arrivals(json_body().get("arrivals", []))
        return json_response(gate.mark_entry(current_actor(), arrivals))

    @app.route("/attendance/exit", methods=["POST"], endpoint="mark_exit")
    @auth_required
    def mark_exit():
        ids = _parse_ids(json_body().get("employee_ids", []))
        return json_response(gate.mark_exit(current_actor(), ids))

    @app.route("/attendance/guests", methods=["POST"], endpoint="guest_entry")
    @auth_required
    def guest_entry():
        body = json_body()
        rec = gate.mark_guest_entry(
            current_actor(),
            name=body.get("name", ""),
            plate_number=body.get("plate_number"),
            purpose=body.get("purpose"),
        )
        return json_response(rec, 201)

    @app.route("/attendance/guests/<int:record_id>/exit", methods=["POST"], endpoint="guest_exit")
    @auth_required
    def guest_exit(record_id: int):
        return json_response(gate.mark_guest_exit(current_actor(), record_id))
