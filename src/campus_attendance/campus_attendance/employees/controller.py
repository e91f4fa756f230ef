from __future__ import annotations

from flask import Flask, request

from ..common.http import current_actor, json_body, json_response, make_auth_required, message
from ..container import Container
from ..core.exceptions import ValidationError


def _import_text() -> str:
    upload = request.files.get("file")
    if upload is not None:
        raw = upload.read()
    else:
        raw = request.get_data()
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise ValidationError("Import file must be UTF-8 encoded CSV")


def register(app: Flask, container: Container) -> None:
    auth_required = make_auth_required(container.auth_service)
    service = container.employee_service

    @app.route("/employees", methods=["GET"], endpoint="list_employees")
    @auth_required
    def list_employees():
        return json_response(service.list_employees())

    @app.route("/employees", methods=["POST"], endpoint="create_employee")
    @auth_required
    def create_employee():
        return json_response(service.create_employee(current_actor(), json_body()), 201)

    @app.route("/employees/<int:pk>", methods=["PUT"], endpoint="update_employee")
    @auth_required
    def update_employee(pk: int):
        return json_response(service.update_employee(current_actor(), pk, json_body()))

    @app.route("/employees/<int:pk>", methods=["DELETE"], endpoint="delete_employee")
    @auth_required
    def delete_employee(pk: int):
        service.delete_employee(current_actor(), pk)
        return message("Employee deleted successfully")

    @app.route("/employees/import", methods=["POST"], endpoint="import_employees")
    @auth_required
    def import_employees():
        result = service.import_csv(current_actor(), _import_text())
        return json_response(result)
