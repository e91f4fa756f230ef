from __future__ import annotations

from flask import Flask

from ..common.http import current_actor, json_body, json_response, make_auth_required
from ..container import Container
from .model import ParkingConfig


def parking_json(config: ParkingConfig) -> dict:
    return {
        "id": config.id,
        "total_spaces": config.total_spaces,
        "occupied_spaces": config.occupied_spaces,
        "available_spaces": config.available_spaces,
    }


def register(app: Flask, container: Container) -> None:
    auth_required = make_auth_required(container.auth_service)

    @app.route("/parking", methods=["GET"], endpoint="get_parking")
    @auth_required
    def get_parking():
        return json_response(parking_json(container.parking_service.get_config()))

    @app.route("/parking", methods=["PUT"], endpoint="update_parking")
    @auth_required
    def update_parking():
        body = json_body()
        config = container.parking_service.update(
            current_actor(),
            total_spaces=body.get("total_spaces"),
            occupied_spaces=body.get("occupied_spaces"),
        )
        return json_response(parking_json(config))
