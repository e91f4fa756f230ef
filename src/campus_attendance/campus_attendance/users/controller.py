from __future__ import annotations

from flask import Flask

from ..common.http import current_actor, json_body, json_response, make_auth_required, message
from ..container import Container
from .model import User


def user_json(user: User) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "role": user.role.value,
        "created_at": user.created_at,
    }


def register(app: Flask, container: Container) -> None:
    auth_required = make_auth_required(container.auth_service)

    @app.route("/auth/login", methods=["POST"], endpoint="login")
    def login():
        body = json_body()
        result = container.auth_service.login(body.get("username", ""), body.get("password", ""))
        return json_response({"user": user_json(result.user), "token": result.token})

    @app.route("/auth/logout", methods=["POST"], endpoint="logout")
    @auth_required
    def logout():
        container.auth_service.logout(current_actor())
        return message("Logged out")

    @app.route("/users", methods=["GET"], endpoint="list_users")
    @auth_required
    def list_users():
        users = container.user_service.list_users(current_actor())
        return json_response([user_json(u) for u in users])

    @app.route("/users", methods=["POST"], endpoint="create_user")
    @auth_required
    def create_user():
        body = json_body()
        user = container.user_service.create_user(
            current_actor(),
            username=body.get("username", ""),
            password=body.get("password", ""),
            role=body.get("role", ""),
        )
        return json_response(user_json(user), 201)

    @app.route("/users/<int:user_id>", methods=["DELETE"], endpoint="delete_user")
    @auth_required
    def delete_user(user_id: int):
        container.user_service.delete_user(current_actor(), user_id)
        return message("User deleted successfully")

    @app.route("/users/<int:user_id>/reset-password", methods=["POST"], endpoint="reset_password")
    @auth_required
    def reset_password(user_id: int):
        body = json_body()
        user = container.user_service.reset_password(current_actor(), user_id, body.get("newPassword", ""))
        return json_response(user_json(user))
