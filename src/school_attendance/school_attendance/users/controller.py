from __future__ import annotations

import logging

from flask import Flask, request, session

from ..common.web import admin_required, json_ok, operator_required, payload, to_json_dict
from ..container import Container

logger = logging.getLogger(__name__)


def _operator_view(op) -> dict:
    # Passwords are plaintext; never echo them back.
    return {"id": op.id, "username": op.username, "school_name": op.school_name}


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="api_login")
    def login():
        data = payload()
        s_user = container.auth_service.authenticate(
            data.get("username", ""),
            data.get("password", ""),
            (data.get("school") or "").strip() or None,
        )

        session.clear()
        session["user_type"] = s_user.user_type.value
        session["username"] = s_user.username
        session["school_name"] = s_user.school_name
        session["operator_id"] = s_user.operator_id
        logger.info("%s %r logged in", s_user.user_type.value, s_user.username)
        return json_ok("Login successful", user=to_json_dict(s_user))

    @app.route("/api/logout", methods=["POST"], endpoint="api_logout")
    def logout():
        session.clear()
        return json_ok("Logged out")

    @app.route("/api/admin/operators", methods=["GET"], endpoint="admin_list_operators")
    @admin_required
    def list_operators():
        operators = container.operator_service.list_operators(request.args.get("school") or None)
        return json_ok(operators=[_operator_view(op) for op in operators])

    @app.route("/api/admin/operators", methods=["POST"], endpoint="admin_add_operator")
    @admin_required
    def add_operator():
        data = payload()
        op = container.operator_service.add_operator(
            username=data.get("username", ""),
            password=data.get("password", ""),
            school_name=data.get("school", ""),
        )
        return json_ok("Operator added", 201, operator=_operator_view(op))

    @app.route("/api/admin/operators/<operator_id>", methods=["DELETE"], endpoint="admin_delete_operator")
    @admin_required
    def delete_operator(operator_id: str):
        container.operator_service.delete_operator(operator_id)
        return json_ok("Operator deleted")

    @app.route("/api/admin/password", methods=["PUT"], endpoint="admin_change_password")
    @admin_required
    def change_admin_password():
        data = payload()
        container.settings_service.set_admin_password(
            data.get("new_password", ""),
            current_password=data.get("current_password"),
        )
        return json_ok("Password changed")

    @app.route("/api/admin/profile", methods=["GET"], endpoint="admin_get_profile")
    @admin_required
    def get_admin_profile():
        return json_ok(profile=container.settings_service.get_admin_profile())

    @app.route("/api/admin/profile", methods=["PUT"], endpoint="admin_update_profile")
    @admin_required
    def update_admin_profile():
        data = payload()
        profile = container.settings_service.update_admin_profile(
            full_name=data.get("full_name"),
            email=data.get("email"),
            phone=data.get("phone"),
        )
        return json_ok("Profile saved", profile=profile)

    @app.route("/api/operator/password", methods=["PUT"], endpoint="operator_change_password")
    @operator_required
    def change_operator_password():
        data = payload()
        container.operator_service.update_password(
            session["operator_id"],
            data.get("new_password", ""),
            current_password=data.get("current_password", ""),
        )
        return json_ok("Password changed")
