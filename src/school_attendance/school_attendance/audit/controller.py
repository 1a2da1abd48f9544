from __future__ import annotations

from flask import Flask

from ..common.web import admin_required, json_ok, to_json_dict
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/password-log", methods=["GET"], endpoint="admin_password_log")
    @admin_required
    def password_log():
        entries = container.password_log_service.list_entries()
        return json_ok(entries=to_json_dict(list(entries)))

    @app.route("/api/admin/password-log/<entry_id>", methods=["DELETE"], endpoint="admin_clear_password_log")
    @admin_required
    def clear_entry(entry_id: str):
        container.password_log_service.clear_entry(entry_id)
        return json_ok("Log entry cleared")
