from __future__ import annotations

from flask import Flask, session

from ..common.web import admin_required, current_school, is_admin, json_ok, login_required, payload, to_json_dict
from ..container import Container
from ..core.exceptions import NotFoundError, ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/school", methods=["GET"], endpoint="get_school")
    @login_required
    def get_school():
        school = current_school()
        info = container.school_service.get_school_info(school)
        if not info:
            raise NotFoundError("School not found")
        return json_ok(
            school=to_json_dict(info),
            attendance_enabled=container.settings_service.is_attendance_enabled(school),
            on_time_deadline=container.settings_service.get_on_time_deadline(school),
        )

    @app.route("/api/school", methods=["PUT"], endpoint="update_school")
    @login_required
    def update_school():
        data = payload()
        info = container.school_service.update_school_info(
            current_school(),
            address=data.get("address"),
            headmaster=data.get("headmaster"),
            headmaster_nip=data.get("headmaster_nip"),
            logo_base64=data.get("logo_base64"),
        )
        return json_ok("School data saved", school=to_json_dict(info))

    @app.route("/api/school/rename", methods=["POST"], endpoint="rename_school")
    @login_required
    def rename_school():
        data = payload()
        old_name = current_school()
        new_name = (data.get("new_name") or "").strip()
        outcome = container.backup_service.rename_school(
            old_name,
            new_name,
            restore_backup=bool(data.get("restore_backup", True)),
        )
        if not is_admin() or session.get("school_name") == old_name:
            session["school_name"] = new_name
        return json_ok("School renamed", outcome=outcome, school_name=new_name)

    @app.route("/api/school/backup/<path:name>", methods=["GET"], endpoint="check_backup")
    @login_required
    def check_backup(name: str):
        return json_ok(exists=container.backup_service.check_for_backup(name))

    @app.route("/api/admin/schools", methods=["GET"], endpoint="admin_list_schools")
    @admin_required
    def list_schools():
        schools = []
        for name in container.school_service.list_schools():
            schools.append(
                {
                    "name": name,
                    "attendance_enabled": container.settings_service.is_attendance_enabled(name),
                    "on_time_deadline": container.settings_service.get_on_time_deadline(name),
                }
            )
        return json_ok(schools=schools)

    @app.route("/api/admin/schools", methods=["POST"], endpoint="admin_add_school")
    @admin_required
    def add_school():
        info = container.school_service.register_school(payload().get("name", ""))
        return json_ok("School registered", 201, school=to_json_dict(info))

    @app.route("/api/admin/attendance-enabled", methods=["PUT"], endpoint="admin_attendance_enabled")
    @admin_required
    def set_attendance_enabled():
        data = payload()
        enabled = data.get("enabled")
        if not isinstance(enabled, bool):
            raise ValidationError("enabled must be true or false")
        school = current_school()
        container.settings_service.set_attendance_enabled(school, enabled)
        return json_ok("Setting saved", school_name=school, attendance_enabled=enabled)

    @app.route("/api/admin/on-time-deadline", methods=["PUT"], endpoint="admin_on_time_deadline")
    @admin_required
    def set_on_time_deadline():
        school = current_school()
        value = container.settings_service.set_on_time_deadline(school, payload().get("deadline", ""))
        return json_ok("Setting saved", school_name=school, on_time_deadline=value)
