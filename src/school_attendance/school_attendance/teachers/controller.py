from __future__ import annotations

from flask import Flask

from ..common.web import current_school, ensure_same_school, json_ok, login_required, payload, to_json_dict
from ..container import Container
from ..core.exceptions import NotFoundError


def register(app: Flask, container: Container) -> None:
    def _own_teacher(teacher_id: str):
        teacher = container.teacher_service.get_teacher(teacher_id)
        if not teacher:
            raise NotFoundError("Teacher not found")
        ensure_same_school(teacher.school_name)
        return teacher

    @app.route("/api/teachers", methods=["GET"], endpoint="list_teachers")
    @login_required
    def list_teachers():
        teachers = container.teacher_service.list_teachers(current_school())
        return json_ok(teachers=to_json_dict(list(teachers)))

    @app.route("/api/teachers", methods=["POST"], endpoint="add_teacher")
    @login_required
    def add_teacher():
        data = payload()
        teacher = container.teacher_service.add_teacher(
            school_name=current_school(),
            name=data.get("name", ""),
            nip=data.get("nip"),
            subjects=data.get("subjects") or [],
            classes=data.get("classes") or [],
        )
        return json_ok("Teacher added", 201, teacher=to_json_dict(teacher))

    @app.route("/api/teachers/<teacher_id>", methods=["PUT"], endpoint="update_teacher")
    @login_required
    def update_teacher(teacher_id: str):
        _own_teacher(teacher_id)
        data = payload()
        teacher = container.teacher_service.update_teacher(
            teacher_id,
            name=data.get("name"),
            nip=data.get("nip"),
            subjects=data.get("subjects"),
            classes=data.get("classes"),
        )
        return json_ok("Teacher updated", teacher=to_json_dict(teacher))

    @app.route("/api/teachers/<teacher_id>", methods=["DELETE"], endpoint="delete_teacher")
    @login_required
    def delete_teacher(teacher_id: str):
        _own_teacher(teacher_id)
        container.teacher_service.delete_teacher(teacher_id)
        return json_ok("Teacher deleted")
