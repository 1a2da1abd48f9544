from __future__ import annotations

import io

from flask import Flask, request, send_file

from ..attendance.qr import render_student_qr
from ..common.web import current_school, ensure_same_school, json_ok, login_required, payload, to_json_dict
from ..container import Container
from ..core.exceptions import NotFoundError


def register(app: Flask, container: Container) -> None:
    def _own_student(student_id: str):
        student = container.student_service.get_student(student_id)
        if not student:
            raise NotFoundError("Student not found")
        ensure_same_school(student.school_name)
        return student

    @app.route("/api/students", methods=["GET"], endpoint="list_students")
    @login_required
    def list_students():
        students = container.student_service.list_students(current_school(), request.args.get("class") or None)
        return json_ok(students=to_json_dict(list(students)))

    @app.route("/api/students", methods=["POST"], endpoint="add_student")
    @login_required
    def add_student():
        data = payload()
        student = container.student_service.add_student(
            school_name=current_school(),
            name=data.get("name", ""),
            nis=data.get("nis", ""),
            class_name=data.get("class_name", ""),
            parent_phone_number=data.get("parent_phone_number"),
        )
        return json_ok("Student added", 201, student=to_json_dict(student))

    @app.route("/api/students/<student_id>", methods=["PUT"], endpoint="update_student")
    @login_required
    def update_student(student_id: str):
        _own_student(student_id)
        data = payload()
        student = container.student_service.update_student(
            student_id,
            name=data.get("name", ""),
            nis=data.get("nis", ""),
            class_name=data.get("class_name", ""),
            parent_phone_number=data.get("parent_phone_number"),
        )
        return json_ok("Student updated", student=to_json_dict(student))

    @app.route("/api/students/<student_id>", methods=["DELETE"], endpoint="delete_student")
    @login_required
    def delete_student(student_id: str):
        _own_student(student_id)
        container.student_service.delete_student(student_id)
        return json_ok("Student deleted")

    @app.route("/api/students/<student_id>/qr", methods=["GET"], endpoint="student_qr")
    @login_required
    def student_qr(student_id: str):
        student = _own_student(student_id)
        return send_file(
            io.BytesIO(render_student_qr(student)),
            mimetype="image/png",
            as_attachment=False,
            download_name=f"qrcode-{student.nis}-{student.name}.png",
        )
