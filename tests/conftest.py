from __future__ import annotations

import pytest

from src.school_attendance.school_attendance.container import build_container_for
from src.school_attendance.school_attendance.database.bootstrap import ensure_defaults
from src.school_attendance.school_attendance.database.connection import DBConfig, DatabaseConnection
from src.school_attendance.school_attendance.main import create_app

SCHOOL = "SMA NEGERI 1 PULAU BANYAK BARAT"
OTHER_SCHOOL = "SMP NEGERI 2 SINGKIL"


@pytest.fixture
def conn():
    c = DatabaseConnection(DBConfig(path=":memory:"))
    yield c
    c.close()


@pytest.fixture
def container(conn):
    c = build_container_for(conn)
    c.schema.open()
    ensure_defaults(conn, school_name=SCHOOL, admin_password="admin123")
    return c


@pytest.fixture
def add_student(container):
    def _add(name="Budi", nis="1001", class_name="X-A", school_name=SCHOOL, phone=None):
        return container.student_service.add_student(
            school_name=school_name,
            name=name,
            nis=nis,
            class_name=class_name,
            parent_phone_number=phone,
        )

    return _add


@pytest.fixture
def app(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app()


@pytest.fixture
def client(app):
    return app.test_client()
