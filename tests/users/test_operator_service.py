from __future__ import annotations

import sqlite3

import pytest

from src.school_attendance.school_attendance.audit import service as audit_service
from src.school_attendance.school_attendance.core.enums import UserType
from src.school_attendance.school_attendance.core.exceptions import (
    AuthenticationError,
    NotFoundError,
    ValidationError,
)

SCHOOL = "SMA NEGERI 1 PULAU BANYAK BARAT"
OTHER_SCHOOL = "SMP NEGERI 2 SINGKIL"


def test_usernames_repeat_across_schools_but_not_within(container):
    ops = container.operator_service
    ops.add_operator(username="piket", password="piket123", school_name=SCHOOL)
    ops.add_operator(username="piket", password="piket456", school_name=OTHER_SCHOOL)

    with pytest.raises(ValidationError):
        ops.add_operator(username="piket", password="another1", school_name=SCHOOL)

    assert len(ops.list_operators()) == 2
    assert [o.school_name for o in ops.list_operators(SCHOOL)] == [SCHOOL]


def test_operator_validation(container):
    ops = container.operator_service
    with pytest.raises(ValidationError):
        ops.add_operator(username="", password="piket123", school_name=SCHOOL)
    with pytest.raises(ValidationError):
        ops.add_operator(username="piket", password="123", school_name=SCHOOL)
    with pytest.raises(ValidationError):
        ops.add_operator(username="Admin", password="piket123", school_name=SCHOOL)


def test_update_password_appends_audit_entry(container):
    ops = container.operator_service
    op = ops.add_operator(username="piket", password="piket123", school_name=SCHOOL)

    ops.update_password(op.id, "baru1234", current_password="piket123")

    assert ops.get_operator(op.id).password == "baru1234"
    entries = container.password_log_service.list_entries()
    assert [(e.school_name, e.operator_username) for e in entries] == [(SCHOOL, "piket")]


def test_update_password_checks(container):
    ops = container.operator_service
    op = ops.add_operator(username="piket", password="piket123", school_name=SCHOOL)

    with pytest.raises(ValidationError):
        ops.update_password(op.id, "baru1234", current_password="salah")
    with pytest.raises(NotFoundError):
        ops.update_password("operator-missing", "baru1234")

    assert container.password_log_service.list_entries() == []


def test_clear_password_log_entry(container):
    op = container.operator_service.add_operator(username="piket", password="piket123", school_name=SCHOOL)
    container.operator_service.update_password(op.id, "baru1234")
    entry = container.password_log_service.list_entries()[0]

    container.password_log_service.clear_entry(entry.id)

    assert container.password_log_service.list_entries() == []
    with pytest.raises(NotFoundError):
        container.password_log_service.clear_entry(entry.id)


def test_delete_operator(container):
    ops = container.operator_service
    op = ops.add_operator(username="piket", password="piket123", school_name=SCHOOL)

    ops.delete_operator(op.id)

    assert ops.list_operators() == []
    with pytest.raises(NotFoundError):
        ops.delete_operator(op.id)


def test_admin_login_is_case_insensitive(container):
    user = container.auth_service.authenticate("ADMIN", "admin123")

    assert user.user_type == UserType.ADMIN
    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate("admin", "wrong")


def test_operator_login_is_bound_to_its_school(container):
    ops = container.operator_service
    op = ops.add_operator(username="piket", password="piket123", school_name=SCHOOL)
    ops.add_operator(username="piket", password="piket456", school_name=OTHER_SCHOOL)
    auth = container.auth_service

    user = auth.authenticate("piket", "piket123", SCHOOL)
    assert (user.user_type, user.school_name, user.operator_id) == (UserType.OPERATOR, SCHOOL, op.id)

    assert auth.authenticate("piket", "piket456").school_name == OTHER_SCHOOL
    with pytest.raises(AuthenticationError):
        auth.authenticate("piket", "piket456", SCHOOL)
    with pytest.raises(AuthenticationError):
        auth.authenticate("nobody", "piket123", SCHOOL)


def test_operator_password_and_audit_entry_commit_together(container, monkeypatch):
    ops = container.operator_service
    op = ops.add_operator(username="piket", password="piket123", school_name=SCHOOL)
    monkeypatch.setattr(audit_service, "new_id", lambda prefix: f"{prefix}-fixed")
    ops.update_password(op.id, "baru1234")

    # the second entry collides with the first, so the password write is rolled back too
    with pytest.raises(sqlite3.IntegrityError):
        ops.update_password(op.id, "lain5678")

    assert ops.get_operator(op.id).password == "baru1234"
    assert len(container.password_log_service.list_entries()) == 1
