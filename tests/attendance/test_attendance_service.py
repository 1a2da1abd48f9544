from __future__ import annotations

import re
from datetime import datetime

import pytest

from src.school_attendance.school_attendance.attendance.model import AttendanceRecord, Mutation, RecordKey
from src.school_attendance.school_attendance.core.enums import AttendanceStatus, ScanMode, Semester, Timeliness
from src.school_attendance.school_attendance.core.exceptions import AttendanceConflictError, ValidationError

SCHOOL = "SMA NEGERI 1 PULAU BANYAK BARAT"
OTHER_SCHOOL = "SMP NEGERI 2 SINGKIL"
SUBJECT = "Matematika"
DAY = "2025-01-06"


def at(hour, minute, second=0, day=6):
    return datetime(2025, 1, day, hour, minute, second)


def all_records(container, school=SCHOOL):
    return container.attendance_service.get_attendance_records(school)


def test_check_in_then_check_out(container, add_student):
    # Scenario A
    s = add_student()
    svc = container.attendance_service

    result = svc.record_attendance(s.id, SUBJECT, SCHOOL, at(7, 25), "check-in")
    assert result.type == ScanMode.CHECK_IN
    rec = result.record
    assert rec.status == AttendanceStatus.PRESENT
    assert rec.date == DAY
    assert rec.timeliness == Timeliness.ON_TIME
    assert rec.check_out is None
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", rec.check_in)

    out = svc.record_attendance(s.id, SUBJECT, SCHOOL, at(14, 0), ScanMode.CHECK_OUT)
    assert out.type == ScanMode.CHECK_OUT
    assert out.record.id == rec.id
    assert out.record.check_out is not None
    assert out.record.timeliness == Timeliness.ON_TIME

    stored = all_records(container)
    assert len(stored) == 1
    assert stored[0].check_out == out.record.check_out


def test_late_check_in(container, add_student):
    # Scenario B
    s = add_student()
    rec = container.attendance_service.record_attendance(s.id, SUBJECT, SCHOOL, at(7, 31), "check-in").record
    assert rec.timeliness == Timeliness.LATE


@pytest.mark.parametrize(
    "moment, expected",
    [
        (at(7, 30), Timeliness.ON_TIME),
        (at(7, 30, 59), Timeliness.ON_TIME),
        (at(7, 29), Timeliness.ON_TIME),
        (at(7, 31), Timeliness.LATE),
        (at(8, 0), Timeliness.LATE),
    ],
)
def test_deadline_is_strictly_greater_than(container, add_student, moment, expected):
    s = add_student()
    rec = container.attendance_service.record_attendance(s.id, SUBJECT, SCHOOL, moment, "check-in").record
    assert rec.timeliness == expected


def test_configured_deadline_is_used(container, add_student):
    s = add_student()
    container.settings_service.set_on_time_deadline(SCHOOL, "08:00")
    rec = container.attendance_service.record_attendance(s.id, SUBJECT, SCHOOL, at(7, 45), "check-in").record
    assert rec.timeliness == Timeliness.ON_TIME


def test_explicit_timeliness_wins(container, add_student):
    s = add_student()
    rec = container.attendance_service.record_attendance(
        s.id, SUBJECT, SCHOOL, at(6, 0), "check-in", timeliness="late"
    ).record
    assert rec.timeliness == Timeliness.LATE


def test_local_date_key_just_after_midnight(container, add_student):
    s = add_student()
    rec = container.attendance_service.record_attendance(s.id, SUBJECT, SCHOOL, at(0, 30), "check-in").record
    assert rec.date == DAY


def test_duplicate_check_in_is_rejected(container, add_student):
    s = add_student()
    svc = container.attendance_service
    svc.record_attendance(s.id, SUBJECT, SCHOOL, at(7, 0), "check-in")

    with pytest.raises(AttendanceConflictError, match="already checked in"):
        svc.record_attendance(s.id, SUBJECT, SCHOOL, at(7, 5), "check-in")

    assert len(all_records(container)) == 1


def test_same_student_other_subject_gets_own_record(container, add_student):
    s = add_student()
    svc = container.attendance_service
    svc.record_attendance(s.id, SUBJECT, SCHOOL, at(7, 0), "check-in")
    svc.record_attendance(s.id, "Fisika", SCHOOL, at(9, 0), "check-in")

    assert len(all_records(container)) == 2


def test_check_out_without_check_in(container, add_student):
    # Scenario C
    s = add_student()
    with pytest.raises(AttendanceConflictError, match="not checked in yet"):
        container.attendance_service.record_attendance(s.id, SUBJECT, SCHOOL, at(14, 0), "check-out")
    assert all_records(container) == []


def test_second_check_out_is_rejected(container, add_student):
    s = add_student()
    svc = container.attendance_service
    svc.record_attendance(s.id, SUBJECT, SCHOOL, at(7, 0), "check-in")
    first = svc.record_attendance(s.id, SUBJECT, SCHOOL, at(14, 0), "check-out").record

    with pytest.raises(AttendanceConflictError, match="already checked out"):
        svc.record_attendance(s.id, SUBJECT, SCHOOL, at(15, 0), "check-out")

    assert all_records(container)[0].check_out == first.check_out


def test_check_out_fills_semester_only_when_unset(container, add_student):
    a = add_student(name="A", nis="1")
    b = add_student(name="B", nis="2")
    svc = container.attendance_service

    svc.record_attendance(a.id, SUBJECT, SCHOOL, at(7, 0), "check-in")
    rec_a = svc.record_attendance(a.id, SUBJECT, SCHOOL, at(14, 0), "check-out", semester="Genap").record
    assert rec_a.semester == Semester.GENAP

    svc.record_attendance(b.id, SUBJECT, SCHOOL, at(7, 0), "check-in", semester="Ganjil")
    rec_b = svc.record_attendance(b.id, SUBJECT, SCHOOL, at(14, 0), "check-out", semester="Genap").record
    assert rec_b.semester == Semester.GANJIL


def test_manual_sick_blocks_scanning(container, add_student):
    s = add_student()
    svc = container.attendance_service
    svc.set_manual_attendance(s.id, SUBJECT, SCHOOL, DAY, "sick")

    with pytest.raises(AttendanceConflictError, match="already marked sick/permission"):
        svc.record_attendance(s.id, SUBJECT, SCHOOL, at(7, 0), "check-in")
    with pytest.raises(AttendanceConflictError, match="already marked sick/permission"):
        svc.record_attendance(s.id, SUBJECT, SCHOOL, at(14, 0), "check-out")


def test_manual_status_switch_keeps_record_id(container, add_student):
    s = add_student()
    svc = container.attendance_service
    svc.set_manual_attendance(s.id, SUBJECT, SCHOOL, DAY, "sick")
    first = all_records(container)[0]

    svc.set_manual_attendance(s.id, SUBJECT, SCHOOL, DAY, AttendanceStatus.PERMISSION)
    records = all_records(container)

    assert len(records) == 1
    assert records[0].id == first.id
    assert records[0].status == AttendanceStatus.PERMISSION
    assert records[0].check_in is None
    assert records[0].timeliness is None


def test_manual_status_cannot_overwrite_present(container, add_student):
    # Scenario E
    s = add_student()
    svc = container.attendance_service
    svc.record_attendance(s.id, SUBJECT, SCHOOL, at(7, 0), "check-in")

    with pytest.raises(AttendanceConflictError):
        svc.set_manual_attendance(s.id, SUBJECT, SCHOOL, DAY, "sick")

    records = all_records(container)
    assert len(records) == 1
    assert records[0].status == AttendanceStatus.PRESENT


def test_clearing_manual_status_deletes_record(container, add_student):
    s = add_student()
    svc = container.attendance_service
    svc.set_manual_attendance(s.id, SUBJECT, SCHOOL, DAY, "permission")

    svc.set_manual_attendance(s.id, SUBJECT, SCHOOL, DAY, None)

    assert all_records(container) == []


def test_clearing_present_or_missing_record_is_a_noop(container, add_student):
    s = add_student()
    svc = container.attendance_service
    svc.set_manual_attendance(s.id, SUBJECT, SCHOOL, DAY, None)
    assert all_records(container) == []

    svc.record_attendance(s.id, SUBJECT, SCHOOL, at(7, 0), "check-in")
    svc.set_manual_attendance(s.id, SUBJECT, SCHOOL, DAY, None)

    records = all_records(container)
    assert len(records) == 1
    assert records[0].status == AttendanceStatus.PRESENT


def test_manual_present_is_not_a_manual_status(container, add_student):
    s = add_student()
    with pytest.raises(ValidationError):
        container.attendance_service.set_manual_attendance(s.id, SUBJECT, SCHOOL, DAY, "present")


def test_invalid_inputs_are_rejected(container, add_student):
    s = add_student()
    svc = container.attendance_service
    with pytest.raises(ValidationError):
        svc.record_attendance(s.id, SUBJECT, SCHOOL, at(7, 0), "sideways")
    with pytest.raises(ValidationError):
        svc.set_manual_attendance(s.id, SUBJECT, SCHOOL, "06-01-2025", "sick")
    with pytest.raises(ValidationError):
        svc.get_attendance_records(SCHOOL, month=13)


def test_disabled_school_refuses_recording(container, add_student):
    s = add_student()
    container.settings_service.set_attendance_enabled(SCHOOL, False)

    with pytest.raises(ValidationError, match="disabled"):
        container.attendance_service.record_attendance(s.id, SUBJECT, SCHOOL, at(7, 0), "check-in")
    with pytest.raises(ValidationError, match="disabled"):
        container.attendance_service.set_manual_attendance(s.id, SUBJECT, SCHOOL, DAY, "sick")


def test_timeliness_only_set_through_check_in(container, add_student):
    a = add_student(name="A", nis="1")
    b = add_student(name="B", nis="2")
    svc = container.attendance_service
    svc.record_attendance(a.id, SUBJECT, SCHOOL, at(7, 0), "check-in")
    svc.set_manual_attendance(b.id, SUBJECT, SCHOOL, DAY, "sick")

    for rec in all_records(container):
        assert (rec.timeliness is not None) == (rec.check_in is not None)


def test_racing_insert_is_reported_as_already_checked_in(container, add_student):
    s = add_student()
    container.attendance_service.record_attendance(s.id, SUBJECT, SCHOOL, at(7, 0), "check-in")
    key = RecordKey(SCHOOL, s.id, DAY, SUBJECT)

    def stale_decision(existing):
        # A writer that read the key before the first check-in landed.
        return Mutation.insert(
            AttendanceRecord(
                id="att-racer",
                student_id=s.id,
                subject=SUBJECT,
                school_name=SCHOOL,
                date=DAY,
                status=AttendanceStatus.PRESENT,
                check_in="2025-01-06T00:01:00.000Z",
                timeliness=Timeliness.ON_TIME,
            )
        )

    with pytest.raises(AttendanceConflictError, match="already checked in"):
        container.attendance_repo.apply(key, stale_decision)
    assert len(all_records(container)) == 1


def test_schools_are_isolated(container, add_student):
    container.school_service.register_school(OTHER_SCHOOL)
    s = add_student()
    svc = container.attendance_service
    svc.record_attendance(s.id, SUBJECT, SCHOOL, at(7, 0), "check-in")
    svc.record_attendance(s.id, SUBJECT, OTHER_SCHOOL, at(7, 0), "check-in")

    assert len(all_records(container, SCHOOL)) == 1
    assert len(all_records(container, OTHER_SCHOOL)) == 1


def test_query_filters(container, add_student):
    a = add_student(name="A", nis="1", class_name="X-A")
    b = add_student(name="B", nis="2", class_name="X-B")
    svc = container.attendance_service
    svc.record_attendance(a.id, SUBJECT, SCHOOL, at(7, 0), "check-in")
    svc.record_attendance(b.id, SUBJECT, SCHOOL, at(7, 0), "check-in")
    svc.record_attendance(a.id, "Fisika", SCHOOL, datetime(2025, 2, 3, 7, 0), "check-in")

    assert len(svc.get_attendance_records(SCHOOL)) == 3
    assert {r.student_id for r in svc.get_attendance_records(SCHOOL, class_name="X-A")} == {a.id}
    assert len(svc.get_attendance_records(SCHOOL, subject="Fisika")) == 1
    assert len(svc.get_attendance_records(SCHOOL, month=1, year=2025)) == 2
    assert svc.get_attendance_records(SCHOOL, month=2, year=2024) == []


def test_deleted_student_only_hidden_by_class_filter(container, add_student):
    s = add_student()
    svc = container.attendance_service
    svc.record_attendance(s.id, SUBJECT, SCHOOL, at(7, 0), "check-in")

    container.student_service.delete_student(s.id)

    assert len(svc.get_attendance_records(SCHOOL)) == 1
    assert svc.get_attendance_records(SCHOOL, class_name="X-A") == []


def test_daily_checklist_uses_representative_record(container, add_student):
    a = add_student(name="Ani", nis="1")
    b = add_student(name="Budi", nis="2")
    add_student(name="Cici", nis="3")
    svc = container.attendance_service
    svc.record_attendance(a.id, SUBJECT, SCHOOL, at(7, 0), "check-in")
    svc.set_manual_attendance(a.id, "Fisika", SCHOOL, DAY, "sick")
    svc.record_attendance(b.id, SUBJECT, SCHOOL, at(7, 40), "check-in")

    rows = svc.daily_checklist(SCHOOL, "X-A", DAY)

    assert [r.student.name for r in rows] == ["Ani", "Budi", "Cici"]
    assert rows[0].record.status == AttendanceStatus.SICK
    assert rows[1].record.timeliness == Timeliness.LATE
    assert rows[2].record is None

    only_math = svc.daily_checklist(SCHOOL, "X-A", DAY, SUBJECT)
    assert only_math[0].record.status == AttendanceStatus.PRESENT
