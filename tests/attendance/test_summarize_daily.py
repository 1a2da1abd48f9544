from src.school_attendance.school_attendance.attendance.model import AttendanceRecord
from src.school_attendance.school_attendance.attendance.service import summarize_daily
from src.school_attendance.school_attendance.core.enums import AttendanceStatus, Timeliness


def present(rid, student, check_in, check_out=None, subject="Matematika"):
    return AttendanceRecord(
        id=rid,
        student_id=student,
        subject=subject,
        school_name="S",
        date="2025-01-06",
        status=AttendanceStatus.PRESENT,
        check_in=check_in,
        check_out=check_out,
        timeliness=Timeliness.ON_TIME,
    )


def manual(rid, student, status, subject="Fisika"):
    return AttendanceRecord(
        id=rid,
        student_id=student,
        subject=subject,
        school_name="S",
        date="2025-01-06",
        status=status,
    )


def test_sick_outranks_present_in_any_order():
    p = present("p", "s1", "2025-01-06T00:10:00.000Z", "2025-01-06T07:00:00.000Z")
    s = manual("s", "s1", AttendanceStatus.SICK)

    assert summarize_daily([p, s])["s1"].id == "s"
    assert summarize_daily([s, p])["s1"].id == "s"


def test_later_effective_timestamp_wins_among_present():
    early_out = present("a", "s1", "2025-01-06T00:10:00.000Z", "2025-01-06T03:00:00.000Z", subject="A")
    later_in = present("b", "s1", "2025-01-06T04:00:00.000Z", subject="B")
    earliest = present("c", "s1", "2025-01-06T00:05:00.000Z", subject="C")

    assert summarize_daily([early_out, later_in, earliest])["s1"].id == "b"
    assert summarize_daily([later_in, early_out])["s1"].id == "b"


def test_one_entry_per_student():
    records = [
        present("a", "s1", "2025-01-06T00:10:00.000Z"),
        present("b", "s2", "2025-01-06T00:11:00.000Z"),
        manual("c", "s3", AttendanceStatus.PERMISSION),
    ]

    result = summarize_daily(records)

    assert set(result) == {"s1", "s2", "s3"}
    assert summarize_daily([]) == {}
