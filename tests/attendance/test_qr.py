import json

import pytest

from src.school_attendance.school_attendance.attendance.qr import (
    parse_qr_payload,
    render_student_qr,
    student_qr_payload,
)
from src.school_attendance.school_attendance.core.exceptions import ValidationError
from src.school_attendance.school_attendance.students.model import Student

STUDENT = Student(id="student-1", name="Ani", school_name="S", class_name="X-A", nis="1001")


def test_card_payload_carries_id_name_and_nis():
    assert json.loads(student_qr_payload(STUDENT)) == {"studentId": "student-1", "name": "Ani", "nis": "1001"}


def test_parse_card_payload():
    payload = parse_qr_payload(student_qr_payload(STUDENT))
    assert payload.nis == "1001"
    assert payload.student_id == "student-1"


@pytest.mark.parametrize("text", ["", "not json", "[1, 2]", '{"studentId": "student-1"}', '{"nis": "  "}'])
def test_invalid_or_old_cards_are_rejected(text):
    with pytest.raises(ValidationError, match="Invalid or outdated QR code"):
        parse_qr_payload(text)


def test_render_student_qr_returns_png():
    assert render_student_qr(STUDENT)[:8] == b"\x89PNG\r\n\x1a\n"
