"""Student QR cards: payload format and PNG rendering."""

from __future__ import annotations

import io
import json
from dataclasses import dataclass

import qrcode

from ..core.exceptions import ValidationError
from ..students.model import Student

INVALID_QR_MESSAGE = "Invalid or outdated QR code"


@dataclass(frozen=True)
class QrPayload:
    nis: str
    student_id: str = ""
    name: str = ""


def student_qr_payload(student: Student) -> str:
    return json.dumps({"studentId": student.id, "name": student.name, "nis": student.nis}, ensure_ascii=False)


def parse_qr_payload(text: str) -> QrPayload:
    """Decode the text read from a card; older cards without ``nis`` are rejected."""
    try:
        data = json.loads(text or "")
    except ValueError:
        raise ValidationError(INVALID_QR_MESSAGE)

    if not isinstance(data, dict) or not str(data.get("nis") or "").strip():
        raise ValidationError(INVALID_QR_MESSAGE)

    return QrPayload(
        nis=str(data["nis"]).strip(),
        student_id=str(data.get("studentId") or ""),
        name=str(data.get("name") or ""),
    )


def render_student_qr(student: Student) -> bytes:
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=2,
    )
    qr.add_data(student_qr_payload(student))
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
