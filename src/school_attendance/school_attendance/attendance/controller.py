from __future__ import annotations

import calendar
import csv
import io
from datetime import datetime
from typing import Optional

from flask import Flask, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.web import current_school, json_ok, login_required, payload, to_json_dict
from ..container import Container
from ..core.constants import SCHOOL_ATTENDANCE_SUBJECT
from ..core.enums import ScanMode
from ..core.exceptions import NotFoundError, ValidationError
from .qr import parse_qr_payload


def _int_arg(name: str) -> Optional[int]:
    value = request.args.get(name)
    if value in (None, ""):
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"{name} must be a number")


def _scan_moment(data: dict) -> datetime:
    """Local wall-clock time of the scan; the form may back-date it."""
    day = data.get("date")
    at = data.get("time")
    if not day and not at:
        return now_local()

    now = now_local()
    day = parse_iso_date(day).isoformat() if day else now.strftime("%Y-%m-%d")
    at = at or now.strftime("%H:%M")
    try:
        return datetime.strptime(f"{day}T{at}", "%Y-%m-%dT%H:%M")
    except ValueError:
        raise ValidationError("Invalid time (HH:MM)")


def register(app: Flask, container: Container) -> None:
    def _write_report_csv(*, data, days: int, filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(
            out,
            fieldnames=["nis", "name", *[str(d) for d in range(1, days + 1)], "H", "T", "S", "I", "A"],
            extrasaction="ignore",
        )
        writer.writeheader()
        totals = {s["student_id"]: s for s in data.summary}
        for row in data.rows:
            s = totals[row["student_id"]]
            writer.writerow(
                {
                    **row,
                    "H": s["present"],
                    "T": s["late"],
                    "S": s["sick"],
                    "I": s["permission"],
                    "A": s["alpa"],
                }
            )

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/attendance/scan", methods=["POST"], endpoint="attendance_scan")
    @login_required
    def scan():
        """Check-in/check-out from the decoded QR text (or a typed NIS)."""
        data = payload()
        school = current_school()

        if data.get("qr"):
            nis = parse_qr_payload(data["qr"]).nis
        else:
            nis = (data.get("nis") or "").strip()
            if not nis:
                raise ValidationError("QR code or NIS must not be empty")

        student = container.student_service.get_by_nis(school, nis)
        if not student:
            raise NotFoundError("Student not found. Make sure the student (NIS) is registered")

        result = container.attendance_service.record_attendance(
            student.id,
            data.get("subject") or SCHOOL_ATTENDANCE_SUBJECT,
            school,
            _scan_moment(data),
            data.get("mode") or ScanMode.CHECK_IN.value,
            semester=data.get("semester"),
        )
        message = "Check-in successful" if result.type == ScanMode.CHECK_IN else "Check-out successful"
        return json_ok(
            message,
            type=result.type.value,
            record=to_json_dict(result.record),
            student=to_json_dict(student),
        )

    @app.route("/api/attendance/manual", methods=["POST"], endpoint="attendance_manual")
    @login_required
    def manual():
        data = payload()
        container.attendance_service.set_manual_attendance(
            data.get("student_id", ""),
            data.get("subject") or SCHOOL_ATTENDANCE_SUBJECT,
            current_school(),
            data.get("date", ""),
            data.get("status"),
            semester=data.get("semester"),
        )
        return json_ok("Attendance saved")

    @app.route("/api/attendance/records", methods=["GET"], endpoint="attendance_records")
    @login_required
    def records():
        rows = container.attendance_service.get_attendance_records(
            current_school(),
            class_name=request.args.get("class") or None,
            subject=request.args.get("subject") or None,
            month=_int_arg("month"),
            year=_int_arg("year"),
        )
        return json_ok(records=to_json_dict(rows))

    @app.route("/api/attendance/checklist", methods=["GET"], endpoint="attendance_checklist")
    @login_required
    def checklist():
        class_name = request.args.get("class") or ""
        if not class_name:
            raise ValidationError("Class must not be empty")
        rows = container.attendance_service.daily_checklist(
            current_school(),
            class_name,
            request.args.get("date") or now_local().strftime("%Y-%m-%d"),
            request.args.get("subject") or None,
        )
        return json_ok(rows=to_json_dict(list(rows)))

    def _report():
        class_name = request.args.get("class") or ""
        if not class_name:
            raise ValidationError("Class must not be empty")
        today = now_local()
        month = _int_arg("month")
        year = _int_arg("year")
        if month is None:
            month = today.month
        if year is None:
            year = today.year
        data = container.report_service.build_monthly_report(
            current_school(),
            class_name,
            request.args.get("subject") or None,
            month,
            year,
        )
        return data, class_name, month, year

    @app.route("/api/attendance/report", methods=["GET"], endpoint="attendance_report")
    @login_required
    def report():
        data, _, month, year = _report()
        return json_ok(month=month, year=year, rows=data.rows, summary=data.summary)

    @app.route("/api/attendance/report.csv", methods=["GET"], endpoint="attendance_report_csv")
    @login_required
    def report_csv():
        data, class_name, month, year = _report()
        return _write_report_csv(
            data=data,
            days=calendar.monthrange(year, month)[1],
            filename=f"attendance_{class_name}_{year}-{month:02d}.csv",
        )
