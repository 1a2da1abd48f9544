from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, List, Optional

from ..attendance.model import AttendanceRecord
from ..attendance.service import AttendanceService, summarize_daily
from ..core.enums import AttendanceStatus, Timeliness
from ..core.exceptions import ValidationError
from ..students.repository import StudentRepository

CODE_PRESENT = "H"
CODE_LATE = "T"
CODE_SICK = "S"
CODE_PERMISSION = "I"
CODE_HOLIDAY = "-"
CODE_ALPA = ""


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


def cell_code(record: Optional[AttendanceRecord], day: date) -> str:
    if day.weekday() == calendar.SUNDAY:
        return CODE_HOLIDAY
    if record is None:
        return CODE_ALPA
    if record.status == AttendanceStatus.SICK:
        return CODE_SICK
    if record.status == AttendanceStatus.PERMISSION:
        return CODE_PERMISSION
    if record.timeliness == Timeliness.LATE:
        return CODE_LATE
    return CODE_PRESENT


class AttendanceReportService:
    """Monthly recap of a class: one code per student per day."""

    def __init__(
        self,
        attendance: AttendanceService,
        students: StudentRepository,
        *,
        today: Callable[[], date] = date.today,
    ):
        self._attendance = attendance
        self._students = students
        self._today = today

    def build_monthly_report(
        self,
        school_name: str,
        class_name: str,
        subject: Optional[str],
        month: int,
        year: int,
    ) -> ReportData:
        if not 1 <= int(month) <= 12:
            raise ValidationError("Month must be between 1 and 12")
        if not 1 <= int(year) <= 9999:
            raise ValidationError("Year is not valid")
        month, year = int(month), int(year)

        students = self._students.list_for_school(school_name, class_name)
        records = self._attendance.get_attendance_records(
            school_name, class_name=class_name, subject=subject, month=month, year=year
        )

        by_date: Dict[str, List[AttendanceRecord]] = {}
        for rec in records:
            by_date.setdefault(rec.date, []).append(rec)
        # One representative per student and day, also when all subjects are shown.
        daily = {d: summarize_daily(recs) for d, recs in by_date.items()}

        days = [date(year, month, n) for n in range(1, calendar.monthrange(year, month)[1] + 1)]
        last_counted = min(days[-1], self._today())

        rows: list[dict] = []
        summary: list[dict] = []
        for s in students:
            counts = {CODE_PRESENT: 0, CODE_LATE: 0, CODE_SICK: 0, CODE_PERMISSION: 0, CODE_ALPA: 0}
            cells: Dict[str, str] = {}
            for day in days:
                code = cell_code(daily.get(day.isoformat(), {}).get(s.id), day)
                cells[str(day.day)] = code
                if code == CODE_HOLIDAY:
                    continue
                if code == CODE_ALPA and day > last_counted:
                    continue
                counts[code] += 1

            rows.append({"student_id": s.id, "name": s.name, "nis": s.nis, **cells})
            summary.append(
                {
                    "student_id": s.id,
                    "name": s.name,
                    "present": counts[CODE_PRESENT],
                    "late": counts[CODE_LATE],
                    "sick": counts[CODE_SICK],
                    "permission": counts[CODE_PERMISSION],
                    "alpa": counts[CODE_ALPA],
                }
            )

        return ReportData(rows=rows, summary=summary)
