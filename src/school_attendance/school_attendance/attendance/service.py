from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Union

from ..common.datetime_utils import local_date_key, parse_hhmm, parse_iso_date, to_iso_instant
from ..common.ids import new_id
from ..common.validators import require_non_empty
from ..core.enums import AttendanceStatus, ScanMode, Semester, Timeliness
from ..core.exceptions import AttendanceConflictError, ValidationError
from ..settings.service import SettingsService
from ..students.model import Student
from ..students.repository import StudentRepository
from .factory import TimelinessStrategyFactory
from .model import AttendanceRecord, Mutation, RecordKey, RecordResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

MANUAL_STATUSES = (AttendanceStatus.SICK, AttendanceStatus.PERMISSION)

MSG_ALREADY_CHECKED_IN = "Student already checked in for this subject on this date"
MSG_ALREADY_MARKED = "Student already marked sick/permission and cannot scan"
MSG_NOT_CHECKED_IN = "Student not checked in yet for this subject on this date"
MSG_ALREADY_CHECKED_OUT = "Student already checked out for this subject on this date"
MSG_ALREADY_PRESENT = "Cannot save: student already marked present (QR scan)"


@dataclass(frozen=True)
class ChecklistRow:
    student: Student
    record: Optional[AttendanceRecord]


def _enum_or_none(enum_cls, value, field_name: str):
    if value is None or value == "":
        return None
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"{field_name} is not valid: {value!r}")


def _outranks(candidate: AttendanceRecord, current: AttendanceRecord) -> bool:
    cand_manual = candidate.status in MANUAL_STATUSES
    curr_manual = current.status in MANUAL_STATUSES
    if cand_manual != curr_manual:
        return cand_manual
    if cand_manual:
        return False
    # ISO instants in the same format compare chronologically as text.
    return (candidate.effective_timestamp or "") > (current.effective_timestamp or "")


def summarize_daily(records: Iterable[AttendanceRecord]) -> Dict[str, AttendanceRecord]:
    """Reduce each student's records of one day to a single representative.

    Sick/permission outranks present; among present records the one with the
    later check-out (or check-in when not checked out) wins.
    """
    best: Dict[str, AttendanceRecord] = {}
    for rec in records:
        current = best.get(rec.student_id)
        if current is None or _outranks(rec, current):
            best[rec.student_id] = rec
    return best


class AttendanceService:
    """Records check-in, check-out and manual statuses.

    Each (school, student, date, subject) has at most one record. Every
    mutation reads the current record and writes the new state in one
    transaction.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        settings: SettingsService,
        *,
        strategy_factory: Optional[TimelinessStrategyFactory] = None,
    ):
        self._attendance = attendance
        self._students = students
        self._settings = settings
        self._factory = strategy_factory or TimelinessStrategyFactory()

    def _ensure_enabled(self, school_name: str) -> None:
        if not self._settings.is_attendance_enabled(school_name):
            raise ValidationError("Attendance system is disabled for this school")

    def _timeliness_for(self, school_name: str, now: datetime) -> Timeliness:
        deadline = parse_hhmm(self._settings.get_on_time_deadline(school_name))
        strategy = self._factory.for_checkin(now=now, deadline=deadline)
        return strategy.decide_checkin(now=now, deadline=deadline).timeliness

    def record_attendance(
        self,
        student_id: str,
        subject: str,
        school_name: str,
        timestamp: datetime,
        mode: Union[ScanMode, str],
        timeliness: Union[Timeliness, str, None] = None,
        semester: Union[Semester, str, None] = None,
    ) -> RecordResult:
        student_id = require_non_empty(student_id, "Student")
        subject = require_non_empty(subject, "Subject")
        school_name = require_non_empty(school_name, "School name")
        mode = _enum_or_none(ScanMode, mode, "Scan mode")
        if mode is None:
            raise ValidationError("Scan mode must not be empty")
        timeliness = _enum_or_none(Timeliness, timeliness, "Timeliness")
        semester = _enum_or_none(Semester, semester, "Semester")
        self._ensure_enabled(school_name)

        key = RecordKey(school_name, student_id, local_date_key(timestamp), subject)
        instant = to_iso_instant(timestamp)

        if mode == ScanMode.CHECK_IN:
            if timeliness is None:
                timeliness = self._timeliness_for(school_name, timestamp)

            def decide(existing: Optional[AttendanceRecord]) -> Mutation:
                if existing is not None:
                    if existing.status in MANUAL_STATUSES:
                        raise AttendanceConflictError(MSG_ALREADY_MARKED)
                    raise AttendanceConflictError(MSG_ALREADY_CHECKED_IN)
                return Mutation.insert(
                    AttendanceRecord(
                        id=new_id("att"),
                        student_id=key.student_id,
                        subject=key.subject,
                        school_name=key.school_name,
                        date=key.date,
                        status=AttendanceStatus.PRESENT,
                        check_in=instant,
                        check_out=None,
                        timeliness=timeliness,
                        semester=semester,
                    )
                )

        else:

            def decide(existing: Optional[AttendanceRecord]) -> Mutation:
                if existing is None:
                    raise AttendanceConflictError(MSG_NOT_CHECKED_IN)
                if existing.status in MANUAL_STATUSES:
                    raise AttendanceConflictError(MSG_ALREADY_MARKED)
                if existing.check_out is not None:
                    raise AttendanceConflictError(MSG_ALREADY_CHECKED_OUT)
                return Mutation.update(
                    replace(
                        existing,
                        check_out=instant,
                        semester=existing.semester or semester,
                    )
                )

        mutation = self._attendance.apply(key, decide)
        logger.info("%s %s for %s (%s, %s)", mode.value, mutation.record.id, student_id, key.subject, key.date)
        return RecordResult(record=mutation.record, type=mode)

    def set_manual_attendance(
        self,
        student_id: str,
        subject: str,
        school_name: str,
        date: str,
        status: Union[AttendanceStatus, str, None],
        semester: Union[Semester, str, None] = None,
    ) -> None:
        """Mark a student sick/permission, or clear such a mark with ``status=None``."""
        student_id = require_non_empty(student_id, "Student")
        subject = require_non_empty(subject, "Subject")
        school_name = require_non_empty(school_name, "School name")
        date = parse_iso_date(date).isoformat()
        status = _enum_or_none(AttendanceStatus, status, "Status")
        if status == AttendanceStatus.PRESENT:
            raise ValidationError("Manual status must be sick or permission")
        semester = _enum_or_none(Semester, semester, "Semester")
        self._ensure_enabled(school_name)

        key = RecordKey(school_name, student_id, date, subject)

        def decide(existing: Optional[AttendanceRecord]) -> Mutation:
            if status is None:
                # Present records and missing records are left as they are.
                if existing is not None and existing.status in MANUAL_STATUSES:
                    return Mutation.delete(existing)
                return Mutation.nothing()

            if existing is not None and existing.status == AttendanceStatus.PRESENT:
                raise AttendanceConflictError(MSG_ALREADY_PRESENT)
            record = AttendanceRecord(
                id=existing.id if existing else new_id("att"),
                student_id=student_id,
                subject=subject,
                school_name=school_name,
                date=date,
                status=status,
                semester=semester,
            )
            return Mutation.update(record) if existing else Mutation.insert(record)

        mutation = self._attendance.apply(key, decide)
        if mutation.action != Mutation.NONE:
            logger.info("Manual %s for %s (%s, %s): %s", mutation.action, student_id, subject, date, status)

    def get_attendance_records(
        self,
        school_name: str,
        class_name: Optional[str] = None,
        subject: Optional[str] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> List[AttendanceRecord]:
        """Records of a school, optionally narrowed; ``month`` is 1-12."""
        if month is not None and not 1 <= int(month) <= 12:
            raise ValidationError("Month must be between 1 and 12")
        return list(
            self._attendance.query(
                school_name,
                class_name=class_name or None,
                subject=subject or None,
                month=month,
                year=year,
            )
        )

    def summarize_daily(self, records: Iterable[AttendanceRecord]) -> Dict[str, AttendanceRecord]:
        return summarize_daily(records)

    def daily_checklist(
        self,
        school_name: str,
        class_name: str,
        date: str,
        subject: Optional[str] = None,
    ) -> Sequence[ChecklistRow]:
        """Every student of a class with the record that represents their day.

        With a subject only that subject's record counts; without one all
        subjects of the day are reduced with ``summarize_daily``.
        """
        date = parse_iso_date(date).isoformat()
        students = self._students.list_for_school(school_name, class_name)
        records = self._attendance.query(school_name, class_name=class_name, subject=subject or None, date=date)
        by_student = summarize_daily(records)
        return [ChecklistRow(student=s, record=by_student.get(s.id)) for s in students]
