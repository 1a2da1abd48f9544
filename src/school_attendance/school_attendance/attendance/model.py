from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import AttendanceStatus, ScanMode, Semester, Timeliness


@dataclass(frozen=True)
class RecordKey:
    """The tuple that identifies at most one attendance record."""

    school_name: str
    student_id: str
    date: str
    subject: str


@dataclass(frozen=True)
class AttendanceRecord:
    """One student's attendance for one subject on one local calendar day.

    ``check_in``/``check_out`` are ISO instants (UTC, ``Z`` suffix).
    ``timeliness`` is only ever set by a check-in.
    """

    id: str
    student_id: str
    subject: str
    school_name: str
    date: str
    status: AttendanceStatus
    check_in: Optional[str] = None
    check_out: Optional[str] = None
    timeliness: Optional[Timeliness] = None
    semester: Optional[Semester] = None

    @property
    def key(self) -> RecordKey:
        return RecordKey(self.school_name, self.student_id, self.date, self.subject)

    @property
    def effective_timestamp(self) -> Optional[str]:
        return self.check_out or self.check_in


@dataclass(frozen=True)
class RecordResult:
    record: AttendanceRecord
    type: ScanMode


@dataclass(frozen=True)
class Mutation:
    """What to do with the record of one key, decided from its current state."""

    action: str  # insert | update | delete | none
    record: Optional[AttendanceRecord] = None

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    NONE = "none"

    @classmethod
    def insert(cls, record: AttendanceRecord) -> "Mutation":
        return cls(cls.INSERT, record)

    @classmethod
    def update(cls, record: AttendanceRecord) -> "Mutation":
        return cls(cls.UPDATE, record)

    @classmethod
    def delete(cls, record: AttendanceRecord) -> "Mutation":
        return cls(cls.DELETE, record)

    @classmethod
    def nothing(cls) -> "Mutation":
        return cls(cls.NONE)
