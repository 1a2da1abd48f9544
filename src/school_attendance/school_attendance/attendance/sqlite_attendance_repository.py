from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional, Sequence

from ..core.enums import AttendanceStatus, Semester, Timeliness
from ..core.exceptions import AttendanceConflictError
from ..database.connection import DatabaseConnection
from ..database.sqlite_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord, Mutation, RecordKey
from .repository import AttendanceRepository, Decision

_COLUMNS = "id, student_id, subject, school_name, date, status, check_in, check_out, timeliness, semester"


def row_to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        id=r["id"],
        student_id=r["student_id"],
        subject=r["subject"],
        school_name=r["school_name"],
        date=r["date"],
        status=AttendanceStatus(r["status"]),
        check_in=r.get("check_in"),
        check_out=r.get("check_out"),
        timeliness=Timeliness(r["timeliness"]) if r.get("timeliness") else None,
        semester=Semester(r["semester"]) if r.get("semester") else None,
    )


def _params(rec: AttendanceRecord) -> tuple:
    return (
        rec.id,
        rec.student_id,
        rec.subject,
        rec.school_name,
        rec.date,
        rec.status.value,
        rec.check_in,
        rec.check_out,
        rec.timeliness.value if rec.timeliness else None,
        rec.semester.value if rec.semester else None,
    )


class SQLiteAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _select_for_key(cur: sqlite3.Cursor, key: RecordKey) -> Optional[AttendanceRecord]:
        cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM attendance_records
            WHERE school_name=? AND student_id=? AND date=? AND subject=?
            """,
            (key.school_name, key.student_id, key.date, key.subject),
        )
        r = fetchone(cur)
        return row_to_record(r) if r else None

    def get(self, key: RecordKey) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._select_for_key(cur, key)

    def apply(self, key: RecordKey, decide: Decision) -> Mutation:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                mutation = decide(self._select_for_key(cur, key))
                rec = mutation.record

                if mutation.action == Mutation.INSERT:
                    cur.execute(
                        f"INSERT INTO attendance_records({_COLUMNS}) VALUES(?,?,?,?,?,?,?,?,?,?)",
                        _params(rec),
                    )
                elif mutation.action == Mutation.UPDATE:
                    cur.execute(
                        """
                        UPDATE attendance_records
                        SET status=?, check_in=?, check_out=?, timeliness=?, semester=?
                        WHERE id=?
                        """,
                        (
                            rec.status.value,
                            rec.check_in,
                            rec.check_out,
                            rec.timeliness.value if rec.timeliness else None,
                            rec.semester.value if rec.semester else None,
                            rec.id,
                        ),
                    )
                elif mutation.action == Mutation.DELETE:
                    cur.execute("DELETE FROM attendance_records WHERE id=?", (rec.id,))
                return mutation
        except sqlite3.IntegrityError:
            # Another writer created the record for this key first.
            raise AttendanceConflictError("Student already checked in for this subject on this date")

    def query(
        self,
        school_name: str,
        *,
        class_name: Optional[str] = None,
        subject: Optional[str] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        date: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        cols = ", ".join(f"a.{c.strip()}" for c in _COLUMNS.split(","))
        where: List[str] = ["a.school_name=?"]
        params: List[Any] = [school_name]

        # Without a class filter, records of deleted students are still returned.
        if class_name:
            sql = f"SELECT {cols} FROM attendance_records a JOIN students s ON s.id = a.student_id"
            where.append("s.class_name=?")
            params.append(class_name)
        else:
            sql = f"SELECT {cols} FROM attendance_records a"

        if subject:
            where.append("a.subject=?")
            params.append(subject)
        if date:
            where.append("a.date=?")
            params.append(date)
        if month is not None:
            where.append("CAST(substr(a.date, 6, 2) AS INTEGER)=?")
            params.append(int(month))
        if year is not None:
            where.append("CAST(substr(a.date, 1, 4) AS INTEGER)=?")
            params.append(int(year))

        sql += " WHERE " + " AND ".join(where) + " ORDER BY a.date, a.check_in"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [row_to_record(r) for r in fetchall(cur)]
