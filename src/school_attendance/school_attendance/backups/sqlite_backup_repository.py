from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional

from ..database.connection import DatabaseConnection
from ..database.sqlite_base import db_cursor, fetchall, fetchone, from_json, to_json
from .model import BackupSnapshot
from .repository import BackupRepository

_STUDENT_COLUMNS = ("id", "name", "school_name", "class_name", "nis", "parent_phone_number")
_TEACHER_COLUMNS = ("id", "name", "school_name", "nip", "subjects", "classes")


def _insert_rows(cur: sqlite3.Cursor, table: str, columns, rows: List[Dict[str, Any]], school_name: str) -> None:
    placeholders = ",".join("?" for _ in columns)
    for row in rows:
        values = [school_name if c == "school_name" else row.get(c) for c in columns]
        cur.execute(
            f"INSERT OR REPLACE INTO {table}({', '.join(columns)}) VALUES({placeholders})",
            values,
        )


class SQLiteBackupRepository(BackupRepository):
    """Snapshots live in ``data_backups``; each public call is one transaction."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _select(cur: sqlite3.Cursor, school_name: str) -> Optional[BackupSnapshot]:
        cur.execute(
            "SELECT school_name, students, teachers, created_at FROM data_backups WHERE school_name=?",
            (school_name,),
        )
        r = fetchone(cur)
        if not r:
            return None
        return BackupSnapshot(
            school_name=r["school_name"],
            students=from_json(r["students"], []),
            teachers=from_json(r["teachers"], []),
            created_at=r.get("created_at"),
        )

    def get(self, school_name: str) -> Optional[BackupSnapshot]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._select(cur, school_name)

    def exists(self, school_name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 FROM data_backups WHERE school_name=?", (school_name,))
            return cur.fetchone() is not None

    def snapshot_and_clear(self, school_name: str, created_at: str) -> BackupSnapshot:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {', '.join(_STUDENT_COLUMNS)} FROM students WHERE school_name=? ORDER BY name",
                (school_name,),
            )
            students = fetchall(cur)
            cur.execute(
                f"SELECT {', '.join(_TEACHER_COLUMNS)} FROM teachers WHERE school_name=? ORDER BY name",
                (school_name,),
            )
            teachers = fetchall(cur)

            cur.execute(
                "INSERT OR REPLACE INTO data_backups(school_name, students, teachers, created_at) VALUES(?,?,?,?)",
                (school_name, to_json(students), to_json(teachers), created_at),
            )
            # Attendance records are not part of the snapshot and stay in place.
            cur.execute("DELETE FROM students WHERE school_name=?", (school_name,))
            cur.execute("DELETE FROM teachers WHERE school_name=?", (school_name,))

            return BackupSnapshot(school_name, students, teachers, created_at)

    def restore_and_drop(self, school_name: str) -> Optional[BackupSnapshot]:
        with db_cursor(self._conn_factory) as (_, cur):
            snapshot = self._select(cur, school_name)
            if snapshot is None:
                return None

            cur.execute("DELETE FROM students WHERE school_name=?", (school_name,))
            cur.execute("DELETE FROM teachers WHERE school_name=?", (school_name,))
            _insert_rows(cur, "students", _STUDENT_COLUMNS, snapshot.students, school_name)
            _insert_rows(cur, "teachers", _TEACHER_COLUMNS, snapshot.teachers, school_name)
            cur.execute("DELETE FROM data_backups WHERE school_name=?", (school_name,))
            return snapshot
