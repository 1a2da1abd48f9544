from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.sqlite_base import db_cursor, fetchall, fetchone
from .model import Student
from .repository import StudentRepository

_COLUMNS = "id, name, school_name, class_name, nis, parent_phone_number"


def row_to_student(r: Dict[str, Any]) -> Student:
    return Student(
        id=r["id"],
        name=r["name"],
        school_name=r["school_name"],
        class_name=r["class_name"],
        nis=r["nis"],
        parent_phone_number=r.get("parent_phone_number"),
    )


class SQLiteStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_school(self, school_name: str, class_name: Optional[str] = None) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            if class_name:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM students WHERE school_name=? AND class_name=? ORDER BY name",
                    (school_name, class_name),
                )
            else:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM students WHERE school_name=? ORDER BY name",
                    (school_name,),
                )
            return [row_to_student(r) for r in fetchall(cur)]

    def get_by_id(self, student_id: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE id=?", (student_id,))
            r = fetchone(cur)
            return row_to_student(r) if r else None

    def get_by_nis(self, school_name: str, nis: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE school_name=? AND nis=?",
                (school_name, nis),
            )
            r = fetchone(cur)
            return row_to_student(r) if r else None

    def create(self, student: Student) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO students({_COLUMNS}) VALUES(?,?,?,?,?,?)",
                (
                    student.id,
                    student.name,
                    student.school_name,
                    student.class_name,
                    student.nis,
                    student.parent_phone_number,
                ),
            )

    def update(self, student: Student) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE students
                SET name=?, class_name=?, nis=?, parent_phone_number=?
                WHERE id=? AND school_name=?
                """,
                (
                    student.name,
                    student.class_name,
                    student.nis,
                    student.parent_phone_number,
                    student.id,
                    student.school_name,
                ),
            )
            return cur.rowcount > 0

    def delete_by_id(self, student_id: str) -> bool:
        # Attendance rows keep pointing at the deleted id on purpose.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE id=?", (student_id,))
            return cur.rowcount > 0
