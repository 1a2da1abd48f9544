from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.sqlite_base import db_cursor, fetchall, fetchone, from_json, to_json
from .model import Teacher
from .repository import TeacherRepository

_COLUMNS = "id, name, school_name, nip, subjects, classes"


def row_to_teacher(r: Dict[str, Any]) -> Teacher:
    return Teacher(
        id=r["id"],
        name=r["name"],
        school_name=r["school_name"],
        nip=r.get("nip"),
        subjects=tuple(from_json(r.get("subjects"), [])),
        classes=tuple(from_json(r.get("classes"), [])),
    )


class SQLiteTeacherRepository(TeacherRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_school(self, school_name: str) -> Sequence[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM teachers WHERE school_name=? ORDER BY name",
                (school_name,),
            )
            return [row_to_teacher(r) for r in fetchall(cur)]

    def get_by_id(self, teacher_id: str) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers WHERE id=?", (teacher_id,))
            r = fetchone(cur)
            return row_to_teacher(r) if r else None

    def create(self, teacher: Teacher) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO teachers({_COLUMNS}) VALUES(?,?,?,?,?,?)",
                (
                    teacher.id,
                    teacher.name,
                    teacher.school_name,
                    teacher.nip,
                    to_json(list(teacher.subjects)),
                    to_json(list(teacher.classes)),
                ),
            )

    def update(self, teacher: Teacher) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE teachers SET name=?, nip=?, subjects=?, classes=? WHERE id=? AND school_name=?",
                (
                    teacher.name,
                    teacher.nip,
                    to_json(list(teacher.subjects)),
                    to_json(list(teacher.classes)),
                    teacher.id,
                    teacher.school_name,
                ),
            )
            return cur.rowcount > 0

    def delete_by_id(self, teacher_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM teachers WHERE id=?", (teacher_id,))
            return cur.rowcount > 0
