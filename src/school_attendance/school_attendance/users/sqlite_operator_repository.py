from __future__ import annotations

import sqlite3
from typing import Any, Dict, Optional, Sequence

from ..audit.model import PasswordChangeLogEntry
from ..audit.sqlite_password_log_repository import insert_entry
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.sqlite_base import db_cursor, fetchall, fetchone
from .model import OperatorUser
from .repository import OperatorRepository

_COLUMNS = "id, username, password, school_name"


def row_to_operator(r: Dict[str, Any]) -> OperatorUser:
    return OperatorUser(
        id=r["id"],
        username=r["username"],
        password=r["password"],
        school_name=r["school_name"],
    )


class SQLiteOperatorRepository(OperatorRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self, school_name: Optional[str] = None) -> Sequence[OperatorUser]:
        with db_cursor(self._conn_factory) as (_, cur):
            if school_name:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM operator_users WHERE school_name=? ORDER BY username",
                    (school_name,),
                )
            else:
                cur.execute(f"SELECT {_COLUMNS} FROM operator_users ORDER BY school_name, username")
            return [row_to_operator(r) for r in fetchall(cur)]

    def get_by_id(self, operator_id: str) -> Optional[OperatorUser]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM operator_users WHERE id=?", (operator_id,))
            r = fetchone(cur)
            return row_to_operator(r) if r else None

    def get_by_username(self, username: str, school_name: str) -> Optional[OperatorUser]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM operator_users WHERE username=? AND school_name=?",
                (username, school_name),
            )
            r = fetchone(cur)
            return row_to_operator(r) if r else None

    def find_by_username(self, username: str) -> Sequence[OperatorUser]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM operator_users WHERE username=? ORDER BY school_name",
                (username,),
            )
            return [row_to_operator(r) for r in fetchall(cur)]

    def create(self, operator: OperatorUser) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"INSERT INTO operator_users({_COLUMNS}) VALUES(?,?,?,?)",
                    (operator.id, operator.username, operator.password, operator.school_name),
                )
        except sqlite3.IntegrityError:
            raise ValidationError("Username already exists for this school")

    def update_password(
        self,
        operator_id: str,
        password: str,
        *,
        audit: Optional[PasswordChangeLogEntry] = None,
    ) -> bool:
        """Change the password; the ``audit`` entry is only kept if the row was updated."""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE operator_users SET password=? WHERE id=?", (password, operator_id))
            if cur.rowcount == 0:
                return False
            if audit is not None:
                insert_entry(cur, audit)
            return True

    def delete_by_id(self, operator_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM operator_users WHERE id=?", (operator_id,))
            return cur.rowcount > 0
