from __future__ import annotations

import sqlite3
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.sqlite_base import db_cursor, fetchall
from .model import PasswordChangeLogEntry
from .repository import PasswordLogRepository


def insert_entry(cur: sqlite3.Cursor, entry: PasswordChangeLogEntry) -> None:
    """Append ``entry`` on an open cursor so it commits with the password write."""
    cur.execute(
        "INSERT INTO password_change_log(id, school_name, operator_username, timestamp) VALUES(?,?,?,?)",
        (entry.id, entry.school_name, entry.operator_username, entry.timestamp),
    )


class SQLitePasswordLogRepository(PasswordLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[PasswordChangeLogEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, school_name, operator_username, timestamp
                FROM password_change_log
                ORDER BY timestamp DESC
                """
            )
            return [
                PasswordChangeLogEntry(
                    id=r["id"],
                    school_name=r["school_name"],
                    operator_username=r["operator_username"],
                    timestamp=r["timestamp"],
                )
                for r in fetchall(cur)
            ]

    def delete_by_id(self, entry_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM password_change_log WHERE id=?", (entry_id,))
            return cur.rowcount > 0
