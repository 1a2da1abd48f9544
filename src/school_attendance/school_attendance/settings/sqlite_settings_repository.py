from __future__ import annotations

from typing import Any, Optional

from ..audit.model import PasswordChangeLogEntry
from ..audit.sqlite_password_log_repository import insert_entry
from ..database.connection import DatabaseConnection
from ..database.sqlite_base import db_cursor, fetchone, from_json, to_json
from .repository import SettingsRepository


class SQLiteSettingsRepository(SettingsRepository):
    """Key-value settings; values are stored JSON-encoded."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, key: str) -> Optional[Any]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT value FROM settings WHERE key=?", (key,))
            r = fetchone(cur)
            return from_json(r["value"]) if r else None

    def put(self, key: str, value: Any, *, audit: Optional[PasswordChangeLogEntry] = None) -> None:
        """Store ``value``; an ``audit`` entry is written in the same transaction."""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT OR REPLACE INTO settings(key, value) VALUES(?, ?)",
                (key, to_json(value)),
            )
            if audit is not None:
                insert_entry(cur, audit)

    def delete(self, key: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM settings WHERE key=?", (key,))
