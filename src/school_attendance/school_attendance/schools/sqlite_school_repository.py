from __future__ import annotations

import sqlite3
from typing import Any, Dict, Optional, Sequence

from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.sqlite_base import db_cursor, fetchall, fetchone
from .model import SchoolInfo
from .repository import MSG_NAME_TAKEN, SchoolRepository

_COLUMNS = "name, address, headmaster, headmaster_nip, logo_base64"


def row_to_school(r: Dict[str, Any]) -> SchoolInfo:
    return SchoolInfo(
        name=r["name"],
        address=r.get("address") or "",
        headmaster=r.get("headmaster") or "",
        headmaster_nip=r.get("headmaster_nip") or "",
        logo_base64=r.get("logo_base64"),
    )


class SQLiteSchoolRepository(SchoolRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[SchoolInfo]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM school_info ORDER BY name")
            return [row_to_school(r) for r in fetchall(cur)]

    def get(self, name: str) -> Optional[SchoolInfo]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM school_info WHERE name=?", (name,))
            r = fetchone(cur)
            return row_to_school(r) if r else None

    def create_if_missing(self, info: SchoolInfo) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT OR IGNORE INTO school_info({_COLUMNS}) VALUES(?,?,?,?,?)",
                (info.name, info.address, info.headmaster, info.headmaster_nip, info.logo_base64),
            )
            return cur.rowcount > 0

    def update(self, info: SchoolInfo) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE school_info
                SET address=?, headmaster=?, headmaster_nip=?, logo_base64=?
                WHERE name=?
                """,
                (info.address, info.headmaster, info.headmaster_nip, info.logo_base64, info.name),
            )
            return cur.rowcount > 0

    def rename(self, old_name: str, new_name: str) -> bool:
        """Move the info row and the operator accounts of ``old_name`` to ``new_name``.

        Both move in one transaction. An info row already stored under
        ``new_name`` is never overwritten. Returns False when ``old_name`` had no
        info row.
        """
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("SELECT 1 FROM school_info WHERE name=?", (new_name,))
                if cur.fetchone():
                    raise ValidationError(MSG_NAME_TAKEN)
                cur.execute("UPDATE school_info SET name=? WHERE name=?", (new_name, old_name))
                renamed = cur.rowcount > 0
                cur.execute("UPDATE operator_users SET school_name=? WHERE school_name=?", (new_name, old_name))
                return renamed
        except sqlite3.IntegrityError:
            # an operator username already taken under the new name
            raise ValidationError("Username already exists for this school")
