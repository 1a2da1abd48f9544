from __future__ import annotations

import logging
import uuid

from ..core.constants import (
    SETTING_ADMIN_PASSWORD,
    SETTING_ATTENDANCE_ENABLED_PREFIX,
    SETTING_SCHOOL_LIST,
)
from .connection import DatabaseConnection
from .sqlite_base import db_cursor, from_json, to_json

logger = logging.getLogger(__name__)


def ensure_defaults(conn_factory: DatabaseConnection, *, school_name: str, admin_password: str) -> None:
    """First-run initialisation: admin password, default school and its flags.

    Existing values are never overwritten, so this is safe on every start.
    """
    school_name = school_name.strip()
    with db_cursor(conn_factory) as (_, cur):
        cur.execute(
            "INSERT OR IGNORE INTO settings(key, value) VALUES(?, ?)",
            (SETTING_ADMIN_PASSWORD, to_json(admin_password)),
        )

        cur.execute("SELECT value FROM settings WHERE key=?", (SETTING_SCHOOL_LIST,))
        row = cur.fetchone()
        names = from_json(row["value"], []) if row else []
        if not names:
            names = [school_name]
            cur.execute(
                "INSERT OR REPLACE INTO settings(key, value) VALUES(?, ?)",
                (SETTING_SCHOOL_LIST, to_json(names)),
            )
            logger.info("Registered default school %r", school_name)

        for name in names:
            cur.execute(
                "INSERT OR IGNORE INTO school_info(name, address, headmaster, headmaster_nip, logo_base64) "
                "VALUES(?, '', '', '', NULL)",
                (name,),
            )
            cur.execute(
                "INSERT OR IGNORE INTO settings(key, value) VALUES(?, ?)",
                (f"{SETTING_ATTENDANCE_ENABLED_PREFIX}{name}", to_json(True)),
            )


def ensure_demo_operator(
    conn_factory: DatabaseConnection,
    *,
    school_name: str,
    username: str = "absen",
    password: str = "absen123",
) -> None:
    with db_cursor(conn_factory) as (_, cur):
        cur.execute(
            "SELECT id FROM operator_users WHERE username=? AND school_name=?",
            (username, school_name),
        )
        if cur.fetchone():
            return
        cur.execute(
            "INSERT INTO operator_users(id, username, password, school_name) VALUES(?, ?, ?, ?)",
            (f"operator-{uuid.uuid4().hex}", username, password, school_name),
        )
        logger.info("Seeded demo operator %r for %r", username, school_name)
