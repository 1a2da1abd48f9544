"""Versioned schema of the local database and its forward migrations.

The stored version lives in ``PRAGMA user_version``. Opening the database runs
every migration step between the stored version and ``SCHEMA_VERSION`` inside
one transaction together with the new version stamp, so an upgrade is either
fully applied or not at all.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Callable, Dict, Optional

from ..core.constants import SCHEMA_VERSION, SETTING_SCHOOL_LIST
from ..core.exceptions import DatabaseInitError
from .connection import DatabaseConnection
from .sqlite_base import db_cursor

logger = logging.getLogger(__name__)

# Tables whose rows gained a school_name column in version 4.
SCHOOL_SCOPED_TABLES = ("students", "teachers", "attendance_records", "operator_users")


def _v1_single_school(cur: sqlite3.Cursor) -> None:
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS students (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            class_name TEXT NOT NULL,
            nis TEXT NOT NULL,
            parent_phone_number TEXT
        )
        """
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_students_class ON students (class_name)")

    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS attendance_records (
            id TEXT PRIMARY KEY,
            student_id TEXT NOT NULL,
            subject TEXT NOT NULL,
            status TEXT NOT NULL CHECK (status IN ('present', 'sick', 'permission')),
            check_in TEXT,
            check_out TEXT,
            date TEXT NOT NULL,
            timeliness TEXT CHECK (timeliness IS NULL OR timeliness IN ('on-time', 'late')),
            semester TEXT
        )
        """
    )
    cur.execute(
        """
        CREATE UNIQUE INDEX IF NOT EXISTS ux_attendance_student_date_subject
        ON attendance_records (student_id, date, subject)
        """
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_attendance_date ON attendance_records (date)")

    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS school_info (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            address TEXT NOT NULL DEFAULT '',
            headmaster TEXT NOT NULL DEFAULT '',
            headmaster_nip TEXT,
            logo_base64 TEXT
        )
        """
    )
    cur.execute("CREATE TABLE IF NOT EXISTS settings (key TEXT PRIMARY KEY, value TEXT)")
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS operator_users (
            id TEXT PRIMARY KEY,
            username TEXT NOT NULL,
            password TEXT NOT NULL
        )
        """
    )
    cur.execute("CREATE UNIQUE INDEX IF NOT EXISTS ux_operator_username ON operator_users (username)")


def _v2_teachers(cur: sqlite3.Cursor) -> None:
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS teachers (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            nip TEXT,
            subjects TEXT NOT NULL DEFAULT '[]',
            classes TEXT NOT NULL DEFAULT '[]'
        )
        """
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_teachers_name ON teachers (name)")


def _v3_backups(cur: sqlite3.Cursor) -> None:
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS data_backups (
            school_name TEXT PRIMARY KEY,
            students TEXT NOT NULL,
            teachers TEXT NOT NULL
        )
        """
    )


def backfill_school_name(cur: sqlite3.Cursor, school_name: str) -> int:
    """Stamp rows that carry no school with ``school_name``.

    Rows that already belong to a school are left untouched, so running this
    twice changes nothing the second time. Returns the number of rows stamped.
    """
    stamped = 0
    for table in SCHOOL_SCOPED_TABLES:
        cur.execute(
            f"UPDATE {table} SET school_name=? WHERE school_name IS NULL OR school_name=''",
            (school_name,),
        )
        stamped += max(cur.rowcount, 0)
    return stamped


def _register_school_name(cur: sqlite3.Cursor, school_name: str) -> None:
    cur.execute("SELECT value FROM settings WHERE key=?", (SETTING_SCHOOL_LIST,))
    row = cur.fetchone()
    names = json.loads(row["value"]) if row and row["value"] else []
    if school_name not in names:
        names.append(school_name)
        cur.execute(
            "INSERT OR REPLACE INTO settings(key, value) VALUES(?, ?)",
            (SETTING_SCHOOL_LIST, json.dumps(names, ensure_ascii=False)),
        )


def _v4_multi_school(cur: sqlite3.Cursor) -> None:
    for table in SCHOOL_SCOPED_TABLES:
        cur.execute(f"ALTER TABLE {table} ADD COLUMN school_name TEXT")
    cur.execute("ALTER TABLE data_backups ADD COLUMN created_at TEXT")

    cur.execute("SELECT name FROM school_info WHERE id=1")
    legacy = cur.fetchone()
    legacy_name: Optional[str] = legacy["name"].strip() if legacy and legacy["name"] else None

    # school_info is now keyed by school name instead of the fixed id 1.
    cur.execute(
        """
        CREATE TABLE school_info_by_name (
            name TEXT PRIMARY KEY,
            address TEXT NOT NULL DEFAULT '',
            headmaster TEXT NOT NULL DEFAULT '',
            headmaster_nip TEXT,
            logo_base64 TEXT
        )
        """
    )
    cur.execute(
        """
        INSERT OR IGNORE INTO school_info_by_name(name, address, headmaster, headmaster_nip, logo_base64)
        SELECT TRIM(name), address, headmaster, headmaster_nip, logo_base64 FROM school_info
        WHERE TRIM(name) <> ''
        """
    )
    cur.execute("DROP TABLE school_info")
    cur.execute("ALTER TABLE school_info_by_name RENAME TO school_info")

    if legacy_name:
        stamped = backfill_school_name(cur, legacy_name)
        _register_school_name(cur, legacy_name)
        logger.info("Stamped %d legacy rows with school %r", stamped, legacy_name)

    cur.execute("DROP INDEX IF EXISTS ux_attendance_student_date_subject")
    cur.execute(
        """
        CREATE UNIQUE INDEX IF NOT EXISTS ux_attendance_tuple
        ON attendance_records (school_name, student_id, date, subject)
        """
    )
    cur.execute("DROP INDEX IF EXISTS ux_operator_username")
    cur.execute(
        """
        CREATE UNIQUE INDEX IF NOT EXISTS ux_operator_username_school
        ON operator_users (username, school_name)
        """
    )


def _v5_password_log(cur: sqlite3.Cursor) -> None:
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS password_change_log (
            id TEXT PRIMARY KEY,
            school_name TEXT NOT NULL,
            operator_username TEXT NOT NULL,
            timestamp TEXT NOT NULL
        )
        """
    )


def _v6_lookup_indexes(cur: sqlite3.Cursor) -> None:
    cur.execute("CREATE INDEX IF NOT EXISTS idx_students_school_class ON students (school_name, class_name)")
    cur.execute("CREATE INDEX IF NOT EXISTS idx_students_school_nis ON students (school_name, nis)")
    cur.execute("CREATE INDEX IF NOT EXISTS idx_attendance_school_date ON attendance_records (school_name, date)")
    cur.execute("CREATE INDEX IF NOT EXISTS idx_teachers_school_name ON teachers (school_name, name)")


MIGRATIONS: Dict[int, Callable[[sqlite3.Cursor], None]] = {
    1: _v1_single_school,
    2: _v2_teachers,
    3: _v3_backups,
    4: _v4_multi_school,
    5: _v5_password_log,
    6: _v6_lookup_indexes,
}


class SchemaManager:
    """Creates the schema on first open and upgrades older databases in place."""

    def __init__(self, conn_factory: DatabaseConnection, *, target_version: int = SCHEMA_VERSION):
        if target_version not in MIGRATIONS:
            raise ValueError(f"Unknown schema version: {target_version}")
        self._conn_factory = conn_factory
        self._target = int(target_version)

    def stored_version(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("PRAGMA user_version")
            return int(cur.fetchone()[0])

    def open(self) -> int:
        """Bring the database to the target version and return that version.

        Raises DatabaseInitError if the storage cannot be opened, the upgrade
        fails (nothing is kept in that case) or the file is newer than this code.
        """
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("PRAGMA user_version")
                version = int(cur.fetchone()[0])

                if version > self._target:
                    raise DatabaseInitError(
                        f"Database version {version} is newer than supported version {self._target}"
                    )

                for step in range(version + 1, self._target + 1):
                    logger.info("Applying schema step %d", step)
                    MIGRATIONS[step](cur)

                if version < self._target:
                    cur.execute(f"PRAGMA user_version = {self._target:d}")
                    logger.info("Database schema at version %d (was %d)", self._target, version)
        except sqlite3.Error as e:
            raise DatabaseInitError(f"Cannot initialize database: {e}") from e

        return self._target
