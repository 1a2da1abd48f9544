from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.school_attendance.school_attendance.database.bootstrap import ensure_defaults
from src.school_attendance.school_attendance.database.connection import DBConfig, DatabaseConnection
from src.school_attendance.school_attendance.database.schema import SchemaManager


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    conn = DatabaseConnection(DBConfig(path=str(settings.DB_CONFIG["path"])))
    try:
        manager = SchemaManager(conn)
        before = manager.stored_version()
        after = manager.open()
        ensure_defaults(
            conn,
            school_name=settings.DEFAULT_SCHOOL_NAME,
            admin_password=settings.DEFAULT_ADMIN_PASSWORD,
        )
    finally:
        conn.close()

    print(f"OK: {conn.path} schema version {before} -> {after}")


if __name__ == "__main__":
    main()
