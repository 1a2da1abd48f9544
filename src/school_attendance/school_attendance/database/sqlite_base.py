from __future__ import annotations

import json
import sqlite3
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection) -> Iterator[Tuple[sqlite3.Connection, sqlite3.Cursor]]:
    """Run the block inside one write transaction.

    Commits when the block finishes, rolls back on any exception so that a
    multi-step operation is all-or-nothing.
    """
    with conn_factory.lock:
        conn = conn_factory.connect()
        cur = conn.cursor()
        try:
            cur.execute("BEGIN IMMEDIATE")
            try:
                yield conn, cur
                cur.execute("COMMIT")
            except Exception:
                if conn.in_transaction:
                    cur.execute("ROLLBACK")
                raise
        finally:
            cur.close()


def fetchone(cur: sqlite3.Cursor) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return dict(row) if row else None


def fetchall(cur: sqlite3.Cursor) -> List[Dict[str, Any]]:
    return [dict(r) for r in cur.fetchall()]


def to_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def from_json(value: Optional[str], default: Any = None) -> Any:
    if value is None or value == "":
        return default
    return json.loads(value)
