from __future__ import annotations

import sqlite3
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..core.exceptions import DatabaseInitError

MEMORY_PATH = ":memory:"


@dataclass
class DBConfig:
    path: str = MEMORY_PATH


class DatabaseConnection:
    """Handle to the local SQLite database.

    Built once at startup and passed to every repository. It keeps one
    connection open for its whole life so that ``:memory:`` databases survive
    between operations; ``lock`` serialises access from Flask worker threads.
    """

    def __init__(self, config: DBConfig):
        self._config = config
        self._conn: Optional[sqlite3.Connection] = None
        self.lock = threading.RLock()

    @property
    def path(self) -> str:
        return self._config.path

    def connect(self) -> sqlite3.Connection:
        if self._conn is not None:
            return self._conn

        path = self._config.path
        try:
            if path != MEMORY_PATH:
                Path(path).parent.mkdir(parents=True, exist_ok=True)
            # Transactions are opened explicitly by db_cursor.
            conn = sqlite3.connect(path, isolation_level=None, check_same_thread=False)
        except (sqlite3.Error, OSError) as e:
            raise DatabaseInitError(f"Cannot open database at {path!r}: {e}") from e

        conn.row_factory = sqlite3.Row
        self._conn = conn
        return conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
