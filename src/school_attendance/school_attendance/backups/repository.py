from __future__ import annotations

from typing import Optional, Protocol

from .model import BackupSnapshot


class BackupRepository(Protocol):
    def get(self, school_name: str) -> Optional[BackupSnapshot]:
        raise NotImplementedError

    def exists(self, school_name: str) -> bool:
        raise NotImplementedError

    def snapshot_and_clear(self, school_name: str, created_at: str) -> BackupSnapshot:
        raise NotImplementedError

    def restore_and_drop(self, school_name: str) -> Optional[BackupSnapshot]:
        raise NotImplementedError
