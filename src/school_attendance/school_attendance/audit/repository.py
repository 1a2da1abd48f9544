from __future__ import annotations

from typing import Protocol, Sequence

from .model import PasswordChangeLogEntry


class PasswordLogRepository(Protocol):
    def list_all(self) -> Sequence[PasswordChangeLogEntry]:
        raise NotImplementedError

    def delete_by_id(self, entry_id: str) -> bool:
        raise NotImplementedError
