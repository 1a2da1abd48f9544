from __future__ import annotations

from typing import Any, Optional, Protocol

from ..audit.model import PasswordChangeLogEntry


class SettingsRepository(Protocol):
    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def put(self, key: str, value: Any, *, audit: Optional[PasswordChangeLogEntry] = None) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError
