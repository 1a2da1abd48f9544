from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..audit.model import PasswordChangeLogEntry
from .model import OperatorUser


class OperatorRepository(Protocol):
    def list_all(self, school_name: Optional[str] = None) -> Sequence[OperatorUser]:
        raise NotImplementedError

    def get_by_id(self, operator_id: str) -> Optional[OperatorUser]:
        raise NotImplementedError

    def get_by_username(self, username: str, school_name: str) -> Optional[OperatorUser]:
        raise NotImplementedError

    def find_by_username(self, username: str) -> Sequence[OperatorUser]:
        raise NotImplementedError

    def create(self, operator: OperatorUser) -> None:
        raise NotImplementedError

    def update_password(
        self,
        operator_id: str,
        password: str,
        *,
        audit: Optional[PasswordChangeLogEntry] = None,
    ) -> bool:
        raise NotImplementedError

    def delete_by_id(self, operator_id: str) -> bool:
        raise NotImplementedError
