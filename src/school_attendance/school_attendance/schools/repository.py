from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import SchoolInfo

MSG_NAME_TAKEN = "School name already registered"


class SchoolRepository(Protocol):
    def list_all(self) -> Sequence[SchoolInfo]:
        raise NotImplementedError

    def get(self, name: str) -> Optional[SchoolInfo]:
        raise NotImplementedError

    def create_if_missing(self, info: SchoolInfo) -> bool:
        raise NotImplementedError

    def update(self, info: SchoolInfo) -> bool:
        raise NotImplementedError

    def rename(self, old_name: str, new_name: str) -> bool:
        raise NotImplementedError
