from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Teacher


class TeacherRepository(Protocol):
    def list_for_school(self, school_name: str) -> Sequence[Teacher]:
        raise NotImplementedError

    def get_by_id(self, teacher_id: str) -> Optional[Teacher]:
        raise NotImplementedError

    def create(self, teacher: Teacher) -> None:
        raise NotImplementedError

    def update(self, teacher: Teacher) -> bool:
        raise NotImplementedError

    def delete_by_id(self, teacher_id: str) -> bool:
        raise NotImplementedError
