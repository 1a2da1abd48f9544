from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    """Repository interface for Student.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def list_for_school(self, school_name: str, class_name: Optional[str] = None) -> Sequence[Student]:
        raise NotImplementedError

    def get_by_id(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def get_by_nis(self, school_name: str, nis: str) -> Optional[Student]:
        raise NotImplementedError

    def create(self, student: Student) -> None:
        raise NotImplementedError

    def update(self, student: Student) -> bool:
        raise NotImplementedError

    def delete_by_id(self, student_id: str) -> bool:
        raise NotImplementedError
