from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Optional, Sequence

from ..common.ids import new_id
from ..common.validators import optional_text, require_choice, require_non_empty
from ..core.constants import CLASSES, SUBJECTS
from ..core.exceptions import NotFoundError
from .model import Teacher
from .repository import TeacherRepository


def _clean(values: Optional[Iterable[str]], field_name: str, choices) -> tuple:
    out: list[str] = []
    for v in values or ():
        v = require_choice(v, field_name, choices)
        if v not in out:
            out.append(v)
    return tuple(out)


class TeacherService:
    def __init__(self, teachers: TeacherRepository):
        self._teachers = teachers

    def list_teachers(self, school_name: str) -> Sequence[Teacher]:
        return self._teachers.list_for_school(school_name)

    def get_teacher(self, teacher_id: str) -> Optional[Teacher]:
        return self._teachers.get_by_id(teacher_id)

    def add_teacher(
        self,
        *,
        school_name: str,
        name: str,
        nip: Optional[str] = None,
        subjects: Optional[Iterable[str]] = None,
        classes: Optional[Iterable[str]] = None,
    ) -> Teacher:
        teacher = Teacher(
            id=new_id("teacher"),
            name=require_non_empty(name, "Name"),
            school_name=require_non_empty(school_name, "School name"),
            nip=optional_text(nip),
            subjects=_clean(subjects, "Subject", SUBJECTS),
            classes=_clean(classes, "Class", CLASSES),
        )
        self._teachers.create(teacher)
        return teacher

    def update_teacher(
        self,
        teacher_id: str,
        *,
        name: Optional[str] = None,
        nip: Optional[str] = None,
        subjects: Optional[Iterable[str]] = None,
        classes: Optional[Iterable[str]] = None,
    ) -> Teacher:
        """Partial update: fields left as None keep their stored value."""
        current = self._teachers.get_by_id(teacher_id)
        if not current:
            raise NotFoundError("Teacher not found")

        updated = current
        if name is not None:
            updated = replace(updated, name=require_non_empty(name, "Name"))
        if nip is not None:
            updated = replace(updated, nip=optional_text(nip))
        if subjects is not None:
            updated = replace(updated, subjects=_clean(subjects, "Subject", SUBJECTS))
        if classes is not None:
            updated = replace(updated, classes=_clean(classes, "Class", CLASSES))

        if not self._teachers.update(updated):
            raise NotFoundError("Teacher not found")
        return updated

    def delete_teacher(self, teacher_id: str) -> None:
        self._teachers.delete_by_id(teacher_id)
