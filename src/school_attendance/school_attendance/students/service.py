from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Sequence

from ..common.ids import new_id
from ..common.validators import optional_text, require_choice, require_non_empty
from ..core.constants import CLASSES
from ..core.exceptions import NotFoundError, ValidationError
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)


class StudentService:
    """Use case: manage the student directory of a school."""

    def __init__(self, students: StudentRepository):
        self._students = students

    def list_students(self, school_name: str, class_name: Optional[str] = None) -> Sequence[Student]:
        return self._students.list_for_school(school_name, class_name)

    def get_student(self, student_id: str) -> Optional[Student]:
        return self._students.get_by_id(student_id)

    def get_by_nis(self, school_name: str, nis: str) -> Optional[Student]:
        return self._students.get_by_nis(school_name, (nis or "").strip())

    def _check_nis_free(self, school_name: str, nis: str, *, own_id: Optional[str] = None) -> None:
        existing = self._students.get_by_nis(school_name, nis)
        if existing and existing.id != own_id:
            raise ValidationError(f"NIS {nis} is already used by {existing.name}")

    def add_student(
        self,
        *,
        school_name: str,
        name: str,
        nis: str,
        class_name: str,
        parent_phone_number: Optional[str] = None,
    ) -> Student:
        school_name = require_non_empty(school_name, "School name")
        name = require_non_empty(name, "Name")
        nis = require_non_empty(nis, "NIS")
        class_name = require_choice(class_name, "Class", CLASSES)
        self._check_nis_free(school_name, nis)

        student = Student(
            id=new_id("student"),
            name=name,
            school_name=school_name,
            class_name=class_name,
            nis=nis,
            parent_phone_number=optional_text(parent_phone_number),
        )
        self._students.create(student)
        logger.info("Added student %s (%s) to %r", student.id, class_name, school_name)
        return student

    def update_student(
        self,
        student_id: str,
        *,
        name: str,
        nis: str,
        class_name: str,
        parent_phone_number: Optional[str] = None,
    ) -> Student:
        current = self._students.get_by_id(student_id)
        if not current:
            raise NotFoundError("Student not found")

        nis = require_non_empty(nis, "NIS")
        self._check_nis_free(current.school_name, nis, own_id=current.id)
        updated = replace(
            current,
            name=require_non_empty(name, "Name"),
            nis=nis,
            class_name=require_choice(class_name, "Class", CLASSES),
            parent_phone_number=optional_text(parent_phone_number),
        )
        if not self._students.update(updated):
            raise NotFoundError("Student not found")
        return updated

    def delete_student(self, student_id: str) -> None:
        if self._students.delete_by_id(student_id):
            logger.info("Deleted student %s", student_id)
