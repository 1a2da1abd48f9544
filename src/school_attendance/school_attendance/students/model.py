from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Domain entity: a student of one school.

    Note: plain data object (no DB access code). ``nis`` is the national
    student number and is unique within a school.
    """

    id: str
    name: str
    school_name: str
    class_name: str
    nis: str
    parent_phone_number: Optional[str] = None
