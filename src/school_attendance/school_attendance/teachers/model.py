from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class Teacher:
    """Domain entity: a teacher (no link to attendance)."""

    id: str
    name: str
    school_name: str
    nip: Optional[str] = None
    subjects: Tuple[str, ...] = field(default_factory=tuple)
    classes: Tuple[str, ...] = field(default_factory=tuple)
