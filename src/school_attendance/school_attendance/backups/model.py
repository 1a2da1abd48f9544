from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class BackupSnapshot:
    """Frozen copy of one school's student and teacher rows."""

    school_name: str
    students: List[Dict[str, Any]] = field(default_factory=list)
    teachers: List[Dict[str, Any]] = field(default_factory=list)
    created_at: Optional[str] = None
