from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import UserType


@dataclass(frozen=True)
class OperatorUser:
    """Attendance operator account of one school."""

    id: str
    username: str
    password: str
    school_name: str


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_type: UserType
    username: str
    school_name: Optional[str]
    operator_id: Optional[str] = None
