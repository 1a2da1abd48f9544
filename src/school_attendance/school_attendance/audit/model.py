from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PasswordChangeLogEntry:
    """One password change, shown to the admin until marked as reviewed."""

    id: str
    school_name: str
    operator_username: str
    timestamp: str
