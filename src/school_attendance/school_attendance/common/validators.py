from __future__ import annotations

from typing import Iterable, Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} must not be empty")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_choice(value: str, field_name: str, choices: Iterable[str]) -> str:
    if value not in set(choices):
        raise ValidationError(f"{field_name} is not valid: {value!r}")
    return value


def optional_text(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None
