from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SchoolInfo:
    name: str
    address: str = ""
    headmaster: str = ""
    headmaster_nip: str = ""
    logo_base64: Optional[str] = None
