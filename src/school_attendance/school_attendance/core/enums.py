from __future__ import annotations

from enum import Enum


class UserType(str, Enum):
    """Who is logged in: the single admin account or a school operator."""

    ADMIN = "admin"
    OPERATOR = "operator"


class AttendanceStatus(str, Enum):
    """Stored attendance status. Alpa (unexplained absence) is never stored."""

    PRESENT = "present"
    SICK = "sick"
    PERMISSION = "permission"


class Timeliness(str, Enum):
    ON_TIME = "on-time"
    LATE = "late"


class ScanMode(str, Enum):
    CHECK_IN = "check-in"
    CHECK_OUT = "check-out"


class Semester(str, Enum):
    """Odd/even term label used for report grouping."""

    GANJIL = "Ganjil"
    GENAP = "Genap"
