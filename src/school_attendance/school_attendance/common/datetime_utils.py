from __future__ import annotations

from datetime import date, datetime, time, timezone

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def to_local(moment: datetime) -> datetime:
    """Naive datetimes are already local wall-clock time; aware ones are converted."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone()


def local_date_key(moment: datetime) -> str:
    """Calendar day of ``moment`` in local time, as ``YYYY-MM-DD``.

    Built from the local date components rather than the UTC instant so that
    an early-morning event is never keyed to the previous day.
    """
    local = to_local(moment)
    return f"{local.year:04d}-{local.month:02d}-{local.day:02d}"


def to_iso_instant(moment: datetime) -> str:
    """UTC instant with millisecond precision and a ``Z`` suffix."""
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def parse_iso_instant(value: str) -> datetime:
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def parse_hhmm(value: str) -> time:
    """Parse an ``HH:MM`` deadline."""
    try:
        return datetime.strptime((value or "").strip(), "%H:%M").time()
    except ValueError:
        raise ValidationError("Invalid time (HH:MM)")
