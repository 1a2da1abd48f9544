from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Sequence

from ..common.datetime_utils import now_local, to_iso_instant
from ..common.ids import new_id
from ..core.exceptions import NotFoundError
from .model import PasswordChangeLogEntry
from .repository import PasswordLogRepository

logger = logging.getLogger(__name__)


def log_change(entry: PasswordChangeLogEntry) -> None:
    logger.info("Password changed for %r (school %r)", entry.operator_username, entry.school_name or "-")


class PasswordLogService:
    """Audit trail of password changes for the admin log view."""

    def __init__(self, entries: PasswordLogRepository, *, clock: Callable[[], datetime] = now_local):
        self._entries = entries
        self._clock = clock

    def new_entry(self, *, school_name: str, operator_username: str) -> PasswordChangeLogEntry:
        """Build an entry stamped now; the caller stores it with the password write."""
        return PasswordChangeLogEntry(
            id=new_id("pwlog"),
            school_name=school_name,
            operator_username=operator_username,
            timestamp=to_iso_instant(self._clock()),
        )

    def list_entries(self) -> Sequence[PasswordChangeLogEntry]:
        return self._entries.list_all()

    def clear_entry(self, entry_id: str) -> None:
        if not self._entries.delete_by_id(entry_id):
            raise NotFoundError("Log entry not found")
