from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from ..common.datetime_utils import now_local, to_iso_instant
from ..common.validators import require_non_empty
from ..schools.service import SchoolService
from .repository import BackupRepository

logger = logging.getLogger(__name__)

RENAME_RESTORED = "restored"
RENAME_RESET = "reset"
RENAME_UNCHANGED = "unchanged"


class BackupService:
    """Backup/restore of a school's student and teacher directories.

    A snapshot is keyed by school name and consumed by its restore.
    """

    def __init__(
        self,
        backups: BackupRepository,
        schools: SchoolService,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._backups = backups
        self._schools = schools
        self._clock = clock

    def backup_and_reset(self, old_school_name: str) -> None:
        old_school_name = require_non_empty(old_school_name, "School name")
        snap = self._backups.snapshot_and_clear(old_school_name, to_iso_instant(self._clock()))
        logger.info(
            "Backed up %d students and %d teachers of %r",
            len(snap.students),
            len(snap.teachers),
            old_school_name,
        )

    def check_for_backup(self, school_name: str) -> bool:
        return self._backups.exists((school_name or "").strip())

    def restore(self, school_name: str) -> bool:
        """Restore and consume the snapshot; False when there is none."""
        school_name = (school_name or "").strip()
        snap = self._backups.restore_and_drop(school_name)
        if snap is None:
            logger.warning("No backup found for school name %r", school_name)
            return False
        logger.info(
            "Restored %d students and %d teachers of %r",
            len(snap.students),
            len(snap.teachers),
            school_name,
        )
        return True

    def rename_school(self, old_name: str, new_name: str, restore_backup: bool = True) -> str:
        """Switch the active school identity from ``old_name`` to ``new_name``.

        A name already used by another school is refused before anything
        changes. The info row and operator accounts move first; then the
        snapshot stored under the new name is restored when asked to and one
        exists, otherwise the old school's directories are backed up and
        cleared. Returns which of the two happened.
        """
        old_name = require_non_empty(old_name, "School name")
        new_name = require_non_empty(new_name, "School name")
        if old_name == new_name:
            return RENAME_UNCHANGED

        self._schools.rename_school(old_name, new_name)

        if restore_backup and self.check_for_backup(new_name):
            self.restore(new_name)
            return RENAME_RESTORED

        self.backup_and_reset(old_name)
        return RENAME_RESET
