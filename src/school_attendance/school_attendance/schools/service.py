from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional

from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from ..settings.service import SettingsService
from .model import SchoolInfo
from .repository import MSG_NAME_TAKEN, SchoolRepository

logger = logging.getLogger(__name__)


class SchoolService:
    """Use case: school identity (letterhead data) and the list of schools."""

    def __init__(self, schools: SchoolRepository, settings: SettingsService):
        self._schools = schools
        self._settings = settings

    def list_schools(self) -> List[str]:
        return self._settings.get_school_list()

    def get_school_info(self, name: str) -> Optional[SchoolInfo]:
        return self._schools.get(name)

    def register_school(self, name: str) -> SchoolInfo:
        name = require_non_empty(name, "School name")
        self._schools.create_if_missing(SchoolInfo(name=name))
        self._settings.register_school(name)
        return self._schools.get(name)

    def update_school_info(
        self,
        name: str,
        *,
        address: Optional[str] = None,
        headmaster: Optional[str] = None,
        headmaster_nip: Optional[str] = None,
        logo_base64: Optional[str] = None,
    ) -> SchoolInfo:
        current = self._schools.get(name)
        if not current:
            raise NotFoundError("School not found")

        updated = replace(
            current,
            address=current.address if address is None else address.strip(),
            headmaster=current.headmaster if headmaster is None else headmaster.strip(),
            headmaster_nip=current.headmaster_nip if headmaster_nip is None else headmaster_nip.strip(),
            logo_base64=current.logo_base64 if logo_base64 is None else (logo_base64 or None),
        )
        self._schools.update(updated)
        return updated

    def ensure_name_available(self, name: str) -> None:
        """Refuse a name that another school already uses."""
        if name in self._settings.get_school_list() or self._schools.get(name):
            raise ValidationError(MSG_NAME_TAKEN)

    def rename_school(self, old_name: str, new_name: str) -> None:
        """Rename the info row, the operator accounts and the school-list entry.

        Directory rows are not touched here; that is the backup service's job.
        """
        new_name = require_non_empty(new_name, "School name")
        self.ensure_name_available(new_name)
        if not self._schools.rename(old_name, new_name):
            self._schools.create_if_missing(SchoolInfo(name=new_name))
        self._settings.rename_school(old_name, new_name)
        logger.info("Renamed school %r to %r", old_name, new_name)
