from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..audit.service import PasswordLogService, log_change
from ..common.datetime_utils import parse_hhmm
from ..common.validators import require_min_length, require_non_empty
from ..core.constants import (
    ADMIN_USERNAME,
    DEFAULT_ON_TIME_DEADLINE,
    MIN_PASSWORD_LENGTH,
    SETTING_ADMIN_PASSWORD,
    SETTING_ADMIN_PROFILE,
    SETTING_ATTENDANCE_ENABLED_PREFIX,
    SETTING_ON_TIME_DEADLINE_PREFIX,
    SETTING_SCHOOL_LIST,
)
from ..core.exceptions import ValidationError
from .repository import SettingsRepository

logger = logging.getLogger(__name__)

ADMIN_PROFILE_FIELDS = ("full_name", "email", "phone")


class SettingsService:
    """Typed access to the key-value settings.

    ``get_setting``/``update_setting`` are plain key-value operations. Anything
    with a side effect (the admin password audit entry) has its own method.
    """

    def __init__(
        self,
        settings: SettingsRepository,
        password_log: PasswordLogService,
        *,
        default_deadline: str = DEFAULT_ON_TIME_DEADLINE,
    ):
        self._settings = settings
        self._password_log = password_log
        self._default_deadline = default_deadline

    # generic
    def get_setting(self, key: str, default: Any = None) -> Any:
        value = self._settings.get(key)
        return default if value is None else value

    def update_setting(self, key: str, value: Any) -> None:
        self._settings.put(require_non_empty(key, "Setting key"), value)

    # feature flags
    def is_attendance_enabled(self, school_name: str) -> bool:
        # A school without the flag has never been switched off.
        return self.get_setting(f"{SETTING_ATTENDANCE_ENABLED_PREFIX}{school_name}", True) is not False

    def set_attendance_enabled(self, school_name: str, enabled: bool) -> None:
        self._settings.put(f"{SETTING_ATTENDANCE_ENABLED_PREFIX}{school_name}", bool(enabled))
        logger.info("Attendance %s for %r", "enabled" if enabled else "disabled", school_name)

    def get_on_time_deadline(self, school_name: str) -> str:
        return self.get_setting(f"{SETTING_ON_TIME_DEADLINE_PREFIX}{school_name}", self._default_deadline)

    def set_on_time_deadline(self, school_name: str, deadline: str) -> str:
        value = parse_hhmm(deadline).strftime("%H:%M")
        self._settings.put(f"{SETTING_ON_TIME_DEADLINE_PREFIX}{school_name}", value)
        logger.info("On-time deadline for %r set to %s", school_name, value)
        return value

    # admin account
    def get_admin_password(self) -> Optional[str]:
        return self._settings.get(SETTING_ADMIN_PASSWORD)

    def set_admin_password(self, new_password: str, *, current_password: Optional[str] = None) -> None:
        if current_password is not None and current_password != self.get_admin_password():
            raise ValidationError("Current password is incorrect")
        require_min_length(new_password, "Password", MIN_PASSWORD_LENGTH)

        # The admin account is not tied to a school.
        entry = self._password_log.new_entry(school_name="", operator_username=ADMIN_USERNAME)
        self._settings.put(SETTING_ADMIN_PASSWORD, new_password, audit=entry)
        log_change(entry)

    def get_admin_profile(self) -> Dict[str, str]:
        profile = self.get_setting(SETTING_ADMIN_PROFILE, {}) or {}
        return {f: profile.get(f, "") for f in ADMIN_PROFILE_FIELDS}

    def update_admin_profile(self, **fields: Optional[str]) -> Dict[str, str]:
        unknown = set(fields) - set(ADMIN_PROFILE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown profile field: {', '.join(sorted(unknown))}")

        profile = self.get_admin_profile()
        for key, value in fields.items():
            if value is not None:
                profile[key] = value.strip()
        self._settings.put(SETTING_ADMIN_PROFILE, profile)
        return profile

    # school names
    def get_school_list(self) -> List[str]:
        return list(self.get_setting(SETTING_SCHOOL_LIST, []) or [])

    def register_school(self, school_name: str) -> List[str]:
        school_name = require_non_empty(school_name, "School name")
        names = self.get_school_list()
        if school_name not in names:
            names.append(school_name)
            self._settings.put(SETTING_SCHOOL_LIST, names)
            logger.info("Registered school %r", school_name)
        return names

    def rename_school(self, old_name: str, new_name: str) -> List[str]:
        """Replace ``old_name`` in the school list and carry its settings over."""
        names = [new_name if n == old_name else n for n in self.get_school_list()]
        if new_name not in names:
            names.append(new_name)
        # keep first occurrence only
        names = list(dict.fromkeys(names))
        self._settings.put(SETTING_SCHOOL_LIST, names)

        for prefix in (SETTING_ATTENDANCE_ENABLED_PREFIX, SETTING_ON_TIME_DEADLINE_PREFIX):
            value = self._settings.get(f"{prefix}{old_name}")
            if value is not None and self._settings.get(f"{prefix}{new_name}") is None:
                self._settings.put(f"{prefix}{new_name}", value)
        return names
