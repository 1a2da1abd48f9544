from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..audit.service import PasswordLogService, log_change
from ..common.ids import new_id
from ..common.validators import require_min_length, require_non_empty
from ..core.constants import ADMIN_USERNAME, MIN_PASSWORD_LENGTH
from ..core.enums import UserType
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from ..settings.service import SettingsService
from .model import OperatorUser, SessionUser
from .repository import OperatorRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate user (login).

    Passwords are compared as stored; there is no hashing.
    """

    def __init__(self, operators: OperatorRepository, settings: SettingsService):
        self._operators = operators
        self._settings = settings

    def authenticate(self, username: str, password: str, school_name: Optional[str] = None) -> SessionUser:
        username = (username or "").strip()

        if username.lower() == ADMIN_USERNAME:
            if password and password == self._settings.get_admin_password():
                return SessionUser(user_type=UserType.ADMIN, username=ADMIN_USERNAME, school_name=school_name)
            logger.warning("Failed admin login")
            raise AuthenticationError("Invalid username or password")

        if school_name:
            candidate = self._operators.get_by_username(username, school_name)
            candidates = [candidate] if candidate else []
        else:
            candidates = list(self._operators.find_by_username(username))

        for op in candidates:
            if op.password == password:
                return SessionUser(
                    user_type=UserType.OPERATOR,
                    username=op.username,
                    school_name=op.school_name,
                    operator_id=op.id,
                )

        logger.warning("Failed operator login for %r", username)
        raise AuthenticationError("Invalid username or password")


class OperatorService:
    """Use case: manage operator accounts (admin) and their passwords."""

    def __init__(self, operators: OperatorRepository, password_log: PasswordLogService):
        self._operators = operators
        self._password_log = password_log

    def list_operators(self, school_name: Optional[str] = None) -> Sequence[OperatorUser]:
        return self._operators.list_all(school_name)

    def get_operator(self, operator_id: str) -> Optional[OperatorUser]:
        return self._operators.get_by_id(operator_id)

    def add_operator(self, *, username: str, password: str, school_name: str) -> OperatorUser:
        username = require_non_empty(username, "Username")
        school_name = require_non_empty(school_name, "School name")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if username.lower() == ADMIN_USERNAME:
            raise ValidationError("This username is reserved")
        if self._operators.get_by_username(username, school_name):
            raise ValidationError("Username already exists for this school")

        operator = OperatorUser(id=new_id("operator"), username=username, password=password, school_name=school_name)
        self._operators.create(operator)
        logger.info("Added operator %r for %r", username, school_name)
        return operator

    def update_password(
        self,
        operator_id: str,
        new_password: str,
        *,
        current_password: Optional[str] = None,
    ) -> None:
        operator = self._operators.get_by_id(operator_id)
        if not operator:
            raise NotFoundError("Operator not found")
        if current_password is not None and current_password != operator.password:
            raise ValidationError("Current password is incorrect")
        require_min_length(new_password, "Password", MIN_PASSWORD_LENGTH)

        entry = self._password_log.new_entry(school_name=operator.school_name, operator_username=operator.username)
        if not self._operators.update_password(operator_id, new_password, audit=entry):
            raise NotFoundError("Operator not found")
        log_change(entry)

    def delete_operator(self, operator_id: str) -> None:
        if not self._operators.delete_by_id(operator_id):
            raise NotFoundError("Operator not found")
        logger.info("Deleted operator %s", operator_id)
