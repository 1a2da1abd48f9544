from __future__ import annotations

import importlib
import logging
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .audit.controller import register as register_audit
from .common.web import register_error_handlers, register_storage_unavailable
from .container import build_container
from .core.constants import DEFAULT_ADMIN_PASSWORD, DEFAULT_ON_TIME_DEADLINE, DEFAULT_SCHOOL_NAME
from .core.exceptions import DatabaseInitError
from .database.bootstrap import ensure_defaults, ensure_demo_operator
from .schools.controller import register as register_schools
from .students.controller import register as register_students
from .teachers.controller import register as register_teachers
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def _load_settings(overrides: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    settings = importlib.import_module(get_settings_module())
    values = {name: getattr(settings, name) for name in dir(settings) if name.isupper()}
    values.update(overrides or {})
    return values


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(overrides: Optional[Dict[str, Any]] = None) -> Flask:
    load_dotenv(override=False)
    settings = _load_settings(overrides)

    app = Flask(__name__)
    app.secret_key = settings["SECRET_KEY"]
    app.config["DEBUG"] = bool(settings.get("DEBUG", False))
    app.config["TESTING"] = bool(settings.get("TESTING", False))
    configure_logging(settings.get("LOG_LEVEL", "INFO"))

    school_name = settings.get("DEFAULT_SCHOOL_NAME", DEFAULT_SCHOOL_NAME)
    container = build_container(
        db_config=settings["DB_CONFIG"],
        default_deadline=settings.get("ON_TIME_DEADLINE", DEFAULT_ON_TIME_DEADLINE),
    )
    try:
        version = container.schema.open()
        ensure_defaults(
            container.conn,
            school_name=school_name,
            admin_password=settings.get("DEFAULT_ADMIN_PASSWORD", DEFAULT_ADMIN_PASSWORD),
        )
        if settings.get("AUTO_SEED_DB"):
            ensure_demo_operator(container.conn, school_name=school_name)
    except DatabaseInitError:
        logger.exception("Cannot initialize storage at %r", container.conn.path)
        register_storage_unavailable(app)
        return app

    logger.info("Database %r ready (schema version %d)", container.conn.path, version)
    app.extensions["school_attendance"] = container

    register_error_handlers(app)
    register_users(app, container)
    register_audit(app, container)
    register_schools(app, container)
    register_students(app, container)
    register_teachers(app, container)
    register_attendance(app, container)

    return app
