from __future__ import annotations

import importlib
from typing import Optional

import structlog
from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .announcements.controller import register as register_announcements
from .attendance.controller import register as register_attendance
from .batches.controller import register as register_batches
from .common.responses import register_error_handlers
from .container import Container, build_container
from .core.constants import DEFAULT_MAX_ATTENDANCE_RECORDS, DEFAULT_SWEEP_INTERVAL_SECONDS
from .core.logging import configure_logging
from .database.bootstrap import apply_schema, list_tables
from .enrollment.controller import register as register_enrollment
from .maintenance.controller import register as register_maintenance
from .students.controller import register as register_students
from .teachers.controller import register as register_teachers

logger = structlog.get_logger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(
        getattr(settings, "LOG_LEVEL", "INFO"),
        json_logs=bool(getattr(settings, "JSON_LOGS", False)),
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    sweep_interval = float(getattr(settings, "SWEEP_INTERVAL_SECONDS", DEFAULT_SWEEP_INTERVAL_SECONDS))
    max_records = int(getattr(settings, "MAX_ATTENDANCE_RECORDS", DEFAULT_MAX_ATTENDANCE_RECORDS))

    logger.info(
        "app_starting",
        settings=settings_module,
        db=f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}",
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("schema_ready", tables=len(list_tables(db_config)))
        container = build_container(
            db_config=db_config,
            max_attendance_records=max_records,
            sweep_interval_seconds=sweep_interval,
        )

    register_error_handlers(app)
    register_students(app, container)
    register_teachers(app, container)
    register_batches(app, container)
    register_enrollment(app, container)
    register_attendance(app, container)
    register_announcements(app, container)
    register_maintenance(app, container)

    app.extensions["coaching_center.container"] = container
    if sweep_interval > 0:
        container.maintenance_worker.start()

    return app
