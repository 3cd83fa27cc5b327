from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.constants import (
    CAS_ATTEMPTS,
    DEFAULT_UTC_OFFSET,
    RECONCILE_LOOKBACK_DAYS,
    RECONCILE_RECORD_ATTEMPTS,
    SIGN_IN_GRACE_MINUTES,
)
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .leave.controller import register as register_leave
from .reconciler.controller import register as register_reconciler
from .reports.controller import register as register_reports

DATABASE_DIR = Path(__file__).resolve().parent / "database"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    """Application factory.

    Pass ``container`` to run on pre-built services (tests use in-memory
    repositories); otherwise the MySQL container is built from settings.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["CRON_SECRET"] = getattr(settings, "CRON_SECRET", "")

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        app.logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            app.logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            app.logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            default_utc_offset=getattr(settings, "DEFAULT_UTC_OFFSET", DEFAULT_UTC_OFFSET),
            grace_minutes=getattr(settings, "SIGN_IN_GRACE_MINUTES", SIGN_IN_GRACE_MINUTES),
            cas_attempts=getattr(settings, "CAS_ATTEMPTS", CAS_ATTEMPTS),
            lookback_days=getattr(settings, "RECONCILE_LOOKBACK_DAYS", RECONCILE_LOOKBACK_DAYS),
            record_attempts=getattr(settings, "RECONCILE_RECORD_ATTEMPTS", RECONCILE_RECORD_ATTEMPTS),
        )

    app.extensions["attendance_tracker"] = container

    register_attendance(app, container)
    register_leave(app, container)
    register_reports(app, container)
    register_reconciler(app, container)

    return app
