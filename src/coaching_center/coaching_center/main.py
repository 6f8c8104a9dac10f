from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module, load_settings

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.constants import DEFAULT_NOTIFICATION_LIMIT
from .database.bootstrap import apply_schema, apply_seed, list_tables
from .database.connection import DBConfig, DatabaseConnection
from .notifications.controller import register as register_notifications
from .submissions.controller import register as register_submissions

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def _prepare_database(settings) -> None:
    db = DatabaseConnection(DBConfig.from_dict(settings.DB_CONFIG))
    logger.info("settings=%s db=%s", get_settings_module(), db.config.describe())

    if getattr(settings, "AUTO_INIT_DB", False):
        apply_schema(db, schema_path=DATABASE_DIR / "schema.sql")
        logger.info("schema ready (tables=%d)", len(list_tables(db)))
    if getattr(settings, "AUTO_SEED_DB", False):
        apply_seed(db, seed_path=DATABASE_DIR / "seed.sql")
        logger.info("demo student directory seeded")


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    Tests pass a ready `container` (in-memory repositories); otherwise the
    MySQL-backed one is built from the active settings module.
    """

    load_dotenv(override=False)
    settings = load_settings()

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = settings.SECRET_KEY
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        _prepare_database(settings)
        container = build_container(
            db_config=settings.DB_CONFIG,
            notification_limit=int(getattr(settings, "NOTIFICATION_LIMIT", DEFAULT_NOTIFICATION_LIMIT)),
        )

    app.extensions["coaching_center"] = container

    register_attendance(app, container)
    register_submissions(app, container)
    register_notifications(app, container)

    return app
