from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .cars.controller import register as register_cars
from .common.http import register_error_handlers
from .config import get_settings_module
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_admin, list_tables
from .employees.controller import register as register_employees
from .geo.controller import register as register_locations
from .leaves.controller import register as register_leave_types
from .requests.controller import register as register_requests
from .timesheet.controller import register as register_timesheet

logger = logging.getLogger(__name__)

_DATABASE_DIR = Path(__file__).resolve().parents[2] / "database"


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    A prebuilt container (e.g. over in-memory repositories) skips the MySQL
    bootstrap entirely.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["GEOLOCATION_TIMEOUT_MS"] = int(getattr(settings, "GEOLOCATION_TIMEOUT_MS", 10_000))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config, schema_path=_DATABASE_DIR / "schema.sql")
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            apply_seed_sql(db_config, seed_path=_DATABASE_DIR / "seed.sql")
        admin_pin = getattr(settings, "BOOTSTRAP_ADMIN_PIN", None)
        if admin_pin:
            ensure_admin(db_config, name=getattr(settings, "BOOTSTRAP_ADMIN_NAME", "Administrator"), pin=admin_pin)

        container = build_container(
            db_config=db_config,
            grace_minutes=int(getattr(settings, "GRACE_MINUTES", 30)),
            debounce_minutes=int(getattr(settings, "DEBOUNCE_MINUTES", 5)),
        )

    register_error_handlers(app)
    register_employees(app, container)
    register_attendance(app, container)
    register_locations(app, container)
    register_leave_types(app, container)
    register_cars(app, container)
    register_requests(app, container)
    register_timesheet(app, container)

    return app
