from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import build_container
from .core import constants
from .database.bootstrap import apply_schema
from .notes.controller import register as register_notes
from .progress.controller import register as register_progress
from .team.controller import register as register_team

logger = logging.getLogger(__name__)


def create_app(settings_module: str | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    store_backend = str(getattr(settings, "STORE_BACKEND", "mysql"))
    db_config = getattr(settings, "DB_CONFIG", None)

    if store_backend == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config)

    container = build_container(
        db_config=db_config,
        store_backend=store_backend,
        site_lat=float(getattr(settings, "SITE_LAT", constants.SITE_LAT)),
        site_lng=float(getattr(settings, "SITE_LNG", constants.SITE_LNG)),
        site_radius_meters=float(getattr(settings, "SITE_RADIUS_METERS", constants.SITE_RADIUS_METERS)),
        target_hours=float(getattr(settings, "TARGET_HOURS", constants.DEFAULT_TARGET_HOURS)),
    )
    app.extensions["ojt_attendance"] = container

    logger.info("settings=%s store=%s", settings_module, store_backend)

    register_attendance(app, container)
    register_progress(app, container)
    register_notes(app, container)
    register_team(app, container)

    return app
