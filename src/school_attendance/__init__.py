"""School QR attendance and late-tracking service.

Organized by feature module (attendance, late_tracking, notifications, sms, ...)
with a thin Flask controller layer over service/repository layers.
"""
from __future__ import annotations

import importlib
import logging
import logging.config
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from .settings import get_settings_module
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig

from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .notifications.controller import register as register_notifications

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {"format": "[%(asctime)s] %(levelname)s %(name)s: %(message)s"},
            },
            "handlers": {
                "console": {"class": "logging.StreamHandler", "formatter": "default"},
            },
            "root": {"handlers": ["console"], "level": level},
        }
    )


def create_app(*, settings=None, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    if settings is None:
        settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = DBConfig.from_dict(getattr(settings, "DB_CONFIG"))
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info(
                "Schema ready on %s@%s:%s/%s (tables=%s)",
                db_config.user,
                db_config.host,
                db_config.port,
                db_config.database,
                len(list_tables(db_config)),
            )
        container = build_container(settings)

    app.extensions["school_attendance"] = container

    register_attendance(app, container)
    register_notifications(app, container)

    @app.errorhandler(404)
    def not_found(_e):
        return jsonify({"success": False, "error": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(_e):
        return jsonify({"success": False, "error": "Method not allowed"}), 405

    @app.errorhandler(500)
    def internal_error(_e):
        return jsonify({"success": False, "error": "Internal server error"}), 500

    return app
