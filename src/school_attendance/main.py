from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, redirect, send_from_directory

from .config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.logging_utils import setup_logger
from .common.result import OperationResult
from .common.web import load_session_context, result_response
from .container import Container, build_container
from .core.constants import DEFAULT_S3_PREFIX
from .database.bootstrap import apply_schema
from .lessons.controller import register as register_lessons
from .media.image_host import ImageHost, LocalImageHost
from .subjects.controller import register as register_subjects
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def _build_image_host(settings) -> ImageHost:
    bucket = getattr(settings, "S3_BUCKET", None)
    if bucket:
        from .media.s3_image_host import S3ImageHost

        return S3ImageHost(
            bucket,
            prefix=getattr(settings, "S3_PREFIX", DEFAULT_S3_PREFIX),
            base_url=getattr(settings, "S3_BASE_URL", None),
        )
    return LocalImageHost(getattr(settings, "UPLOAD_DIR", "uploads"))


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)

    setup_logger(
        "school_attendance",
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        log_file=getattr(settings, "LOG_FILE", None),
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SAMESITE"] = "Lax"

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

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)

        container = build_container(
            db_config=db_config,
            image_host=_build_image_host(settings),
            admin_login=getattr(settings, "ADMIN_LOGIN", "admin"),
            admin_password=getattr(settings, "ADMIN_PASSWORD", ""),
            timezone_offset_hours=float(getattr(settings, "TIMEZONE_OFFSET_HOURS", 5)),
            max_schedule_days=int(getattr(settings, "MAX_SCHEDULE_DAYS", 731)),
        )

    app.extensions["school_attendance"] = container

    register_users(app, container)
    register_subjects(app, container)
    register_lessons(app, container)
    register_attendance(app, container)

    if isinstance(container.image_host, LocalImageHost):
        upload_dir = container.image_host.directory.resolve()

        @app.route("/uploads/<path:name>", endpoint="uploaded_photo")
        def uploaded_photo(name: str):
            return send_from_directory(upload_dir, name)

    @app.route("/", endpoint="index")
    def index():
        ctx = load_session_context()
        if ctx is None:
            return result_response(OperationResult.failure("Please log in"), 401)
        # Each role lands on its week calendar.
        return redirect(f"{ctx.home_path}/lessons")

    return app
