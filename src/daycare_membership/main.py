from __future__ import annotations

import importlib
import logging
import sys

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .common.http import register_error_handlers
from .config import get_settings_module
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed, list_tables
from .members.controller import register as register_members
from .payments.controller import register as register_payments

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def register_routes(app: Flask, container: Container) -> None:
    register_error_handlers(app)
    register_members(app, container)
    register_attendance(app, container)
    register_payments(app, container)


def create_app(container: Container | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    max_proof_bytes = int(getattr(settings, "MAX_PROOF_BYTES"))
    # Leave room for the other multipart fields around the proof.
    app.config["MAX_CONTENT_LENGTH"] = max_proof_bytes + 64 * 1024

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
            apply_schema(db_config)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            apply_seed(db_config)

        container = build_container(
            db_config=db_config,
            upload_folder=getattr(settings, "UPLOAD_FOLDER", "uploads/payments"),
            max_proof_bytes=max_proof_bytes,
            block_checkin_without_hours=bool(getattr(settings, "BLOCK_CHECKIN_WITHOUT_HOURS", False)),
        )

    register_routes(app, container)
    return app
