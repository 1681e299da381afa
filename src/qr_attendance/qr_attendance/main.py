from __future__ import annotations

import importlib
import logging
from datetime import date
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import build_container
from .core.exceptions import AuthorizationError, DomainError, TransientIOError, ValidationError
from .database.bootstrap import apply_schema, list_tables
from .stats.controller import register as register_stats
from .tokens.controller import register as register_tokens

logger = logging.getLogger(__name__)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation_error(e):
        return jsonify({"success": False, "message": str(e)}), 400

    @app.errorhandler(AuthorizationError)
    def _authorization_error(e):
        return jsonify({"success": False, "message": str(e)}), 403

    @app.errorhandler(TransientIOError)
    def _transient_error(e):
        logger.warning("storage unavailable: %s", e)
        return jsonify({"success": False, "message": "Service temporarily unavailable, please retry"}), 503

    @app.errorhandler(DomainError)
    def _domain_error(e):
        return jsonify({"success": False, "message": str(e)}), 409


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

    semester_start = getattr(settings, "SEMESTER_START", None)
    container = build_container(
        db_config=db_config,
        token_ttl_minutes=int(getattr(settings, "TOKEN_TTL_MINUTES", 10)),
        semester_start=semester_start if isinstance(semester_start, date) else date.fromisoformat(str(semester_start)),
        public_base_url=str(getattr(settings, "PUBLIC_BASE_URL", "http://localhost:5000")),
        stats_batch_size=int(getattr(settings, "STATS_BATCH_SIZE", 5)),
        stats_batch_delay_seconds=float(getattr(settings, "STATS_BATCH_DELAY_SECONDS", 0.1)),
    )
    app.extensions["qr_attendance"] = container

    register_error_handlers(app)
    register_tokens(app, container)
    register_attendance(app, container)
    register_stats(app, container)

    return app
