"""
MentorMe Institutional Programs API
Flask Application Factory.

Usage:
    from mentorme import create_app
    app = create_app()           # defaults to "development"
    app = create_app("testing")  # explicit config
"""

import logging
import os

from flask import Flask, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from sqlalchemy import engine as _sa_engine
from sqlalchemy import event as _sa_event

from mentorme.config import config
from mentorme.models import db
from mentorme.middleware.logging_config import configure_logging
from mentorme.middleware.rate_limiter import init_rate_limits
from mentorme.middleware.timing import init_request_timing
from mentorme.utils.errors import E, api_error

logger = logging.getLogger(__name__)


# ── SQLite FK enforcement (global engine event) ─────────────────────────
@_sa_event.listens_for(_sa_engine.Engine, "connect")
def _enable_sqlite_fk(dbapi_conn, connection_record):
    """Enable foreign key enforcement for SQLite connections."""
    if "sqlite" in type(dbapi_conn).__module__:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


migrate = Migrate()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],                     # no global limit — apply per-blueprint
)


def create_app(config_name=None):
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name.
                     One of: "development", "testing", "production".
                     Defaults to APP_ENV env var, or "development" if unset.

    Returns:
        Configured Flask application instance.

    Raises:
        ConfigurationError: the program endpoint is missing a collaborator
            (e.g. UPLOAD_DIRECTORY is empty).
    """
    if config_name is None:
        config_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config[config_name]())

    # ── Structured logging (must be first) ───────────────────────────────
    configure_logging(app)

    # ── Extensions ───────────────────────────────────────────────────────
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    cors_origins = app.config.get("CORS_ORIGINS", "*")
    if cors_origins and cors_origins != "*":
        CORS(app, origins=[o.strip() for o in cors_origins.split(",") if o.strip()])
    else:
        CORS(app)

    # ── Request timing middleware ────────────────────────────────────────
    init_request_timing(app)

    # ── Import all models so Alembic / create_all can see them ───────────
    from mentorme.models import mentorship as _mentorship_models  # noqa: F401
    from mentorme.models import program as _program_models        # noqa: F401

    # ── Program endpoint (fails fast on missing collaborators) ───────────
    from mentorme.blueprints.health_bp import health_bp
    from mentorme.blueprints.institutional_program_bp import ProgramEndpoint
    from mentorme.services.institutional_program_service import InstitutionalProgramService
    from mentorme.services.mentorship_service import MenteeService, MentorService

    program_endpoint = ProgramEndpoint(
        program_service=InstitutionalProgramService(),
        mentor_service=MentorService(),
        mentee_service=MenteeService(),
        upload_directory=app.config.get("UPLOAD_DIRECTORY"),
    )
    program_endpoint.initialize()
    app.extensions["program_endpoint"] = program_endpoint

    # ── Auto-create tables (CREATE IF NOT EXISTS) ────────────────────────
    with app.app_context():
        try:
            db.create_all()
            app.logger.info("db.create_all() completed successfully")
        except Exception as e:
            app.logger.warning("db.create_all() failed: %s", e)

    # ── Blueprints ───────────────────────────────────────────────────────
    app.register_blueprint(program_endpoint.blueprint())
    app.register_blueprint(health_bp)

    init_rate_limits(app, limiter)

    # ── Error handlers ───────────────────────────────────────────────────
    @app.errorhandler(404)
    def not_found(e):
        return {"error": "Not found", "code": E.NOT_FOUND, "path": request.path}, 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return {"error": "Method not allowed"}, 405

    @app.errorhandler(413)
    def too_large(e):
        limit = app.config.get("MAX_CONTENT_LENGTH")
        return api_error(E.TOO_LARGE, f"Request body exceeds {limit} bytes")

    @app.errorhandler(500)
    def server_error(e):
        logger.error("500 error: %s", e, exc_info=True)
        return {"error": "Internal server error", "code": E.INTERNAL}, 500

    return app
