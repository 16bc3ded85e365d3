# backend/pizzadash/__init__.py
import logging

from flask import Flask, request
from sqlalchemy.exc import SQLAlchemyError

from .config import Config
from .extensions import db, migrate, STORE_EXTENSION_KEY


def _build_backend(app: Flask):
    """
    SQL snapshots when configured and reachable, otherwise in-memory only.
    The app keeps serving either way.
    """
    from .services.persistence import MemorySnapshotBackend, SqlSnapshotBackend

    if app.config["SNAPSHOT_BACKEND"] != "sql":
        return MemorySnapshotBackend()
    try:
        db.create_all()
    except SQLAlchemyError:
        app.logger.exception("Snapshot database unavailable; keeping data in memory only")
        return MemorySnapshotBackend()
    return SqlSnapshotBackend()


def _build_assistant(app: Flask):
    from .services.assistant_service import GenerationClient

    api_key = app.config.get("GENERATION_API_KEY")
    if not api_key:
        app.logger.warning("GENERATION_API_KEY is not set; the assistant is disabled")
        return None
    return GenerationClient(
        api_key=api_key,
        base_url=app.config["GENERATION_API_URL"],
        model=app.config["GENERATION_MODEL"],
        timeout=app.config["GENERATION_TIMEOUT_SECONDS"],
    )


def create_app(config_overrides: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    app.logger.setLevel(app.config["LOG_LEVEL"])
    logging.getLogger("pizzadash").setLevel(app.config["LOG_LEVEL"])

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401
    from .services.entity_store import EntityStore

    with app.app_context():
        backend = _build_backend(app)
        app.extensions[STORE_EXTENSION_KEY] = EntityStore(
            backend,
            seed=app.config.get("SEED_DATA"),
            notification_limit=app.config["NOTIFICATION_HISTORY_LIMIT"],
        )

    from .routes.assistant import ASSISTANT_EXTENSION_KEY
    app.extensions[ASSISTANT_EXTENSION_KEY] = _build_assistant(app)

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.orders import orders_bp
    from .routes.products import products_bp
    from .routes.customers import customers_bp
    from .routes.users import users_bp
    from .routes.notifications import notifications_bp
    from .routes.settings import settings_bp
    from .routes.assistant import assistant_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(customers_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(notifications_bp)
    app.register_blueprint(settings_bp)
    app.register_blueprint(assistant_bp)

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        allowed_origins = {
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:4173",
            "http://127.0.0.1:4173",
        }
        if origin in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,PATCH,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
