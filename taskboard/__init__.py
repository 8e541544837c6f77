"""
Flask application factory module.

This module creates and configures the task board application using
the factory pattern, allowing for different configurations
(development, testing, production). The factory wires the task
service explicitly: a SQLAlchemy-backed store and a Socket.IO
broadcaster are constructed here and handed to the service, which
request handlers then look up on the application.
"""

import logging
import os
from pathlib import Path

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from config import get_config

# Initialize extensions without binding to app
db = SQLAlchemy()
socketio = SocketIO()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

SERVICE_EXTENSION_KEY = "task_service"


def _ensure_sqlite_db_parent_exists(database_uri: str) -> None:
    """Create parent directories for file-based SQLite URIs when missing."""
    sqlite_prefix = "sqlite:///"
    if not database_uri.startswith(sqlite_prefix):
        return

    sqlite_path = database_uri[len(sqlite_prefix):].split("?", 1)[0]
    if sqlite_path == ":memory:":
        return

    Path(sqlite_path).parent.mkdir(parents=True, exist_ok=True)


def _require_database_uri(app: Flask) -> str:
    """Return the configured database URI, exiting when there is none."""
    database_uri = app.config.get("SQLALCHEMY_DATABASE_URI")
    if not database_uri:
        logger.critical("Database configuration missing: set DATABASE_URL or DB_USER/DB_PASS")
        raise SystemExit(1)
    return database_uri


def _connect_store(app: Flask) -> None:
    """
    Verify the database is reachable and create the collections.

    A broken store at startup is fatal: the process exits instead of
    serving requests with an unusable connection.
    """
    with app.app_context():
        try:
            db.session.execute(text("SELECT 1"))
            db.create_all()
        except SQLAlchemyError as exc:
            logger.critical("Database connection error: %s", exc)
            raise SystemExit(1) from exc
        finally:
            db.session.remove()

    logger.info("Successfully connected to the database")


def build_broadcaster(app: Flask):
    """Pick the change-notification publisher the configuration asks for."""
    from taskboard.broadcast import NullBroadcaster, SocketIOBroadcaster

    if not app.config["REALTIME_ENABLED"]:
        logger.info("Realtime notifications disabled")
        return NullBroadcaster()
    return SocketIOBroadcaster(socketio, event=app.config["TASK_EVENT_NAME"])


def create_app(config_name: str | None = None, broadcaster=None) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name.
                     If None, uses FLASK_ENV environment variable.
        broadcaster: Optional change-notification publisher. When None,
                     one is built from the configuration (see
                     ``build_broadcaster``).

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__, instance_relative_config=True)

    # Load configuration
    config_class = get_config(config_name)
    app.config.from_object(config_class)

    logger.info("Creating app with config: %s", config_class.__name__)

    os.makedirs(app.instance_path, exist_ok=True)
    _ensure_sqlite_db_parent_exists(_require_database_uri(app))

    # Initialize extensions
    db.init_app(app)
    CORS(app, origins=app.config["CORS_ORIGINS"])
    socketio.init_app(app, cors_allowed_origins=app.config["CORS_ORIGINS"])

    from taskboard.service import TaskService
    from taskboard.store import TaskStore

    if broadcaster is None:
        broadcaster = build_broadcaster(app)
    app.extensions[SERVICE_EXTENSION_KEY] = TaskService(TaskStore(db.session), broadcaster)

    # Register blueprints and realtime handlers
    from taskboard.routes import realtime  # noqa: F401
    from taskboard.routes.api import api_bp

    app.register_blueprint(api_bp)

    _connect_store(app)

    return app
