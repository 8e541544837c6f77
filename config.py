"""
Application configuration module.

This module defines configuration classes for different environments
(development, testing, production). Configuration values are loaded
from environment variables (optionally seeded from a ``.env`` file)
with sensible defaults.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy.engine import URL

# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent

load_dotenv(BASE_DIR / ".env")


def build_database_uri(default: str | None = None) -> str | None:
    """
    Resolve the database connection string from the environment.

    ``DATABASE_URL`` wins when present. Otherwise the URI is assembled
    from the ``DB_*`` component variables so credentials containing
    special characters are escaped correctly.

    Args:
        default: Value returned when no database variables are set.

    Returns:
        Database URI string, or ``default``.
    """
    database_url = os.environ.get("DATABASE_URL", "").strip()
    if database_url:
        return database_url

    user = os.environ.get("DB_USER", "").strip()
    if not user:
        return default

    url = URL.create(
        drivername=os.environ.get("DB_DRIVER", "postgresql"),
        username=user,
        password=os.environ.get("DB_PASS") or None,
        host=os.environ.get("DB_HOST", "localhost"),
        port=int(os.environ["DB_PORT"]) if os.environ.get("DB_PORT") else None,
        database=os.environ.get("DB_NAME", "taskDb"),
    )
    return url.render_as_string(hide_password=False)


class Config:
    """Base configuration with default settings."""

    SECRET_KEY: str = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-production")
    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False

    # Default database location
    SQLALCHEMY_DATABASE_URI: str | None = build_database_uri(
        f"sqlite:///{BASE_DIR / 'instance' / 'tasks.db'}"
    )

    HOST: str = os.environ.get("HOST", "0.0.0.0")
    PORT: int = int(os.environ.get("PORT", "5000"))

    # Allowed origins for both the HTTP API and the realtime channel
    CORS_ORIGINS: str = os.environ.get("CORS_ORIGINS", "*")

    # Name of the payload-free event pushed after every task mutation
    TASK_EVENT_NAME: str = os.environ.get("TASK_EVENT_NAME", "task-updated")
    REALTIME_ENABLED: bool = os.environ.get("REALTIME_ENABLED", "true").lower() not in ("0", "false", "no")


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG: bool = True
    TESTING: bool = False


class TestingConfig(Config):
    """Testing environment configuration."""

    DEBUG: bool = True
    TESTING: bool = True

    # check_same_thread=False lets the realtime test client share the connection
    SQLALCHEMY_DATABASE_URI: str = os.environ.get(
        "TEST_DATABASE_URL",
        f"sqlite:///{BASE_DIR / 'instance' / 'test_tasks.db'}?check_same_thread=False"
    )

    SQLALCHEMY_ENGINE_OPTIONS: dict = {
        "pool_pre_ping": True,
    }


class ProductionConfig(Config):
    """
    Production environment configuration.

    No local fallback database: the connection must come from
    ``DATABASE_URL`` or the ``DB_*`` variables.
    """

    DEBUG: bool = False
    TESTING: bool = False
    SQLALCHEMY_DATABASE_URI: str | None = build_database_uri()


# Configuration mapping for easy access
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env: str | None = None) -> type[Config]:
    """
    Get the configuration class for the specified environment.

    Args:
        env: Environment name (development, testing, production).
             If None, uses FLASK_ENV environment variable.

    Returns:
        Configuration class for the specified environment.
    """
    if env is None:
        env = os.environ.get("FLASK_ENV", "development")
    return config.get(env, config["default"])
