# backend/po_api/config.py
from __future__ import annotations

import os
from datetime import timedelta

from dotenv import load_dotenv

# Pick up a local .env (DATABASE_URL, SESSION_SECRET, ...) when present
load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str) -> list[str]:
    raw = os.environ.get(name, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


def engine_options_for(database_url: str) -> dict:
    """
    Pool settings for the SQLAlchemy engine.

    SQLite gets the driver defaults: in-memory databases run on a StaticPool,
    which rejects sizing arguments.
    """
    if database_url.startswith("sqlite"):
        return {}
    return {
        "pool_size": int(os.environ.get("DB_POOL_SIZE", "5")),
        "max_overflow": int(os.environ.get("DB_MAX_OVERFLOW", "5")),
        # Seconds to wait for a free pooled connection before failing
        "pool_timeout": int(os.environ.get("DB_POOL_TIMEOUT", "30")),
        "pool_pre_ping": True,
    }


def normalize_database_url(url: str) -> str:
    """Hosted Postgres providers hand out postgres:// URLs, which SQLAlchemy 2 rejects."""
    if url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://"):]
    return url


def default_allowed_origins() -> set[str]:
    origins = {
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    }
    for name in ("FRONTEND_URL", "PRODUCTION_FRONTEND_URL"):
        if os.environ.get(name):
            origins.add(os.environ[name].rstrip("/"))
    origins.update(_env_list("ALLOWED_ORIGINS"))
    return origins


class Config:
    APP_ENV = os.environ.get("APP_ENV", "development")

    # Signs the session cookie that carries the opaque session token
    SECRET_KEY = os.environ.get(
        "SESSION_SECRET",
        os.environ.get("SECRET_KEY", "dev-secret-key-change-me"),
    )

    SQLALCHEMY_DATABASE_URI = normalize_database_url(os.environ.get(
        "DATABASE_URL",
        "sqlite:///po_api.sqlite3",
    ))
    SQLALCHEMY_ENGINE_OPTIONS = engine_options_for(SQLALCHEMY_DATABASE_URI)
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    PORT = int(os.environ.get("PORT", "4000"))
    ALLOWED_ORIGINS = default_allowed_origins()

    # JSON bodies may carry a base64 company logo
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024

    SESSION_LIFETIME_HOURS = int(os.environ.get("SESSION_LIFETIME_HOURS", "24"))
    PERMANENT_SESSION_LIFETIME = timedelta(hours=SESSION_LIFETIME_HOURS)
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = APP_ENV == "production"

    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

    AUTO_INIT_DB = _env_bool("AUTO_INIT_DB", True)
    LOGIN_REQUIRED = _env_bool("LOGIN_REQUIRED", True)
    SHUTDOWN_GRACE_SECONDS = float(os.environ.get("SHUTDOWN_GRACE_SECONDS", "10"))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # Default administrator seeded by the schema initializer
    ADMIN_USERNAME = os.environ.get("ADMIN_USERNAME", "admin")
    ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "admin123")
    ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL", "admin@example.com")
    ADMIN_FULL_NAME = os.environ.get("ADMIN_FULL_NAME", "Administrator")
