# Overview: Idempotent table creation, administrator seeding and connectivity checks.

import time

from flask import current_app
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..extensions import db
from ..models import User
from .auth_service import hash_password


def check_connection() -> dict:
    """
    Round-trip a trivial query through the pool.

    Returns {"status": "healthy"|"unhealthy", "latency_ms": float}.
    """
    start_time = time.time()
    try:
        db.session.execute(text("SELECT 1"))
        elapsed_ms = (time.time() - start_time) * 1000
        return {"status": "healthy", "latency_ms": round(elapsed_ms, 2)}
    except SQLAlchemyError:
        db.session.rollback()
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error",
        }


def seed_admin_user() -> bool:
    """
    Insert the default administrator unless a user with that username exists.

    Returns True if a row was inserted.
    """
    cfg = current_app.config
    username = cfg.get("ADMIN_USERNAME", "admin")

    if db.session.query(User).filter_by(username=username).first():
        return False

    admin = User(
        username=username,
        email=cfg.get("ADMIN_EMAIL") or None,
        password_hash=hash_password(cfg.get("ADMIN_PASSWORD", "admin123")),
        full_name=cfg.get("ADMIN_FULL_NAME", "Administrator"),
        is_active=True,
    )
    db.session.add(admin)
    try:
        db.session.commit()
    except IntegrityError:
        # Another process seeded it first
        db.session.rollback()
        return False

    current_app.logger.info("Seeded default administrator '%s'", username)
    return True


def init_database() -> None:
    """Create any missing tables and seed the administrator. Safe to run repeatedly."""
    current_app.logger.info("Initializing database...")
    db.create_all()
    seed_admin_user()
    current_app.logger.info("Database initialized")


def reset_database() -> None:
    """Drop every table and rebuild. Deletes all data."""
    db.drop_all()
    init_database()
