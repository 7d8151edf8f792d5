# Overview: Service-layer operations for sessions; encapsulates business logic and database work.

"""
Server-side session management

The browser holds a random token inside Flask's signed session cookie. The
token itself is never stored: the user_sessions table keeps its SHA-256 hash
together with the user id, expiry and revocation state, so logging out (or
deactivating a user) takes effect immediately even though the cookie is
still present on the client.

Sessions have an absolute lifetime of SESSION_LIFETIME_HOURS (default 24)
and no idle timeout.
"""

import secrets
import hashlib
from dataclasses import dataclass
from datetime import timedelta

from flask import current_app
from sqlalchemy import or_

from ..extensions import db
from ..models import SessionToken, User
from po_api.time_utils import utcnow


@dataclass
class SessionContext:
    """Session record plus the user it resolves to."""
    user: User
    session: SessionToken


def generate_token() -> str:
    """Return a 64-character hex token (32 bytes of entropy)."""
    return secrets.token_hex(32)


def hash_token(token: str) -> str:
    """SHA-256 hex digest; the only form of the token that reaches the database."""
    return hashlib.sha256(token.encode('utf-8')).hexdigest()


def session_lifetime() -> timedelta:
    return timedelta(hours=current_app.config.get("SESSION_LIFETIME_HOURS", 24))


def create_session(
    user_id: str,
    user_agent: str | None = None,
    ip_address: str | None = None
) -> tuple[SessionToken, str]:
    """
    Create a session row for user_id.

    Returns (session_record, plaintext_token). Only the hash is persisted.
    """
    plaintext_token = generate_token()
    now = utcnow()

    session = SessionToken(
        user_id=user_id,
        token_hash=hash_token(plaintext_token),
        created_at=now,
        last_used_at=now,
        expires_at=now + session_lifetime(),
        user_agent=(user_agent or "")[:255] or None,
        ip_address=ip_address,
        is_revoked=False,
    )

    db.session.add(session)
    db.session.commit()

    return session, plaintext_token


def validate_session(token: str) -> SessionContext | None:
    """
    Resolve token to a SessionContext.

    Returns None if the token is unknown, expired or revoked, or if the user
    has been deactivated (the session is revoked in that case).
    """
    now = utcnow()

    session = db.session.query(SessionToken).filter_by(
        token_hash=hash_token(token),
        is_revoked=False
    ).first()

    if not session:
        return None

    if session.expires_at < now:
        return None

    user = session.user
    if not user or not user.is_active:
        session.is_revoked = True
        session.revoked_at = now
        session.revoked_reason = "User account deactivated"
        db.session.commit()
        return None

    session.last_used_at = now
    db.session.commit()

    return SessionContext(user=user, session=session)


def revoke_session(token: str, reason: str = "User logout") -> bool:
    """
    Revoke session token.

    Returns True if a live session was revoked, False if none matched.
    """
    session = db.session.query(SessionToken).filter_by(
        token_hash=hash_token(token),
        is_revoked=False
    ).first()

    if not session:
        return False

    session.is_revoked = True
    session.revoked_at = utcnow()
    session.revoked_reason = reason

    db.session.commit()
    return True


def cleanup_expired_sessions(retention_days: int = 30) -> int:
    """
    Delete expired or revoked sessions created more than retention_days ago.

    Returns the number of rows removed.
    """
    now = utcnow()
    cutoff = now - timedelta(days=retention_days)

    deleted = db.session.query(SessionToken).filter(
        or_(
            SessionToken.expires_at < now,
            SessionToken.is_revoked.is_(True),
        ),
        SessionToken.created_at < cutoff
    ).delete(synchronize_session=False)

    db.session.commit()
    return deleted
