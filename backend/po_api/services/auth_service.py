# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Authentication Service

Passwords are hashed with bcrypt (cost from BCRYPT_ROUNDS, default 12).
bcrypt.checkpw compares in constant time. When the username does not exist
a check against a throwaway hash still runs, so a wrong username and a wrong
password take the same time and produce the same error.

Session tokens are managed separately (see session_service.py).
"""

import bcrypt
import re

from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..errors import AuthenticationError
from ..extensions import db
from ..models import User
from ..validation import ConflictError, ValidationError
from po_api.time_utils import utcnow


MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6
# bcrypt only looks at the first 72 bytes and newer releases refuse anything longer
MAX_PASSWORD_BYTES = 72

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

_DUMMY_HASH: bytes | None = None


class PasswordValidationError(ValidationError):
    """Raised when password doesn't meet strength requirements."""

    def __init__(self, message: str):
        super().__init__(message, "password")


class InvalidCredentialsError(AuthenticationError):
    """Unknown username, inactive account or wrong password (indistinguishable to clients)."""

    def __init__(self, message: str = "Invalid username or password"):
        super().__init__(message)


def validate_password_strength(password: str) -> None:
    """Raises PasswordValidationError if the password is too short or too long for bcrypt."""
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise PasswordValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
    if len(password.encode('utf-8')) > MAX_PASSWORD_BYTES:
        raise PasswordValidationError(
            f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
        )


def validate_signup(username, email, password, full_name) -> tuple[str, str, str, str | None]:
    """Normalize signup fields; raises ValidationError on the first bad one."""
    if not isinstance(username, str) or len(username.strip()) < MIN_USERNAME_LENGTH:
        raise ValidationError(
            f"Username must be at least {MIN_USERNAME_LENGTH} characters", "username"
        )
    if not isinstance(email, str) or not EMAIL_RE.match(email.strip()):
        raise ValidationError("Invalid email format", "email")
    validate_password_strength(password)
    if full_name is not None and not isinstance(full_name, str):
        raise ValidationError("full_name must be a string", "full_name")

    full_name = full_name.strip() if full_name else None
    return username.strip(), email.strip().lower(), password, full_name or None


def _rounds() -> int:
    return current_app.config.get("BCRYPT_ROUNDS", 12)


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt.

    Password is validated for strength before hashing.
    """
    validate_password_strength(password)
    salt = bcrypt.gensalt(rounds=_rounds())
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    Returns False for malformed hashes instead of raising.
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def _burn_password_check(password: str) -> None:
    global _DUMMY_HASH
    if _DUMMY_HASH is None:
        _DUMMY_HASH = bcrypt.hashpw(b"not-a-real-password", bcrypt.gensalt(rounds=_rounds()))
    bcrypt.checkpw(password.encode('utf-8')[:MAX_PASSWORD_BYTES], _DUMMY_HASH)


def create_user(
    username: str,
    email: str | None,
    password: str,
    full_name: str | None = None,
) -> User:
    """
    Create new user with bcrypt password hashing.

    Raises:
        PasswordValidationError: If password doesn't meet requirements
        ConflictError: If username or email is already registered
    """
    existing = db.session.query(User).filter(User.username == username).first()
    if existing:
        raise ConflictError("Username already taken")

    if email:
        existing = db.session.query(User).filter(User.email == email).first()
        if existing:
            raise ConflictError("Email already registered")

    user = User(
        username=username,
        email=email or None,
        password_hash=hash_password(password),
        full_name=full_name,
        is_active=True,
    )

    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race with a concurrent signup for the same name/email
        db.session.rollback()
        raise ConflictError("Username or email already registered")

    current_app.logger.info("Created user %s", username)
    return user


def signup(username, email, password, full_name=None) -> User:
    """Validate signup input and create the account."""
    username, email, password, full_name = validate_signup(username, email, password, full_name)
    return create_user(username, email, password, full_name)


def authenticate(username: str, password: str) -> User:
    """
    Authenticate user with username and password.

    Returns the User on success and records last_login_at.

    Raises:
        InvalidCredentialsError: unknown username, inactive account or wrong password
    """
    user = db.session.query(User).filter(User.username == username).first()

    if not user:
        _burn_password_check(password)
        current_app.logger.info("Login failed for unknown username")
        raise InvalidCredentialsError()

    if not verify_password(password, user.password_hash):
        current_app.logger.info("Login failed for %s: wrong password", username)
        raise InvalidCredentialsError()

    if not user.is_active:
        current_app.logger.info("Login refused for inactive user %s", username)
        raise InvalidCredentialsError()

    user.last_login_at = utcnow()
    db.session.commit()
    return user

