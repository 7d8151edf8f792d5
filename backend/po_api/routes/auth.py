# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

# backend/po_api/routes/auth.py
"""
Authentication API routes

- Signup creates an account; it does not log the user in
- Login verifies the password and opens a server-side session; the opaque
  token travels in Flask's signed, HttpOnly session cookie
- Logout revokes the server-side session and clears the cookie
"""

from flask import Blueprint, current_app, request, session

from ..decorators import SESSION_TOKEN_KEY, current_user, load_session_context
from ..responses import success
from ..services import auth_service
from ..services import session_service
from ..validation import ValidationError


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/signup")
def signup_route():
    """
    Register a new user.

    Request body:
    {
        "username": "jdoe",          // required, 3+ characters
        "email": "jdoe@example.com", // required
        "password": "secret1",       // required, 6+ characters
        "full_name": "Jane Doe"      // optional
    }
    """
    data = request.get_json(silent=True) or {}

    user = auth_service.signup(
        data.get("username"),
        data.get("email"),
        data.get("password"),
        data.get("full_name"),
    )

    return success(user.to_identity(), message="User registered successfully", status=201)


@auth_bp.post("/login")
def login_route():
    """
    Authenticate user and open a session.

    A wrong password and an unknown username both return 401 with the same
    message.
    """
    data = request.get_json(silent=True) or {}
    username = data.get("username")
    password = data.get("password")

    if not isinstance(username, str) or not username.strip():
        raise ValidationError("Username is required", "username")
    if not isinstance(password, str) or not password:
        raise ValidationError("Password is required", "password")

    user = auth_service.authenticate(username.strip(), password)

    # Drop any session this browser already had before issuing a new token
    previous = session.pop(SESSION_TOKEN_KEY, None)
    if previous:
        session_service.revoke_session(previous, reason="Replaced by new login")

    _, token = session_service.create_session(
        user_id=user.id,
        user_agent=request.headers.get("User-Agent"),
        ip_address=request.remote_addr,
    )
    session.permanent = True
    session[SESSION_TOKEN_KEY] = token

    current_app.logger.info("User %s logged in", user.username)
    return success(user.to_identity(), message="Logged in successfully")


@auth_bp.post("/logout")
def logout_route():
    """Revoke the current session (if any) and clear the cookie."""
    token = session.pop(SESSION_TOKEN_KEY, None)
    if token:
        session_service.revoke_session(token, reason="User logout")
    session.clear()
    return success(None, message="Logged out successfully")


@auth_bp.get("/me")
def me_route():
    """Return the logged-in user's identity; 401 without a valid session."""
    return success(current_user().to_identity())


@auth_bp.get("/status")
def status_route():
    """Report whether the caller is logged in. Never returns 401."""
    context = load_session_context()
    return success({
        "authenticated": context is not None,
        "user": context.user.to_identity() if context else None,
    })
