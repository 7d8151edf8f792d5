# Overview: Request decorators for API routes.

from functools import wraps
from flask import current_app, g, session

from .errors import AuthenticationError
from .services import session_service

# Key inside Flask's signed session cookie that holds the opaque session token
SESSION_TOKEN_KEY = "sid"


def load_session_context():
    """
    Resolve the session cookie to a SessionContext, or None.

    A cookie whose server-side session is gone (logout elsewhere, expiry,
    deactivated user) is cleared so the client stops sending it.
    """
    token = session.get(SESSION_TOKEN_KEY)
    if not token:
        return None

    context = session_service.validate_session(token)
    if context is None:
        session.pop(SESSION_TOKEN_KEY, None)
    return context


def current_session():
    """SessionContext for this request; raises AuthenticationError without one."""
    context = load_session_context()
    if context is None:
        raise AuthenticationError("Not authenticated")
    return context


def current_user():
    return current_session().user


def require_auth(f):
    """
    Require an authenticated session.

    Sets the following Flask g attributes:
    - g.current_user: The authenticated User object
    - g.session_context: The full SessionContext object

    Responds 401 (via AuthenticationError) if there is no session cookie, or
    the session is expired or revoked or belongs to a deactivated user.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        context = current_session()
        g.current_user = context.user
        g.session_context = context

        return f(*args, **kwargs)

    return decorated_function


def login_required(f):
    """require_auth, unless LOGIN_REQUIRED is switched off in config."""
    protected = require_auth(f)

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_app.config.get("LOGIN_REQUIRED", True):
            return f(*args, **kwargs)
        return protected(*args, **kwargs)

    return decorated_function
