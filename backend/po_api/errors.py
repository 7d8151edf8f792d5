# Overview: Exception taxonomy and the handlers that turn exceptions into JSON envelopes.

"""
Error normalization

Every failure leaves the API as {"success": false, "error": ...}:

- ValidationError      -> 400 (with per-field details)
- AuthenticationError  -> 401
- NotFoundError        -> 404
- ConflictError        -> 409 (also raw IntegrityError from the database)
- HTTPException        -> its own status code
- anything else        -> 500 with a generic message; the traceback is logged
"""

from flask import Flask, current_app, request
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from .extensions import db
from .responses import failure
from .validation import ConflictError, ValidationError


class NotFoundError(LookupError):
    """404-level missing resource."""


class AuthenticationError(Exception):
    """401-level: no valid session, or credentials rejected."""


def register_error_handlers(app: Flask) -> None:

    @app.errorhandler(ValidationError)
    def handle_validation_error(e: ValidationError):
        return failure("Validation error", 400, message=str(e), details=e.details())

    @app.errorhandler(AuthenticationError)
    def handle_authentication_error(e: AuthenticationError):
        return failure(str(e) or "Not authenticated", 401)

    @app.errorhandler(NotFoundError)
    def handle_not_found(e: NotFoundError):
        return failure(str(e) or "Not found", 404)

    @app.errorhandler(ConflictError)
    def handle_conflict(e: ConflictError):
        return failure(str(e), 409)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(e: IntegrityError):
        db.session.rollback()
        current_app.logger.warning("Constraint violation on %s %s: %s", request.method, request.path, e.orig)
        return failure("Record conflicts with an existing record", 409)

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        if e.code == 404:
            return failure("Endpoint not found", 404, path=request.path)
        return failure(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected_error(e: Exception):
        db.session.rollback()
        current_app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        return failure("Internal server error", 500)
