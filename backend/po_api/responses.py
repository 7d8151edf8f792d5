# Overview: JSON envelope helpers shared by every route.

from flask import jsonify


def success(data=None, *, message: str | None = None, status: int = 200, **extra):
    """{"success": true, "data": ..., "message"?: ...} plus any extra top-level keys."""
    body = {"success": True, "data": data}
    if message:
        body["message"] = message
    body.update(extra)
    return jsonify(body), status


def failure(error: str, status: int, **extra):
    """{"success": false, "error": ...} plus any extra top-level keys."""
    body = {"success": False, "error": error}
    body.update(extra)
    return jsonify(body), status
