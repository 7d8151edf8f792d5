# Overview: Threaded WSGI server with graceful shutdown.

"""
Runs the app on werkzeug's threaded server.

On SIGINT/SIGTERM the listening socket stops accepting new connections,
in-flight requests get up to SHUTDOWN_GRACE_SECONDS to finish, and then the
pooled database connections are disposed.
"""

import signal
import threading

from flask import Flask
from werkzeug.serving import make_server

from .extensions import db


class InFlightTracker:
    """WSGI middleware counting requests currently being handled."""

    def __init__(self, wsgi_app):
        self.wsgi_app = wsgi_app
        self._count = 0
        self._idle = threading.Condition()

    def __call__(self, environ, start_response):
        with self._idle:
            self._count += 1
        try:
            return self.wsgi_app(environ, start_response)
        finally:
            with self._idle:
                self._count -= 1
                if self._count == 0:
                    self._idle.notify_all()

    @property
    def in_flight(self) -> int:
        with self._idle:
            return self._count

    def wait_idle(self, timeout: float) -> bool:
        """Block until no request is running or timeout elapses. True if idle."""
        with self._idle:
            return self._idle.wait_for(lambda: self._count == 0, timeout=timeout)


def serve(app: Flask, host: str, port: int, grace_seconds: float | None = None) -> None:
    if grace_seconds is None:
        grace_seconds = app.config.get("SHUTDOWN_GRACE_SECONDS", 10)

    tracker = InFlightTracker(app)
    server = make_server(host, port, tracker, threaded=True)
    stopping = threading.Event()

    def request_shutdown(signum, frame):
        if stopping.is_set():
            return
        stopping.set()
        app.logger.info("Received %s, shutting down gracefully...", signal.Signals(signum).name)
        # shutdown() blocks until serve_forever exits, so it cannot run on this thread
        threading.Thread(target=server.shutdown, daemon=True).start()

    signal.signal(signal.SIGINT, request_shutdown)
    signal.signal(signal.SIGTERM, request_shutdown)

    app.logger.info("Server running on http://%s:%s", host, port)
    app.logger.info("API base URL: http://%s:%s/api", host, port)
    app.logger.info("Environment: %s", app.config.get("APP_ENV"))

    server.serve_forever()

    if not tracker.wait_idle(grace_seconds):
        app.logger.warning(
            "%d request(s) still running after %.1fs grace period; closing anyway",
            tracker.in_flight, grace_seconds,
        )

    with app.app_context():
        db.engine.dispose()
    app.logger.info("Server closed")
