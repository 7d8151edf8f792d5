# backend/po_api/__init__.py
import logging

from flask import Flask, request
from sqlalchemy.exc import SQLAlchemyError

from .config import Config
from .extensions import db


def create_app(config_object=None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object or Config)

    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")), logging.INFO))

    # Binds the engine (and its connection pool) to this app
    db.init_app(app)

    from . import models  # noqa: F401

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.purchase_orders import purchase_orders_bp
    from .routes.company import company_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(purchase_orders_bp)
    app.register_blueprint(company_bp)

    from .errors import register_error_handlers
    register_error_handlers(app)

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if origin and origin.rstrip("/") in app.config.get("ALLOWED_ORIGINS", set()):
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,OPTIONS"
        return response

    if app.config.get("APP_ENV") == "production":
        @app.after_request
        def log_request(response):
            app.logger.info("%s %s -> %s", request.method, request.path, response.status_code)
            return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    if app.config.get("AUTO_INIT_DB"):
        from .services.schema_service import init_database
        with app.app_context():
            try:
                init_database()
            except SQLAlchemyError:
                app.logger.exception(
                    "Database initialization failed; check DATABASE_URL and run: flask system init"
                )

    return app
