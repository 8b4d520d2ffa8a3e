"""Flask application factory for the promotion API."""

from __future__ import annotations

from typing import TYPE_CHECKING

from flask import Flask, jsonify
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from werkzeug.exceptions import HTTPException

from core.exceptions import (
    ApplicationError,
    PersistenceError,
    UnknownLocationError,
    ValidationError,
)
from web.config_middleware import configure_app, setup_metrics, setup_security_headers
from web.routes import register_routes

if TYPE_CHECKING:
    from config import Config
    from services.promotion import PromotionServices

EXTENSION_KEY = "promotion"


def create_app(config: Config, services: PromotionServices, testing: bool = False) -> Flask:
    """Create and configure Flask application.

    Args:
        config: Application configuration
        services: Promotion services; their coroutines run on the loop
            registered with ``services.async_runner``
        testing: Whether running in testing mode

    Returns:
        Configured Flask application
    """
    app = Flask(__name__)

    configure_app(app, config, testing)
    setup_security_headers(app)
    setup_metrics(app)

    app.extensions[EXTENSION_KEY] = services

    register_routes(app)

    _setup_routes(app)
    _setup_error_handlers(app)

    return app


def _setup_routes(app: Flask) -> None:
    @app.route('/metrics')
    def metrics():
        """Expose Prometheus metrics."""
        data = generate_latest()
        return data, 200, {'Content-Type': CONTENT_TYPE_LATEST}


def _error(message: str, code: str, status: int):
    return jsonify({"error": message, "code": code}), status


def _setup_error_handlers(app: Flask) -> None:
    """Map domain errors to JSON responses."""

    @app.errorhandler(ValidationError)
    def validation_failed(error: ValidationError):
        return _error(str(error), error.code, 400)

    @app.errorhandler(UnknownLocationError)
    def unknown_location(error: UnknownLocationError):
        return _error("Location does not exist.", error.code, 404)

    @app.errorhandler(PersistenceError)
    def persistence_failed(error: PersistenceError):
        app.logger.error(f"Storage failure: {error}")
        return _error("Storage is unavailable, please try again.", error.code, 500)

    @app.errorhandler(ApplicationError)
    def application_failed(error: ApplicationError):
        app.logger.error(f"Application error: {error}")
        return _error("Internal server error.", error.code, 500)

    @app.errorhandler(HTTPException)
    def http_error(error: HTTPException):
        return _error(error.description or error.name, error.name.upper().replace(" ", "_"), error.code or 500)
