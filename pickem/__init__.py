import logging
import os

from flask import Flask, jsonify, request
from flask_caching import Cache
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from config import config

logger = logging.getLogger(__name__)

cache = Cache()


def get_real_ip():
    """
    Get the real client IP address, accounting for reverse proxies.
    Checks X-Forwarded-For, X-Real-IP, and falls back to remote_addr.
    """
    # X-Forwarded-For: client, proxy1, proxy2, ...
    # We want the leftmost (original client) IP
    if request.headers.get("X-Forwarded-For"):
        return request.headers.get("X-Forwarded-For").split(",")[0].strip()
    if request.headers.get("X-Real-IP"):
        return request.headers.get("X-Real-IP")
    return get_remote_address()


limiter = Limiter(key_func=get_real_ip)


def create_app(config_name=None):
    app = Flask(__name__)

    # Determine configuration
    if config_name is None:
        config_name = os.environ.get("PICKEM_CONFIG", "default")

    app.config.from_object(config[config_name]())
    app.json.sort_keys = False

    # Fail fast on a bad closing policy rather than on the first request
    from pickem.utils.pool_status import ClosingPolicy

    ClosingPolicy.validate(app.config.get("CLOSING_POLICY"))

    # Initialize extensions
    cache.init_app(app)
    limiter.init_app(app)

    from pickem.utils.data_store import DataStore

    app.extensions["pickem_store"] = DataStore.from_config(app.config)

    # Import and register blueprints
    from pickem.routes.api import bp as api_bp

    app.register_blueprint(api_bp, url_prefix="/api")

    # Register error handlers
    register_error_handlers(app)

    # Setup logging
    from pickem.utils.logging_config import setup_logging

    setup_logging(app)

    # Show configuration warnings
    show_config_warnings(app, config_name)

    return app


def show_config_warnings(app, config_name):
    """Log configuration status"""
    app.logger.info(f"Pick'em pool starting with '{config_name}' configuration")

    if config_name == "production" and app.config.get("DEBUG"):
        app.logger.warning("DEBUG mode is enabled in production!")

    if app.config.get("PREVIEW_MODE"):
        app.logger.warning("PREVIEW_MODE enabled: pools without final scores accept picks")

    store = app.extensions["pickem_store"]
    if store.base_url:
        app.logger.info(f"Reading data documents from {store.base_url}")
    else:
        app.logger.info(f"Reading data documents from directory {store.data_dir}")

    app.logger.info(f"Closing policy: {app.config.get('CLOSING_POLICY')}")


def register_error_handlers(app):
    """Register global error handlers"""
    from pickem.models import MalformedRecordError
    from pickem.utils.data_store import DataSourceError

    @app.after_request
    def after_request(response):
        # Add security headers to all responses
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"

        if not app.config.get("DEBUG"):
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )

        return response

    @app.errorhandler(DataSourceError)
    def handle_data_source_error(error):
        app.logger.error(f"Data source error: {error} - Path: {request.path}")
        return jsonify({"error": "Data unavailable"}), 503

    @app.errorhandler(MalformedRecordError)
    def handle_malformed_record(error):
        app.logger.error(f"Malformed data document: {error} - Path: {request.path}")
        return jsonify({"error": "Data unavailable"}), 503

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({"error": "Resource not found"}), 404

    @app.errorhandler(400)
    def bad_request_error(error):
        app.logger.warning(
            f"400 Bad Request: {str(error)} - Path: {request.path} - Method: {request.method}"
        )
        return jsonify({"error": "Bad request"}), 400

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(429)
    def too_many_requests_error(error):
        return jsonify({"error": "Too many requests"}), 429

    @app.errorhandler(500)
    def internal_error(error):
        return jsonify({"error": "Internal server error"}), 500
