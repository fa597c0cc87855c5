"""Flask application entry point."""

import logging

from flask import Flask, jsonify
from flask_cors import CORS

from .config import Settings, settings
from .exceptions import DependencyError, KrackerError
from .services import EXTENSION_KEY, build_services, get_services

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# ============================================================================
# Error handlers
# ============================================================================


def handle_kracker_error(error: KrackerError):
    """Render client-facing errors as {"error": code, **details}."""
    response = {"error": error.code}
    response.update(error.details)
    return jsonify(response), error.status_code


def handle_dependency_error(error: DependencyError):
    """Dependency failures are logged and rendered without diagnostics."""
    logger.error(f"Dependency failure: {error.message}", exc_info=error)
    return jsonify({"error": "internal_error"}), 500


def handle_internal_error(error):
    """Handle internal server errors, logging the exception that caused them."""
    original = getattr(error, "original_exception", None) or error
    logger.error(f"Internal error: {original}", exc_info=original)
    return jsonify({"error": "internal_error"}), 500


# ============================================================================
# Health endpoints
# ============================================================================


def health():
    """Health check endpoint."""
    return jsonify({"ok": True})


def db_health():
    """Database health check endpoint."""
    ok, error = get_services().database.check_health()
    response = {"ok": ok, "db": "up" if ok else "down"}
    if error:
        response["error"] = error
    return jsonify(response)


# ============================================================================
# Application factory
# ============================================================================


def create_app(config: Settings | None = None) -> Flask:
    """
    Build the Flask app from explicit settings.

    The signing secret, hash parameters and database path are read from
    ``config`` once, here, and injected into the services.
    """
    config = config or settings

    app = Flask(__name__)

    # CORS configuration
    CORS(app, origins=config.cors_origins, supports_credentials=True)

    services = build_services(config)
    app.extensions[EXTENSION_KEY] = services

    if config.uses_default_secret:
        logger.warning("JWT_SECRET is the insecure development default; set it before deploying")

    # Database initialization (runs once on app startup)
    try:
        services.database.init_db()
        logger.info(f"Database initialized successfully (schema {services.database.get_schema_version()})")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise

    app.register_error_handler(DependencyError, handle_dependency_error)
    app.register_error_handler(KrackerError, handle_kracker_error)
    app.register_error_handler(500, handle_internal_error)

    app.add_url_rule("/health", "health", health, methods=["GET"])
    app.add_url_rule("/db/health", "db_health", db_health, methods=["GET"])

    # Register API blueprints
    from .api.v1 import api_v1_bp
    from .auth.api import dev_bp

    app.register_blueprint(api_v1_bp, url_prefix=config.api_v1_prefix)
    if config.enable_dev_routes:
        logger.warning("Development routes enabled: GET /dev/token mints unauthenticated tokens")
        app.register_blueprint(dev_bp)

    return app


app = create_app()


if __name__ == "__main__":
    app.run(debug=True)
