"""
Dynamic Pricing AI backend.
Flask application factory
"""
import os
import logging
from flask import Flask
from flask_cors import CORS

from .config import Settings, get_config
from .utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app(config_name: str = None, settings: Settings = None) -> Flask:
    """
    Application factory for creating Flask app instances.

    Args:
        config_name: Configuration environment (development, production, testing)
        settings: Service settings; built from the environment when omitted

    Returns:
        Configured Flask application
    """
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    # Setup logging before anything else
    setup_logging()

    app = Flask(__name__)
    app.config.from_object(get_config(config_name))
    app.config['SETTINGS'] = settings or Settings.from_env()

    # Keep response keys in the order handlers build them
    app.json.sort_keys = False

    CORS(app, origins=app.config['CORS_ORIGINS'], allow_headers=['Content-Type', 'X-Request-ID'])

    # Initialize request ID tracking for request tracing
    from .middleware import init_request_id_tracking
    init_request_id_tracking(app)

    # Register blueprints
    register_blueprints(app)

    # Register CLI commands
    from .commands import init_app as init_commands
    init_commands(app)

    # Register error handlers
    register_error_handlers(app)

    missing = app.config['SETTINGS'].missing_env()
    if missing:
        logger.warning(f"Missing environment variables: {', '.join(missing)}")

    return app


def register_blueprints(app: Flask) -> None:
    """Register all API blueprints."""
    from .api.health import health_bp
    from .api.strategies import strategies_bp
    from .api.shopify import shopify_bp
    from .api.ai import ai_bp
    from .api.mailerlite import mailerlite_bp
    from .api.reactivation import reactivation_bp

    app.register_blueprint(health_bp, url_prefix='/api')
    app.register_blueprint(strategies_bp, url_prefix='/api/strategies')
    app.register_blueprint(shopify_bp, url_prefix='/api/shopify')
    app.register_blueprint(ai_bp, url_prefix='/api')
    app.register_blueprint(mailerlite_bp, url_prefix='/api/mailerlite')
    app.register_blueprint(reactivation_bp, url_prefix='/api/reactivation')


def register_error_handlers(app: Flask) -> None:
    """Register error handlers."""
    from .utils import errors
    from .utils.errors import ErrorCode, error_response, exception_response, internal_error
    from .utils.exceptions import PricingAIError

    @app.errorhandler(PricingAIError)
    def pricing_error(error):
        return exception_response(error)

    @app.errorhandler(400)
    def bad_request(error):
        return errors.bad_request(getattr(error, 'description', 'Bad request'))

    @app.errorhandler(404)
    def not_found(error):
        return errors.not_found('Not found')

    @app.errorhandler(405)
    def method_not_allowed(error):
        return error_response('Method not allowed', ErrorCode.INVALID_REQUEST, 405, log_error=False)

    @app.errorhandler(413)
    def payload_too_large(error):
        return error_response('Request body too large', ErrorCode.INVALID_REQUEST, 413)

    @app.errorhandler(500)
    def server_error(error):
        original = getattr(error, 'original_exception', None)
        if original is not None:
            logger.exception(f"Unhandled error: {original}", exc_info=original)
        return internal_error()
