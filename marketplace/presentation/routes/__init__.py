"""
Routes package for the marketplace order API
Registers the JSON blueprints and maps every exception onto the response envelope.
"""

from flask_wtf.csrf import CSRFError
from werkzeug.exceptions import HTTPException
from marketplace import db, login_manager
from marketplace.presentation.api_response import ApiResponse
from marketplace.business.orders.errors import OrderDomainError, UnauthorizedError
from marketplace.logger import get_logger
from marketplace.utils.logging_sanitizer import sanitize_exception_message

logger = get_logger("marketplace.routes")


def register_error_handlers(app):
    """Translate exceptions into the response envelope"""

    @app.errorhandler(OrderDomainError)
    def handle_domain_error(e):
        if e.code >= 500:
            logger.error(f"{type(e).__name__}: {e.message}")
        else:
            logger.info(f"Request rejected ({e.code} {e.reason}): {e.message}")
        return ApiResponse.error(e.code, e.message, e.reason, data=e.details)

    @app.errorhandler(CSRFError)
    def handle_csrf_error(e):
        logger.warning(f"CSRF validation failed: {e.description}")
        return ApiResponse.error(400, e.description, 'csrf_error')

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        reason = (e.name or 'error').lower().replace(' ', '_')
        return ApiResponse.error(e.code, e.description, reason)

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        db.session.rollback()
        logger.error(f"Unhandled exception: {type(e).__name__}: {sanitize_exception_message(e)}")
        return ApiResponse.from_exception(e, 500, "Internal Server Error")


def init_app(app):
    """Initialize all route blueprints with the Flask app"""
    logger.debug("Initializing route blueprints")

    from marketplace.presentation.routes.orders import orders_bp, vendor_orders_bp

    app.register_blueprint(orders_bp, url_prefix='/orders')
    app.register_blueprint(vendor_orders_bp, url_prefix='/vendors')

    @login_manager.unauthorized_handler
    def unauthorized():
        raise UnauthorizedError("Unauthorized: No user information found")

    register_error_handlers(app)
