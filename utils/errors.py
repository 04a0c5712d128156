import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base error carrying an HTTP status and a message safe to show clients."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class AuthenticationError(AppError):
    status_code = 401
    default_message = "Authentication failed"


class PermissionDenied(AppError):
    status_code = 403
    default_message = "Unauthorized"


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class DataAccessError(AppError):
    """A store query failed. The message never carries driver details."""

    status_code = 500
    default_message = "Failed to fetch data"


class RenderError(AppError):
    """Asset or layout problem while composing a PDF.

    The composer catches these and draws a placeholder instead.
    """


def error_response(message, status_code):
    return jsonify({"success": False, "message": message}), status_code


def register_error_handlers(app):
    @app.errorhandler(AppError)
    def handle_app_error(exc):
        if exc.status_code >= 500:
            logger.error("Request failed: %s", exc, exc_info=exc.__cause__ or exc)
        return error_response(exc.message, exc.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_error(exc):
        return error_response(exc.description, exc.code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc):
        logger.exception("Unhandled error")
        return error_response("Internal server error", 500)
