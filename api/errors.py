from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError
import logging

from utils.exceptions import AppError

logger = logging.getLogger(__name__)

GENERIC_ERROR = "An unexpected error occurred"


def error_response(message: str, status: int, details: dict | None = None):
    payload = {"error": message}
    if details:
        payload["details"] = details
    return jsonify(payload), status


def register_error_handlers(app):
    @app.errorhandler(AppError)
    def handle_app_error(err: AppError):
        if err.status_code >= 500:
            # detail stays in the server log
            logger.exception("Internal failure", exc_info=err)
            return error_response(GENERIC_ERROR, err.status_code)
        return error_response(err.message, err.status_code)

    # Marshmallow validation errors map to 400
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        if current_app and current_app.debug:
            logger.info("Validation failed: %s", err.messages)
        return error_response("Invalid input", 400, details=err.messages)

    # Integrity errors (unique constraints, FK violations, check constraints)
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        lower_msg = str(getattr(err, "orig", err)).lower()
        logger.warning("Integrity error: %s", lower_msg)
        if "unique" in lower_msg or "duplicate" in lower_msg:
            return error_response("Unique constraint violated", 409)
        return error_response("Integrity error", 400)

    # Werkzeug HTTPExceptions (abort(404), abort(409), ...) map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return error_response(err.description, err.code or 400)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception", exc_info=err)
        return error_response(GENERIC_ERROR, 500)
