from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
from rentacar.schemas.error import ErrorResponse
from rentacar.utils.exceptions import RentACarError
import logging

logger = logging.getLogger(__name__)


def register_error_handlers(app: Flask) -> None:
    """Convert exceptions raised by routes into structured error responses."""

    @app.errorhandler(RentACarError)
    def handle_rentacar_error(e: RentACarError):
        logger.warning(f"Rent-a-car error: {e.code} - {e.message}")
        body = ErrorResponse.build(e.code, e.message, e.field, e.details)
        return jsonify(body.model_dump()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        logger.warning(f"HTTP Exception: {e.code} - {e.description}")
        body = ErrorResponse.build("HTTP_EXCEPTION", e.description, details={"status_code": e.code})
        return jsonify(body.model_dump()), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e: Exception):
        logger.error(f"Unexpected error: {str(e)}", exc_info=True)
        body = ErrorResponse.build(
            "INTERNAL_SERVER_ERROR",
            "An unexpected error occurred",
            details={"error_type": type(e).__name__}
        )
        return jsonify(body.model_dump()), 500
