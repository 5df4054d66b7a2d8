from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError

from marketplace.utils.responses import error_response


class ApiError(Exception):
    """
    Generic business error, rendered as {"success": false, "error": ...}.
    """
    status_code = 400

    def __init__(self, message, status_code=None, errors=None, payload=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.errors = errors or {}
        self.payload = payload or {}


class InvalidRequest(ApiError):
    status_code = 400


class Unauthenticated(ApiError):
    status_code = 401


class Forbidden(ApiError):
    status_code = 403


class NotFound(ApiError):
    status_code = 404


class Conflict(ApiError):
    status_code = 409


class DependencyFailure(ApiError):
    """The underlying store rejected a write we could not do without."""
    status_code = 500


def register_error_handlers(app):

    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        return error_response(
            err.message,
            status_code=err.status_code,
            errors=err.errors,
            payload=err.payload,
        )

    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err: ValidationError):
        return error_response(
            "Validation failed",
            status_code=400,
            errors=err.messages if hasattr(err, "messages") else str(err),
        )

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return error_response(err.description or "HTTP error", status_code=err.code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        app.logger.exception(err)
        return error_response("Internal server error", status_code=500)
