from flask import jsonify
from werkzeug.exceptions import HTTPException


class CinemaxError(Exception):
    """Base error; carries the HTTP status the API answers with."""
    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(CinemaxError):
    status_code = 400


class AuthError(CinemaxError):
    status_code = 401


class PaymentError(CinemaxError):
    status_code = 402


class ForbiddenError(CinemaxError):
    status_code = 403


class NotFoundError(CinemaxError):
    status_code = 404


class ConflictError(CinemaxError):
    status_code = 409


def error_response(message, status_code, **extra):
    body = {"success": False, "message": message}
    body.update(extra)
    return jsonify(body), status_code


def register_error_handlers(app):
    @app.errorhandler(CinemaxError)
    def handle_cinemax_error(e):
        if e.status_code >= 500:
            app.logger.error("%s: %s", type(e).__name__, e.message)
        return error_response(e.message, e.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return error_response(e.description or e.name, e.code)

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        app.logger.exception("Unhandled error: %s", e)
        return error_response("Internal server error", 500)
