"""
Response envelope shared by every endpoint.

Success and failure use the same shape:

    {"success": bool, "message": str, "status": int, "data": ..., "error": bool}
"""

import logging

from flask import jsonify, request, current_app
from werkzeug.exceptions import HTTPException

logger = logging.getLogger("insta-clone")


class ApiError(Exception):
    status = 400
    default_message = "An error occurred"

    def __init__(self, message=None, status=None, data=None):
        self.message = message or self.default_message
        if status is not None:
            self.status = status
        self.data = data
        super().__init__(self.message)


class ValidationError(ApiError):
    status = 400
    default_message = "Bad request"


class AuthenticationError(ApiError):
    status = 401
    default_message = "Unauthorized"


class NotFoundError(ApiError):
    status = 404
    default_message = "Not found"


class ConflictError(ApiError):
    status = 409
    default_message = "Already exists"


class UploadError(ApiError):
    status = 502
    default_message = "Image upload failed"


def envelope(success: bool, message: str, status: int, data=None) -> dict:
    return {
        "success": success,
        "message": message,
        "status": status,
        "data": data,
        "error": not success,
    }


def success(message: str, data=None, status: int = 200):
    return jsonify(envelope(True, message, status, data)), status


def failure(message: str, status: int, data=None):
    return jsonify(envelope(False, message, status, data)), status


# -----------------------
# Error handlers
# -----------------------
def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(e):
        return failure(e.message, e.status, e.data)

    @app.errorhandler(413)
    def too_large(e):
        return failure("Uploaded file is too large", 413)

    @app.errorhandler(404)
    def not_found(e):
        if request.path.startswith(current_app.config["API_VERSION"]):
            return failure("API Route Invalid!", 404)
        return failure("Not found", 404)

    @app.errorhandler(405)
    def method_not_allowed(e):
        return failure("Method not allowed", 405)

    @app.errorhandler(400)
    def bad_request(e):
        return failure("Bad request", 400)

    @app.errorhandler(Exception)
    def unexpected(e):
        if isinstance(e, HTTPException):
            return failure(e.description or e.name, e.code or 500)
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return failure("Internal server error", 500)
