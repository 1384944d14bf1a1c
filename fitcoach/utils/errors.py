from flask import current_app, jsonify, request
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

from fitcoach.extensions import db


class APIError(Exception):
    """An error that maps directly onto a JSON response."""

    status_code = 400

    def __init__(self, msg, status_code=None):
        super().__init__(msg)
        self.msg = msg
        if status_code is not None:
            self.status_code = status_code

    def to_response(self):
        return jsonify({"msg": self.msg}), self.status_code


class BadRequest(APIError):
    status_code = 400


class Unauthorized(APIError):
    status_code = 401


class Forbidden(APIError):
    status_code = 403


class NotFound(APIError):
    status_code = 404


class Conflict(APIError):
    status_code = 409


def _first_message(errors):
    # marshmallow nests messages in dicts/lists; surface the first one as "msg"
    while isinstance(errors, dict) and errors:
        field, errors = next(iter(errors.items()))
        if isinstance(errors, list) and errors and isinstance(errors[0], str):
            return f"{field}: {errors[0]}"
    if isinstance(errors, list) and errors:
        return str(errors[0])
    return "Invalid request data"


def register_error_handlers(app):
    @app.errorhandler(APIError)
    def handle_api_error(error):
        return error.to_response()

    @app.errorhandler(ValidationError)
    def handle_validation_error(error):
        return jsonify({"msg": _first_message(error.messages), "errors": error.messages}), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        if request.path.startswith("/api/"):
            return jsonify({"msg": error.description}), error.code
        return error

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        db.session.rollback()
        current_app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"msg": "Internal server error"}), 500
