# rollodex/errors.py
# Typed API errors and the one table that turns them into HTTP responses.
from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException
from sqlalchemy.exc import SQLAlchemyError

from .models import db


class ApiError(Exception):
    status_code = 500
    code = 'SERVER_ERROR'
    message = 'Internal server error'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self):
        return {"error": self.message, "code": self.code}


class ValidationError(ApiError):
    status_code = 400
    code = 'VALIDATION_ERROR'
    message = 'Invalid request'


class NoFiles(ValidationError):
    code = 'NO_FILES'
    message = 'No files uploaded'


class InvalidFileType(ValidationError):
    code = 'INVALID_FILE_TYPE'
    message = 'File type not allowed'


class FileTooLarge(ApiError):
    status_code = 413
    code = 'FILE_TOO_LARGE'
    message = 'File exceeds the maximum upload size'


class AuthenticationError(ApiError):
    status_code = 401
    code = 'AUTHENTICATION_FAILED'
    message = 'Authentication required'


class TokenMissing(AuthenticationError):
    code = 'TOKEN_MISSING'
    message = 'Access token required'


class TokenInvalid(AuthenticationError):
    status_code = 403
    code = 'TOKEN_INVALID'
    message = 'Invalid token'


class InvalidCredentials(AuthenticationError):
    code = 'INVALID_CREDENTIALS'
    message = 'Invalid credentials'


class AuthorizationError(ApiError):
    status_code = 403
    code = 'FORBIDDEN'
    message = 'You do not have permission to perform this action'


Forbidden = AuthorizationError


class NotFoundError(ApiError):
    status_code = 404
    code = 'NOT_FOUND'
    message = 'Resource not found'


NotFound = NotFoundError


class BrandNotFound(NotFoundError):
    code = 'BRAND_NOT_FOUND'
    message = 'Brand not found'


class ConflictError(ApiError):
    status_code = 409
    code = 'CONFLICT'
    message = 'Resource already exists'


class EmailExists(ConflictError):
    code = 'EMAIL_EXISTS'
    message = 'User already exists'


class DuplicateRelationship(ConflictError):
    code = 'DUPLICATE_RELATIONSHIP'
    message = 'Relationship already exists'


class RateLimited(ApiError):
    status_code = 429
    code = 'RATE_LIMITED'
    message = 'Too many requests from this IP'


class ServerError(ApiError):
    pass


# werkzeug HTTP exceptions raised outside the services (routing, body
# size, limiter) go through the same contract.
HTTP_STATUS_ERRORS = {
    400: ValidationError,
    401: AuthenticationError,
    403: AuthorizationError,
    404: NotFoundError,
    405: ValidationError,
    409: ConflictError,
    413: FileTooLarge,
    429: RateLimited,
}


def error_response(error):
    return jsonify(error.to_dict()), error.status_code


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(error):
        if error.status_code >= 500:
            app.logger.error(f"Server error: {error.message}", exc_info=True)
        return error_response(error)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        error_cls = HTTP_STATUS_ERRORS.get(error.code)
        if error_cls is None:
            if error.code and error.code < 500:
                return jsonify(error=error.description, code='HTTP_ERROR'), error.code
            app.logger.error(f"HTTP {error.code}: {error.description}")
            return error_response(ServerError())
        if error.code == 405:
            return jsonify(error=error.description, code='METHOD_NOT_ALLOWED'), 405
        if error_cls is RateLimited:
            return error_response(RateLimited(f"Rate limit exceeded: {error.description}"))
        if error_cls is NotFoundError:
            return error_response(NotFoundError('API endpoint not found'))
        return error_response(error_cls(error.description))

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        db.session.rollback()
        app.logger.error(f"Database error: {error}", exc_info=True)
        return error_response(ServerError())

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        current_app.logger.error(f"Internal Server Error: {error}", exc_info=True)
        return error_response(ServerError())
