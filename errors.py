from enum import Enum

from flask import jsonify
from loguru import logger
from werkzeug.exceptions import HTTPException


class AppMessage(str, Enum):
    """Stable, machine-readable error messages. Callers branch on these, not on text."""

    # users
    USERNAME_ALREADY_EXISTS = "username already exists"
    EMAIL_ALREADY_EXISTS = "email already exists"
    USERNAME_REQUIRED = "username is required"
    EMAIL_REQUIRED = "email is required"
    PASSWORD_REQUIRED = "password is required"
    USER_FILTER_EMPTY = "user filter needs id, username or email"
    USER_NOT_FOUND = "user not found"

    # auth
    INVALID_CREDENTIALS = "invalid credentials"
    INVALID_TOKEN = "invalid or expired token"
    INVALID_REFRESH_TOKEN = "invalid refresh token"
    AUTHENTICATION_REQUIRED = "authentication required"

    # products
    PRODUCT_NAME_REQUIRED = "product name is required"
    PRODUCT_CODE_REQUIRED = "product code is required"
    PRODUCT_CODE_ALREADY_EXISTS = "product code already exists"
    INVALID_PRICE = "price must be a non-negative integer"
    PRODUCT_NOT_FOUND = "product not found"
    PRODUCT_HAS_BOOKINGS = "product has bookings"

    # bookings
    PRODUCT_ALREADY_BOOKED = "product already booked"
    BOOKING_NOT_FOUND = "booking not found"
    INVALID_BOOKING_DATES = "estimated end date must not be before start date"
    INVALID_BOOKING_STATUS = "invalid booking status"

    # generic
    INVALID_PAGINATION = "page and limit must be positive integers"
    INVALID_DATE = "invalid date, use ISO 8601"
    INVALID_PAYLOAD = "invalid payload"
    INTERNAL_ERROR = "internal server error"

    # startup
    ACCESS_SECRET_MISSING = "ACCESS_TOKEN_SECRET must be set"
    DATABASE_URL_MISSING = "DATABASE_URL must be set"
    INVALID_TOKEN_TTL = "token lifetimes must be positive"

    def __str__(self) -> str:
        return self.value


class AppError(Exception):
    status_code = 400

    def __init__(self, message: AppMessage, *, context=None):
        super().__init__(str(message))
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict:
        payload = {"statusCode": self.status_code, "message": str(self.message)}
        if self.context:
            payload["data"] = dict(self.context)
        return payload


class ValidationError(AppError):
    status_code = 400


class AuthenticationError(AppError):
    status_code = 401


class ForbiddenError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class ConfigError(AppError):
    status_code = 500


def register_error_handlers(app) -> None:
    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException):
        return jsonify(statusCode=exc.code, message=exc.description), exc.code

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        logger.exception("Unhandled {}", type(exc).__name__)
        return jsonify(statusCode=500, message=str(AppMessage.INTERNAL_ERROR)), 500
