"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Not found errors (404)
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    ROUTE_NOT_FOUND = "ROUTE_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    HTTP_ERROR = "HTTP_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.errors = errors
        super().__init__(self.message)


class ProfileValidationError(AppException):
    """One or more profile fields failed validation."""

    def __init__(self, errors: list[dict[str, Any]]) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message="Validation failed",
            status_code=400,
            errors=errors,
        )


class ProfileNotFoundError(AppException):
    """No profile exists for the given email."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message="Profile not found",
            status_code=404,
        )


class DuplicateEmailError(AppException):
    """Insert lost a race against another insert for the same email."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(
            error_code=ErrorCode.DUPLICATE_EMAIL,
            message="Email already exists",
            status_code=400,
            errors=[{"field": "email", "message": "Email already exists"}],
        )
