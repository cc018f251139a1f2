"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"

    # Not found errors (404)
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    SIGNATURE_INVALID = "SIGNATURE_INVALID"

    # Conflict errors (409)
    HANDLE_TAKEN = "HANDLE_TAKEN"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"

    # Upstream errors (502)
    IDENTITY_PROVIDER_ERROR = "IDENTITY_PROVIDER_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Unauthorized",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class ValidationError(AppException):
    """Malformed or missing input."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details={"field": field} if field else None,
        )


class ProfileNotFoundError(AppException):
    """Profile not found."""

    def __init__(self, lookup: str = "") -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message="Profile not found.",
            status_code=404,
            details={"lookup": lookup} if lookup else None,
        )


class HandleTakenError(AppException):
    """No free handle could be written for a profile."""

    def __init__(self, handle: str) -> None:
        super().__init__(
            error_code=ErrorCode.HANDLE_TAKEN,
            message=f"Handle already taken: {handle}",
            status_code=409,
            details={"handle": handle},
        )


class SignatureInvalidError(AppException):
    """Webhook payload failed signature verification."""

    def __init__(self, message: str = "Invalid signature") -> None:
        super().__init__(
            error_code=ErrorCode.SIGNATURE_INVALID,
            message=message,
            status_code=400,
        )


class IdentityProviderError(AppException):
    """The identity provider could not be reached or answered with an error."""

    def __init__(self, message: str, upstream_status: int | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.IDENTITY_PROVIDER_ERROR,
            message=message,
            status_code=502,
            details={"upstream_status": upstream_status} if upstream_status else None,
        )
