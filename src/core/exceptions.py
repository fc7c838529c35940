"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"
    ACCOUNT_DISABLED = "ACCOUNT_DISABLED"

    # Not found errors (404)
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFIRMATION_REQUIRED = "CONFIRMATION_REQUIRED"
    AUTH_REJECTED = "AUTH_REJECTED"

    # Conflict errors (409)
    EMAIL_ALREADY_REGISTERED = "EMAIL_ALREADY_REGISTERED"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Upstream errors (502/503)
    BACKEND_ERROR = "BACKEND_ERROR"
    AUTH_PROVIDER_UNAVAILABLE = "AUTH_PROVIDER_UNAVAILABLE"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"


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
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class AuthorizationError(AppException):
    """Authorization failed."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(
            error_code=ErrorCode.FORBIDDEN,
            message=message,
            status_code=403,
        )


class AccountDisabledError(AppException):
    """The signed-in account is banned or disabled."""

    def __init__(self, status: str) -> None:
        super().__init__(
            error_code=ErrorCode.ACCOUNT_DISABLED,
            message=f"This account is {status}",
            status_code=403,
            details={"status": status},
        )


class AuthError(AppException):
    """The identity provider rejected a credential operation."""

    def __init__(
        self,
        message: str = "Invalid email or password",
        error_code: ErrorCode = ErrorCode.INVALID_CREDENTIALS,
        status_code: int = 401,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=status_code,
        )


class BackendError(AppException):
    """A document store read, write or delete failed."""

    def __init__(self, operation: str, reason: str = "") -> None:
        super().__init__(
            error_code=ErrorCode.BACKEND_ERROR,
            message=f"Backend operation failed: {operation}",
            status_code=502,
            details={"operation": operation, "reason": reason} if reason else {"operation": operation},
        )


class ProfileNotFoundError(AppException):
    """Profile not found."""

    def __init__(self, profile_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message=f"Profile not found: {profile_id}",
            status_code=404,
            details={"profile_id": profile_id},
        )


class ConfirmationRequiredError(AppException):
    """A destructive action was requested without explicit confirmation."""

    def __init__(self, action: str) -> None:
        super().__init__(
            error_code=ErrorCode.CONFIRMATION_REQUIRED,
            message=f"Confirmation required: {action}. This action cannot be undone.",
            status_code=400,
            details={"action": action},
        )
