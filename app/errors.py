"""Application error taxonomy.

Services raise these; ``main.py`` renders them as ``{"message": ...}`` with the
matching status code.
"""


class AppError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Missing or malformed input."""

    status_code = 400
    default_message = "Invalid request"


class AuthenticationError(AppError):
    """Bad credentials or a missing, invalid or expired token."""

    status_code = 401
    default_message = "Invalid credentials"


class AuthorizationError(AppError):
    """Valid identity without the required role."""

    status_code = 403
    default_message = "Insufficient permissions"


class NotFoundError(AppError):
    """Non-identity lookup miss. Identity lookups raise AuthenticationError instead."""

    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Resource already exists"


class TransientInfraError(AppError):
    """Storage or notification backend unavailable. Safe to retry."""

    status_code = 500
    default_message = "Internal server error"
