"""Application error taxonomy.

Learn: Services and auth dependencies raise these instead of
HTTPException, so business logic stays HTTP-agnostic. main.py registers
one handler that renders any AppError as {"message": ...} with the
error's status code.
"""

from typing import Optional


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Missing or malformed input."""

    status_code = 400
    default_message = "Invalid request"


class AuthenticationError(AppError):
    """Bad credentials, or a missing/invalid/expired token."""

    status_code = 401
    default_message = "Authentication required"


class AuthorizationError(AppError):
    """Valid identity, but insufficient role or not the record's owner."""

    status_code = 403
    default_message = "Forbidden"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class DuplicateError(AppError):
    """Unique constraint violation (e.g. email already registered)."""

    status_code = 409
    default_message = "Already exists"


class InternalError(AppError):
    """Unexpected collaborator failure. The message is safe to return."""

    status_code = 500
