"""Domain exceptions and their HTTP mapping.

Handlers and dependencies raise these instead of ``HTTPException`` so the
status code for each failure kind is decided in one place. ``main`` registers
an exception handler that renders them as ``{"detail": message}``.
"""

from fastapi import status


class AppError(Exception):
    """Base exception for the workload API."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    headers: dict[str, str] | None = None

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class Unauthenticated(AppError):
    """Missing, invalid or expired token, or a deactivated account."""

    status_code = status.HTTP_401_UNAUTHORIZED
    headers = {"WWW-Authenticate": "Bearer"}

    def __init__(self, message: str = "Please authenticate"):
        super().__init__(message)


class Forbidden(AppError):
    """Role or ownership check failed."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class NotFound(AppError):
    """Referenced record does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class InvalidOperation(AppError):
    """A domain rule was violated, e.g. removing the last administrator."""

    status_code = status.HTTP_400_BAD_REQUEST
