"""
Application error taxonomy.

Every error carries a safe, user-facing message and the HTTP status class it
maps to. Handlers in ``fintrack.main`` turn them into the failure envelope.
"""
from typing import Any, Dict, List, Optional
from fastapi import status


class AppError(Exception):
    """Base class for errors surfaced to API callers."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationFailed(AppError):
    """Malformed or out-of-range input."""
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Validation failed"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []


class Conflict(AppError):
    """A uniqueness constraint would be violated."""
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Resource already exists"


class Unauthenticated(AppError):
    """No token was presented."""
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Not authenticated, please log in"


class InvalidOrExpiredToken(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Token is invalid or has expired"


class UnknownPrincipal(AppError):
    """The token is valid but its subject no longer exists."""
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "User no longer exists"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "You do not have permission to perform this action"


class NotFound(AppError):
    """Record is absent or not owned by the caller; the two are not distinguished."""
    status_code = status.HTTP_404_NOT_FOUND
    message = "Resource not found"


class StoreFailure(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Database error"
