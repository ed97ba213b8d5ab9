"""
Base exception classes for idsync.

Each module should define its own exceptions that inherit from these bases.
This enables consistent error handling across the application.
"""

from typing import Optional, Any


class IdSyncError(Exception):
    """
    Base exception for all idsync errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(IdSyncError):
    """Resource not found."""

    pass


class ValidationError(IdSyncError):
    """Input validation failed."""

    pass


class AuthenticationError(IdSyncError):
    """Authentication failed (no usable credential or session)."""

    pass


class ConflictError(IdSyncError):
    """Resource already exists."""

    pass


class ExternalServiceError(IdSyncError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
