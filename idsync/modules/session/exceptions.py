"""
Session module exceptions.
"""

from idsync.shared.exceptions import AuthenticationError


class SessionNotReadyError(AuthenticationError):
    """Raised when an authorized store call is attempted before the session is ready."""

    def __init__(self, message: str = "Session is not ready"):
        super().__init__(message, code="SESSION_NOT_READY")
