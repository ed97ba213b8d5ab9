"""
Validation module exceptions.

The live validator never raises these; they are for callers that need a
hard failure, such as a profile update with a malformed username.
"""

from idsync.shared.exceptions import ValidationError


class UsernameFormatError(ValidationError):
    """Raised when a username fails the format rules."""

    def __init__(self, username: str, reason: str):
        super().__init__(
            reason,
            code="INVALID_USERNAME",
            details={"username": username},
        )
