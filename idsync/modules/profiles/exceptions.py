"""
Profile module exceptions.
"""

from idsync.shared.exceptions import ConflictError, NotFoundError


class ProfileNotFoundError(NotFoundError):
    """Raised when no profile row exists for a subject ID."""

    def __init__(self, subject_id: str):
        super().__init__(
            f"Profile not found: {subject_id}",
            code="PROFILE_NOT_FOUND",
            details={"subject_id": subject_id},
        )


class ProfileAlreadyExistsError(ConflictError):
    """Raised when creating a profile that collides with an existing row."""

    def __init__(self, subject_id: str):
        super().__init__(
            f"Profile already exists: {subject_id}",
            code="PROFILE_EXISTS",
            details={"subject_id": subject_id},
        )
