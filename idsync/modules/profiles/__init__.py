"""
Profiles module.

Owns the users table: one row per identity provider subject ID.

Public API:
- ProfileRepository: Data access for profile rows
- ProfileRecord, ProfileCreate, ProfileUpdate: Models
- ProfileNotFoundError, ProfileAlreadyExistsError: Exceptions
"""

from .models import ProfileRecord, ProfileCreate, ProfileUpdate
from .repository import ProfileRepository
from .exceptions import ProfileNotFoundError, ProfileAlreadyExistsError

__all__ = [
    # Models
    "ProfileRecord",
    "ProfileCreate",
    "ProfileUpdate",
    # Repository
    "ProfileRepository",
    # Exceptions
    "ProfileNotFoundError",
    "ProfileAlreadyExistsError",
]
