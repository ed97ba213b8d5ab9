"""
Profile repository for data store access.

Encapsulates all queries and data mapping for the users table.
"""

from typing import Any, Optional

from idsync.shared.repository import BaseRepository
from idsync.modules.store.exceptions import DuplicateKeyError, RowNotFoundError

from .exceptions import ProfileAlreadyExistsError, ProfileNotFoundError
from .models import ProfileCreate, ProfileRecord, ProfileUpdate


class ProfileRepository(BaseRepository[ProfileRecord]):
    """
    Repository for profile rows.

    Note: This repository does NOT perform authorization checks.
    Row Level Security on the store and the session layer handle that.
    """

    async def get_by_subject_id(self, subject_id: str) -> Optional[ProfileRecord]:
        """
        Get the profile for an identity provider subject ID.

        Returns:
            The profile, or None if no row exists.
        """
        try:
            row = await self._store.query(self._table, {"clerk_id": subject_id})
        except RowNotFoundError:
            return None
        return self._map_to_profile(row)

    async def get_by_username(self, username: str) -> Optional[ProfileRecord]:
        """Get the profile owning a username, or None."""
        try:
            row = await self._store.query(self._table, {"username": username})
        except RowNotFoundError:
            return None
        return self._map_to_profile(row)

    async def create(self, profile: ProfileCreate) -> ProfileRecord:
        """
        Insert a profile row.

        Raises:
            ProfileAlreadyExistsError: If the subject ID (or username) is taken.
        """
        try:
            row = await self._store.insert(self._table, profile.to_row())
        except DuplicateKeyError:
            raise ProfileAlreadyExistsError(profile.clerk_id)
        return self._map_to_profile(row)

    async def update(self, subject_id: str, update: ProfileUpdate) -> ProfileRecord:
        """
        Apply a partial update to a profile.

        Raises:
            ProfileNotFoundError: If no row matched.
            ProfileAlreadyExistsError: If the new username is taken.
        """
        patch = update.to_patch()
        if not patch:
            existing = await self.get_by_subject_id(subject_id)
            if existing is None:
                raise ProfileNotFoundError(subject_id)
            return existing

        try:
            rows = await self._store.update(self._table, {"clerk_id": subject_id}, patch)
        except DuplicateKeyError:
            raise ProfileAlreadyExistsError(subject_id)
        if not rows:
            raise ProfileNotFoundError(subject_id)
        return self._map_to_profile(rows[0])

    def _map_to_profile(self, data: dict[str, Any]) -> ProfileRecord:
        """Map a users row to ProfileRecord."""
        return ProfileRecord(
            clerk_id=str(data["clerk_id"]),
            email=data.get("email"),
            first_name=data.get("first_name"),
            last_name=data.get("last_name"),
            username=data.get("username"),
            avatar_url=data.get("avatar_url"),
            created_at=data.get("created_at"),
        )
