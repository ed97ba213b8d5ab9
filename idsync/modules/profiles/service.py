"""
Profile screen service.

Reads and updates the signed-in user's own profile row. Every call is
gated on the session being ready, so no request goes out without a
current credential. Rows are never created here; the credential
synchronizer owns creation.
"""

import logging
from typing import Optional

from idsync.modules.session.interfaces import ISessionSynchronizer
from idsync.modules.validation.exceptions import UsernameFormatError
from idsync.modules.validation.rules import (
    UsernameRules,
    check_username_format,
    normalize_username,
)

from .exceptions import ProfileNotFoundError
from .models import ProfileRecord, ProfileUpdate
from .repository import ProfileRepository

logger = logging.getLogger(__name__)


class ProfileService:
    """Profile operations for the signed-in identity."""

    def __init__(
        self,
        profiles: ProfileRepository,
        session: ISessionSynchronizer,
        rules: Optional[UsernameRules] = None,
    ):
        self._profiles = profiles
        self._session = session
        self._rules = rules or UsernameRules.from_settings()

    async def get_current_profile(self) -> ProfileRecord:
        """
        Load the signed-in user's profile.

        Raises:
            SessionNotReadyError: If the session is not ready
            ProfileNotFoundError: If the row does not exist (yet)
        """
        identity = self._session.require_ready()
        profile = await self._profiles.get_by_subject_id(identity.subject_id)
        if profile is None:
            raise ProfileNotFoundError(identity.subject_id)
        return profile

    async def update_current_profile(self, update: ProfileUpdate) -> ProfileRecord:
        """
        Update the signed-in user's profile.

        A new username is normalized and format-checked first. Uniqueness is
        enforced by the store and surfaces as ProfileAlreadyExistsError.

        Raises:
            SessionNotReadyError: If the session is not ready
            UsernameFormatError: If the new username breaks a format rule
            ProfileNotFoundError: If the row does not exist
        """
        identity = self._session.require_ready()

        if update.username is not None:
            username = normalize_username(update.username)
            if not username:
                raise UsernameFormatError(username, "Username is required")
            reason = check_username_format(username, self._rules)
            if reason is not None:
                raise UsernameFormatError(username, reason)
            update = update.model_copy(update={"username": username})

        profile = await self._profiles.update(identity.subject_id, update)
        logger.debug(f"Updated profile for {identity.subject_id}")
        return profile
