"""
Session module data models.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

import jwt
from pydantic import BaseModel, Field


class SyncPhase(str, Enum):
    """Credential synchronizer state."""

    UNAUTHENTICATED = "unauthenticated"
    ACQUIRING = "acquiring"
    AUTHORIZED = "authorized"


class SessionCredential(BaseModel):
    """
    The client's current proof of identity against the data store.

    expires_at comes from the token's ``exp`` claim. The signature is not
    checked here; the data store verifies it.
    """

    token: str = Field(..., description="Bearer token")
    template: str = Field(..., description="Token template it was issued for")
    acquired_at: datetime = Field(..., description="When the client received it")
    expires_at: Optional[datetime] = Field(None, description="Expiry from the exp claim")

    model_config = {"frozen": True}

    @classmethod
    def from_token(
        cls,
        token: str,
        template: str,
        acquired_at: Optional[datetime] = None,
    ) -> "SessionCredential":
        acquired_at = acquired_at or datetime.now(timezone.utc)
        expires_at = None
        try:
            claims = jwt.decode(token, options={"verify_signature": False})
        except jwt.InvalidTokenError:
            claims = {}
        if "exp" in claims:
            try:
                expires_at = datetime.fromtimestamp(claims["exp"], tz=timezone.utc)
            except (TypeError, ValueError, OverflowError, OSError):
                # malformed exp: treat the expiry as unknown
                expires_at = None

        return cls(
            token=token,
            template=template,
            acquired_at=acquired_at,
            expires_at=expires_at,
        )

    @property
    def validity_seconds(self) -> Optional[float]:
        """Seconds between acquisition and expiry, if the expiry is known."""
        if self.expires_at is None:
            return None
        return (self.expires_at - self.acquired_at).total_seconds()

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        return (now or datetime.now(timezone.utc)) >= self.expires_at
