"""
Profile module data models.

ProfileRecord mirrors one row of the users table. The row is keyed by
the identity provider's subject ID, stored in the ``clerk_id`` column.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class ProfileRecord(BaseModel):
    """Backend mirror of an authenticated identity."""

    clerk_id: str = Field(..., description="Identity provider subject ID")
    email: Optional[str] = Field(None, description="Email address")
    first_name: Optional[str] = Field(None, description="First name")
    last_name: Optional[str] = Field(None, description="Last name")
    username: Optional[str] = Field(None, description="Unique username")
    avatar_url: Optional[str] = Field(None, description="Avatar image URI")
    created_at: Optional[datetime] = Field(None, description="Row creation time")

    @property
    def display_name(self) -> str:
        full = " ".join(p for p in (self.first_name, self.last_name) if p)
        return full or self.username or self.email or self.clerk_id


class ProfileCreate(BaseModel):
    """Attributes used to create a profile row."""

    clerk_id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None

    def to_row(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ProfileUpdate(BaseModel):
    """Fields the profile screen may change. Unset fields are left alone."""

    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[str] = None

    def to_patch(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)
