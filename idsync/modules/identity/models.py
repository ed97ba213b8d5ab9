"""
Identity module data models.

These models describe what the identity provider (Clerk) hands back to
the client: the signed-in identity and the state of a sign-up.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Identity(BaseModel):
    """
    A signed-in identity.

    subject_id is the provider's stable user ID and the key of the
    user's profile row.
    """

    subject_id: str = Field(..., description="Identity provider user ID")
    session_id: str = Field(..., description="Active provider session ID")
    email: Optional[str] = Field(None, description="Primary email address")
    first_name: Optional[str] = Field(None, description="First name")
    last_name: Optional[str] = Field(None, description="Last name")
    username: Optional[str] = Field(None, description="Username, if set")

    model_config = {"frozen": True}


class SignupForm(BaseModel):
    """Fields collected by the sign-up screen."""

    username: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    password: str = ""

    def normalized(self) -> "SignupForm":
        """Lowercase and trim username and email, trim names."""
        return self.model_copy(
            update={
                "username": self.username.strip().lower(),
                "first_name": self.first_name.strip(),
                "last_name": self.last_name.strip(),
                "email": self.email.strip().lower(),
            }
        )


class VerificationStatus(str, Enum):
    """Outcome of an email-code verification attempt."""

    COMPLETE = "complete"
    FAILED = "failed"


class VerificationResult(BaseModel):
    """Result of verifying a pending sign-up."""

    status: VerificationStatus
    created_identity_id: Optional[str] = Field(
        None, description="User ID created by a complete sign-up"
    )
    created_session_id: Optional[str] = Field(
        None, description="Session created by a complete sign-up"
    )
    message: Optional[str] = Field(None, description="User-facing failure reason")

    @property
    def is_complete(self) -> bool:
        return self.status == VerificationStatus.COMPLETE
