"""
Validation module data models.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ValidationPhase(str, Enum):
    """Stage of a username verdict."""

    IDLE = "idle"
    CHECKING = "checking"
    VALID = "valid"
    INVALID = "invalid"


class ValidationState(BaseModel):
    """
    Verdict for one in-progress input value.

    Snapshots are immutable; every transition produces a new instance.
    """

    input_value: str = Field("", description="Raw candidate being evaluated")
    phase: ValidationPhase = Field(ValidationPhase.IDLE, description="Current stage")
    message: Optional[str] = Field(None, description="Reason or success note")
    suggestions: tuple[str, ...] = Field(
        default=(),
        description="Alternative usernames offered when the candidate is taken",
    )

    model_config = {"frozen": True}

    @property
    def is_valid(self) -> bool:
        return self.phase == ValidationPhase.VALID

    @property
    def is_checking(self) -> bool:
        return self.phase == ValidationPhase.CHECKING
