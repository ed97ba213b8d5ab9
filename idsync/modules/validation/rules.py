"""
Username format rules.

Everything here is pure and synchronous; nothing touches the network.
The rules run in a fixed order and the first failure wins.
"""

import random
import re
from typing import Optional

from pydantic import BaseModel, Field

from idsync.shared.config import Settings, get_settings

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")

MSG_TOO_SHORT = "Username must be at least {min_length} characters"
MSG_TOO_LONG = "Username must be no more than {max_length} characters"
MSG_DISALLOWED = "Only letters, numbers, and underscores allowed"
MSG_LEADING_DIGIT = "Username cannot start with a number"
MSG_RESERVED = "This username is reserved"

_ADJECTIVES = ["happy", "cool", "smart", "quick", "bright", "swift", "bold", "wise"]
_NOUNS = ["panda", "eagle", "tiger", "wolf", "fox", "bear", "lion", "hawk"]


class UsernameRules(BaseModel):
    """Length bounds and reserved words for usernames."""

    min_length: int = Field(3, ge=1)
    max_length: int = Field(30, ge=1)
    reserved: frozenset[str] = Field(default_factory=frozenset)

    model_config = {"frozen": True}

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "UsernameRules":
        settings = settings or get_settings()
        return cls(
            min_length=settings.username_min_length,
            max_length=settings.username_max_length,
            reserved=frozenset(word.lower() for word in settings.reserved_usernames),
        )


def check_username_format(value: str, rules: UsernameRules) -> Optional[str]:
    """
    Run the format rules against a non-empty candidate.

    Returns:
        The message of the first failing rule, or None if all pass.
    """
    if len(value) < rules.min_length:
        return MSG_TOO_SHORT.format(min_length=rules.min_length)
    if len(value) > rules.max_length:
        return MSG_TOO_LONG.format(max_length=rules.max_length)
    if not USERNAME_PATTERN.match(value):
        return MSG_DISALLOWED
    if value[0].isdigit():
        return MSG_LEADING_DIGIT
    if value.lower() in rules.reserved:
        return MSG_RESERVED
    return None


def normalize_username(value: str) -> str:
    """Normalize as the sign-up form does on every keystroke."""
    return value.strip().lower()


def suggest_alternative_usernames(base: str, count: int = 3) -> list[str]:
    """Suggest alternatives to a taken username by appending a number."""
    base = normalize_username(base)
    return [f"{base}{random.randint(0, 998)}" for _ in range(count)]


def generate_random_username() -> str:
    """Generate a username like ``swift_fox42`` that passes the default rules."""
    adjective = random.choice(_ADJECTIVES)
    noun = random.choice(_NOUNS)
    return f"{adjective}_{noun}{random.randint(0, 998)}"
