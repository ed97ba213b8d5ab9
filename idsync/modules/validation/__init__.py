"""
Username validation module.

Validates usernames as they are typed: local format rules first, then a
debounced availability lookup against the users table.

Public API:
- IValidationEngine: Interface consumed by forms
- UsernameValidator: Debounced, race-free implementation
- ValidationState / ValidationPhase: Verdict snapshots
- UsernameRules and the pure rule helpers
"""

from .interfaces import IValidationEngine, StateListener
from .models import ValidationPhase, ValidationState
from .rules import (
    UsernameRules,
    check_username_format,
    normalize_username,
    suggest_alternative_usernames,
    generate_random_username,
)
from .service import UsernameValidator
from .exceptions import UsernameFormatError

__all__ = [
    # Interface
    "IValidationEngine",
    "StateListener",
    # Models
    "ValidationPhase",
    "ValidationState",
    # Rules
    "UsernameRules",
    "check_username_format",
    "normalize_username",
    "suggest_alternative_usernames",
    "generate_random_username",
    # Implementation
    "UsernameValidator",
    # Exceptions
    "UsernameFormatError",
]
