"""
Identity module.

Talks to the identity provider (Clerk): template tokens for the data
store, sign-up with email-code verification, and session activation.

Public API:
- IIdentityProvider: Interface for identity provider operations
- Identity, SignupForm, VerificationResult: Models
- IdentityProviderError, SignupValidationError: Exceptions
"""

from .interfaces import IIdentityProvider
from .models import Identity, SignupForm, VerificationResult, VerificationStatus
from .exceptions import IdentityProviderError, SignupValidationError

__all__ = [
    # Interface
    "IIdentityProvider",
    # Models
    "Identity",
    "SignupForm",
    "VerificationResult",
    "VerificationStatus",
    # Exceptions
    "IdentityProviderError",
    "SignupValidationError",
]
