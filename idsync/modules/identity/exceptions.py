"""
Identity module exceptions.
"""

from typing import Any, Optional

from idsync.shared.exceptions import ExternalServiceError, ValidationError


class IdentityProviderError(ExternalServiceError):
    """Raised when a call to the identity provider fails."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        provider_code: Optional[str] = None,
    ):
        super().__init__(
            message,
            service="clerk",
            code="IDENTITY_PROVIDER_ERROR",
            details={"status_code": status_code, "provider_code": provider_code},
        )
        self.status_code = status_code
        self.provider_code = provider_code

    @classmethod
    def from_payload(
        cls,
        payload: dict[str, Any],
        status_code: int,
    ) -> "IdentityProviderError":
        """Build from a Clerk error body (``{"errors": [{...}]}``)."""
        errors = payload.get("errors") or [{}]
        first = errors[0]
        message = (
            first.get("long_message")
            or first.get("message")
            or f"Identity provider request failed with status {status_code}"
        )
        return cls(message, status_code=status_code, provider_code=first.get("code"))


class SignupValidationError(ValidationError):
    """Raised when the sign-up form is incomplete or the username is not usable."""

    def __init__(self, message: str, field: str):
        super().__init__(
            message,
            code="INVALID_SIGNUP",
            details={"field": field},
        )
        self.field = field
