"""
Identity provider interface.

The credential synchronizer and the sign-up flow depend on
IIdentityProvider, never on the Clerk client directly.
"""

from typing import Optional, Protocol, runtime_checkable

from .models import Identity, SignupForm, VerificationResult


@runtime_checkable
class IIdentityProvider(Protocol):
    """
    Contract for the external identity provider.

    Every call is asynchronous and may raise IdentityProviderError.
    """

    async def acquire_credential(self, session_id: str, template: str) -> Optional[str]:
        """
        Get a short-lived bearer token for a session.

        Args:
            session_id: Active provider session
            template: Token template name (e.g. "supabase")

        Returns:
            The token, or None if the provider issued none
        """
        ...

    async def create_pending_signup(self, form: SignupForm) -> str:
        """
        Create a sign-up awaiting email-code verification.

        Returns:
            The pending sign-up ID
        """
        ...

    async def verify_code(self, pending_signup_id: str, code: str) -> VerificationResult:
        """Attempt to complete a pending sign-up with an emailed code."""
        ...

    async def establish_session(self, session_id: str) -> None:
        """Make a session the active one for this client."""
        ...

    async def get_identity(self, session_id: str) -> Optional[Identity]:
        """Return the identity behind a session, or None if it is gone."""
        ...
