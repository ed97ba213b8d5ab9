"""
Sign-up flow.

Orchestrates the sign-up screen: form checks, pending sign-up creation,
email-code verification, profile row creation and session activation.
"""

import logging

from idsync.modules.profiles.exceptions import ProfileAlreadyExistsError
from idsync.modules.profiles.models import ProfileCreate
from idsync.modules.profiles.repository import ProfileRepository
from idsync.modules.store.exceptions import StoreError
from idsync.modules.validation.models import ValidationState
from idsync.modules.validation.rules import normalize_username

from .exceptions import IdentityProviderError, SignupValidationError
from .interfaces import IIdentityProvider
from .models import SignupForm, VerificationResult, VerificationStatus

logger = logging.getLogger(__name__)

MSG_VERIFICATION_FAILED = "Verification failed. Please try again."


class SignupService:
    """Drives a sign-up from form submission to an active session."""

    def __init__(self, identity_provider: IIdentityProvider, profiles: ProfileRepository):
        self._idp = identity_provider
        self._profiles = profiles

    async def start(self, form: SignupForm, username_state: ValidationState) -> str:
        """
        Validate the form and create a pending sign-up.

        The live username verdict must be VALID and must belong to the
        username being submitted.

        Returns:
            The pending sign-up ID, used with verify()

        Raises:
            SignupValidationError: If a field is missing or the username is not usable
            IdentityProviderError: If the provider rejects the sign-up
        """
        form = form.normalized()

        if not form.username:
            raise SignupValidationError("Username is required", field="username")
        if (
            not username_state.is_valid
            or normalize_username(username_state.input_value) != form.username
        ):
            raise SignupValidationError("Please choose a valid username", field="username")
        if not form.first_name:
            raise SignupValidationError("First name is required", field="first_name")
        if not form.last_name:
            raise SignupValidationError("Last name is required", field="last_name")
        if not form.email:
            raise SignupValidationError("Email is required", field="email")
        if not form.password.strip():
            raise SignupValidationError("Password is required", field="password")

        return await self._idp.create_pending_signup(form)

    async def verify(
        self,
        pending_signup_id: str,
        code: str,
        form: SignupForm,
    ) -> VerificationResult:
        """
        Verify the emailed code and finish the sign-up.

        On success the profile row is created with the chosen username and
        the new session becomes active. A profile that already exists, or a
        store failure, does not block sign-in; the credential synchronizer
        fills in a missing row once the session is up.
        """
        try:
            result = await self._idp.verify_code(pending_signup_id, code)
        except IdentityProviderError as e:
            return VerificationResult(status=VerificationStatus.FAILED, message=e.message)

        if not result.is_complete or not result.created_identity_id:
            return result.model_copy(
                update={"status": VerificationStatus.FAILED, "message": MSG_VERIFICATION_FAILED}
            )

        form = form.normalized()
        try:
            await self._profiles.create(
                ProfileCreate(
                    clerk_id=result.created_identity_id,
                    username=form.username,
                    first_name=form.first_name,
                    last_name=form.last_name,
                    email=form.email,
                )
            )
        except ProfileAlreadyExistsError:
            logger.info(f"Profile for {result.created_identity_id} already exists")
        except StoreError as e:
            logger.warning(
                f"Could not create profile for {result.created_identity_id}: {e.message}"
            )

        if result.created_session_id:
            await self._idp.establish_session(result.created_session_id)
        return result
