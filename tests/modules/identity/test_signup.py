"""Tests for the sign-up flow."""

import pytest
from unittest.mock import AsyncMock

from idsync.modules.identity.exceptions import IdentityProviderError, SignupValidationError
from idsync.modules.identity.models import SignupForm, VerificationResult, VerificationStatus
from idsync.modules.identity.signup import MSG_VERIFICATION_FAILED, SignupService
from idsync.modules.profiles.repository import ProfileRepository
from idsync.modules.store.exceptions import StoreError
from idsync.modules.validation.models import ValidationPhase, ValidationState
from idsync.modules.validation.service import UsernameValidator


def create_form(**overrides) -> SignupForm:
    """Helper to create a filled-in sign-up form."""
    fields = {
        "username": "Cool_Fox",
        "first_name": " Ada ",
        "last_name": "Lovelace",
        "email": " Ada@Example.com ",
        "password": "hunter22",
    }
    fields.update(overrides)
    return SignupForm(**fields)


def valid_state(value: str = "cool_fox") -> ValidationState:
    return ValidationState(input_value=value, phase=ValidationPhase.VALID)


@pytest.fixture
def service(provider, store) -> SignupService:
    return SignupService(provider, ProfileRepository(store, "users"))


class TestStart:
    @pytest.mark.asyncio
    async def test_creates_pending_signup_with_normalized_form(self, service, provider):
        """Should submit the trimmed, lowercased form."""
        pending_id = await service.start(create_form(), valid_state("Cool_Fox"))

        assert pending_id == "sua_1"
        submitted = provider.signups[0]
        assert submitted.username == "cool_fox"
        assert submitted.email == "ada@example.com"
        assert submitted.first_name == "Ada"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "state",
        [
            ValidationState(),
            ValidationState(input_value="cool_fox", phase=ValidationPhase.CHECKING),
            ValidationState(
                input_value="cool_fox",
                phase=ValidationPhase.INVALID,
                message="Username is already taken",
            ),
            ValidationState(input_value="other_name", phase=ValidationPhase.VALID),
        ],
    )
    async def test_rejects_unusable_username(self, service, provider, state):
        """The username verdict must be VALID for the submitted username."""
        with pytest.raises(SignupValidationError) as exc_info:
            await service.start(create_form(), state)

        assert exc_info.value.field == "username"
        assert provider.signups == []

    @pytest.mark.asyncio
    async def test_mixed_case_of_taken_username_cannot_sign_up(self, service, provider, store):
        """A differently cased copy of a stored username should block the sign-up."""
        store.seed("users", {"clerk_id": "user_9", "username": "cool_fox"})
        validator = UsernameValidator(store, debounce_seconds=0)
        validator.on_input_changed("Cool_Fox")
        state = await validator.settle()

        assert not state.is_valid
        with pytest.raises(SignupValidationError) as exc_info:
            await service.start(create_form(username="Cool_Fox"), state)

        assert exc_info.value.field == "username"
        assert provider.signups == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"username": "  "}, "username"),
            ({"first_name": ""}, "first_name"),
            ({"last_name": "  "}, "last_name"),
            ({"email": ""}, "email"),
            ({"password": "   "}, "password"),
        ],
    )
    async def test_required_fields(self, service, provider, overrides, field):
        with pytest.raises(SignupValidationError) as exc_info:
            await service.start(create_form(**overrides), valid_state())

        assert exc_info.value.field == field
        assert exc_info.value.code == "INVALID_SIGNUP"
        assert provider.signups == []


class TestVerify:
    @pytest.mark.asyncio
    async def test_complete_creates_profile_and_activates_session(self, service, provider, store):
        result = await service.verify("sua_1", "424242", create_form())

        assert result.is_complete
        assert provider.verify_calls == [("sua_1", "424242")]
        assert provider.established == ["sess_new"]

        rows = store.rows("users")
        assert len(rows) == 1
        assert rows[0]["clerk_id"] == "user_new"
        assert rows[0]["username"] == "cool_fox"
        assert rows[0]["email"] == "ada@example.com"

    @pytest.mark.asyncio
    async def test_provider_error_fails_with_its_message(self, service, provider, store):
        provider.fail_with = IdentityProviderError("Incorrect code", status_code=422)

        result = await service.verify("sua_1", "000000", create_form())

        assert result.status == VerificationStatus.FAILED
        assert result.message == "Incorrect code"
        assert store.rows("users") == []
        assert provider.established == []

    @pytest.mark.asyncio
    async def test_incomplete_fails_generically(self, service, provider, store):
        provider.verification = VerificationResult(status=VerificationStatus.FAILED)

        result = await service.verify("sua_1", "424242", create_form())

        assert result.status == VerificationStatus.FAILED
        assert result.message == MSG_VERIFICATION_FAILED
        assert store.rows("users") == []

    @pytest.mark.asyncio
    async def test_existing_profile_does_not_block(self, service, provider, store):
        store.seed("users", {"clerk_id": "user_new", "username": "cool_fox"})

        result = await service.verify("sua_1", "424242", create_form())

        assert result.is_complete
        assert provider.established == ["sess_new"]
        assert len(store.rows("users")) == 1

    @pytest.mark.asyncio
    async def test_store_failure_does_not_block(self, service, provider, store):
        store.insert = AsyncMock(side_effect=StoreError("insert failed"))

        result = await service.verify("sua_1", "424242", create_form())

        assert result.is_complete
        assert provider.established == ["sess_new"]
