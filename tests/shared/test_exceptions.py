"""Tests for shared/exceptions.py."""

from idsync.shared.exceptions import (
    AuthenticationError,
    ConflictError,
    ExternalServiceError,
    IdSyncError,
    NotFoundError,
    ValidationError,
)
from idsync.modules.identity.exceptions import IdentityProviderError
from idsync.modules.store.exceptions import DuplicateKeyError, RowNotFoundError, StoreError


class TestIdSyncError:
    def test_code_defaults_to_class_name(self):
        error = NotFoundError("missing")
        assert error.code == "NotFoundError"
        assert error.details == {}
        assert str(error) == "missing"

    def test_to_dict(self):
        error = ValidationError("bad input", code="BAD", details={"field": "username"})
        assert error.to_dict() == {
            "error": "BAD",
            "message": "bad input",
            "details": {"field": "username"},
        }

    def test_hierarchy(self):
        for cls in (NotFoundError, ValidationError, AuthenticationError, ConflictError):
            assert issubclass(cls, IdSyncError)


class TestExternalServiceError:
    def test_records_service(self):
        error = ExternalServiceError("down", service="supabase")
        assert error.service == "supabase"
        assert error.details["service"] == "supabase"

    def test_store_errors(self):
        assert RowNotFoundError("users").code == "PGRST116"
        assert DuplicateKeyError("users").code == "23505"
        error = StoreError("boom", table="users")
        assert error.code == "STORE_ERROR"
        assert error.details == {"table": "users", "service": "supabase"}

    def test_identity_provider_error_from_payload(self):
        error = IdentityProviderError.from_payload(
            {"errors": [{"code": "form_code_incorrect", "message": "Incorrect code"}]},
            422,
        )
        assert error.message == "Incorrect code"
        assert error.provider_code == "form_code_incorrect"
        assert error.details["status_code"] == 422

    def test_identity_provider_error_empty_payload(self):
        error = IdentityProviderError.from_payload({}, 500)
        assert error.message == "Identity provider request failed with status 500"
        assert error.service == "clerk"
