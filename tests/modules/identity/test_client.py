"""Tests for the Clerk Frontend API client."""

from urllib.parse import parse_qs

import httpx
import pytest

from idsync.modules.identity.client import (
    ClerkIdentityProvider,
    get_identity_provider,
    reset_identity_provider,
)
from idsync.modules.identity.exceptions import IdentityProviderError
from idsync.modules.identity.interfaces import IIdentityProvider
from idsync.modules.identity.models import SignupForm, VerificationStatus


class RecordingTransport:
    """Mock transport that replays canned responses and records requests."""

    def __init__(self, *responses: httpx.Response):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses.pop(0)


def make_provider(transport: RecordingTransport, client_token: str = "client-token") -> ClerkIdentityProvider:
    http = httpx.AsyncClient(transport=httpx.MockTransport(transport))
    return ClerkIdentityProvider("clerk.example.com", client_token=client_token, http_client=http)


def form_body(request: httpx.Request) -> dict[str, str]:
    return {key: values[0] for key, values in parse_qs(request.content.decode()).items()}


class TestAcquireCredential:
    @pytest.mark.asyncio
    async def test_returns_template_token(self):
        """Should POST to the session token endpoint for the template."""
        transport = RecordingTransport(httpx.Response(200, json={"object": "token", "jwt": "eyJ.token"}))
        provider = make_provider(transport)

        token = await provider.acquire_credential("sess_123", "supabase")

        assert token == "eyJ.token"
        request = transport.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/v1/client/sessions/sess_123/tokens/supabase"
        assert request.url.host == "clerk.example.com"
        assert request.url.params["_is_native"] == "true"
        assert request.headers["authorization"] == "client-token"

    @pytest.mark.asyncio
    async def test_missing_jwt_returns_none(self):
        transport = RecordingTransport(httpx.Response(200, json={"object": "token", "jwt": ""}))
        provider = make_provider(transport)

        assert await provider.acquire_credential("sess_123", "supabase") is None

    @pytest.mark.asyncio
    async def test_error_body_raises(self):
        """Should surface Clerk's long_message and code."""
        transport = RecordingTransport(
            httpx.Response(
                404,
                json={
                    "errors": [
                        {
                            "code": "resource_not_found",
                            "message": "not found",
                            "long_message": "No JWT template exists with name: supabase",
                        }
                    ]
                },
            )
        )
        provider = make_provider(transport)

        with pytest.raises(IdentityProviderError) as exc_info:
            await provider.acquire_credential("sess_123", "supabase")

        assert exc_info.value.message == "No JWT template exists with name: supabase"
        assert exc_info.value.status_code == 404
        assert exc_info.value.provider_code == "resource_not_found"
        assert exc_info.value.service == "clerk"

    @pytest.mark.asyncio
    async def test_non_json_error_raises(self):
        transport = RecordingTransport(httpx.Response(502, text="Bad Gateway"))
        provider = make_provider(transport)

        with pytest.raises(IdentityProviderError) as exc_info:
            await provider.acquire_credential("sess_123", "supabase")

        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        def fail(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        http = httpx.AsyncClient(transport=httpx.MockTransport(fail))
        provider = ClerkIdentityProvider("https://clerk.example.com", http_client=http)

        with pytest.raises(IdentityProviderError):
            await provider.acquire_credential("sess_123", "supabase")


class TestClientToken:
    @pytest.mark.asyncio
    async def test_rotated_token_used_on_next_request(self):
        """A token in the Authorization response header replaces the old one."""
        transport = RecordingTransport(
            httpx.Response(200, json={"jwt": "a"}, headers={"Authorization": "rotated-token"}),
            httpx.Response(200, json={"jwt": "b"}),
        )
        provider = make_provider(transport)

        await provider.acquire_credential("sess_123", "supabase")
        await provider.acquire_credential("sess_123", "supabase")

        assert provider.client_token == "rotated-token"
        assert transport.requests[1].headers["authorization"] == "rotated-token"

    @pytest.mark.asyncio
    async def test_no_token_sends_no_authorization(self):
        transport = RecordingTransport(httpx.Response(200, json={"jwt": "a"}))
        http = httpx.AsyncClient(transport=httpx.MockTransport(transport))
        provider = ClerkIdentityProvider("clerk.example.com/", http_client=http)

        await provider.acquire_credential("sess_123", "supabase")

        assert "authorization" not in transport.requests[0].headers
        assert transport.requests[0].url.path == "/v1/client/sessions/sess_123/tokens/supabase"


class TestSignUp:
    @pytest.mark.asyncio
    async def test_create_pending_signup_prepares_email_code(self):
        transport = RecordingTransport(
            httpx.Response(200, json={"response": {"id": "sua_1", "status": "missing_requirements"}}),
            httpx.Response(200, json={"response": {"id": "sua_1"}}),
        )
        provider = make_provider(transport)
        form = SignupForm(
            username="cool_fox",
            first_name="Ada",
            last_name="Lovelace",
            email="ada@example.com",
            password="hunter22",
        )

        signup_id = await provider.create_pending_signup(form)

        assert signup_id == "sua_1"
        create, prepare = transport.requests
        assert create.url.path == "/v1/client/sign_ups"
        assert form_body(create) == {
            "username": "cool_fox",
            "first_name": "Ada",
            "last_name": "Lovelace",
            "email_address": "ada@example.com",
            "password": "hunter22",
        }
        assert prepare.url.path == "/v1/client/sign_ups/sua_1/prepare_verification"
        assert form_body(prepare) == {"strategy": "email_code"}

    @pytest.mark.asyncio
    async def test_verify_code_complete(self):
        transport = RecordingTransport(
            httpx.Response(
                200,
                json={
                    "response": {
                        "id": "sua_1",
                        "status": "complete",
                        "created_user_id": "user_new",
                        "created_session_id": "sess_new",
                    }
                },
            )
        )
        provider = make_provider(transport)

        result = await provider.verify_code("sua_1", "424242")

        assert result.status == VerificationStatus.COMPLETE
        assert result.created_identity_id == "user_new"
        assert result.created_session_id == "sess_new"
        assert transport.requests[0].url.path == "/v1/client/sign_ups/sua_1/attempt_verification"
        assert form_body(transport.requests[0]) == {"strategy": "email_code", "code": "424242"}

    @pytest.mark.asyncio
    async def test_verify_code_incomplete(self):
        transport = RecordingTransport(
            httpx.Response(200, json={"response": {"id": "sua_1", "status": "missing_requirements"}})
        )
        provider = make_provider(transport)

        result = await provider.verify_code("sua_1", "424242")

        assert result.status == VerificationStatus.FAILED
        assert result.created_identity_id is None

    @pytest.mark.asyncio
    async def test_establish_session(self):
        transport = RecordingTransport(httpx.Response(200, json={"response": {"id": "sess_new"}}))
        provider = make_provider(transport)

        await provider.establish_session("sess_new")

        assert transport.requests[0].url.path == "/v1/client/sessions/sess_new/touch"


class TestGetIdentity:
    @pytest.mark.asyncio
    async def test_maps_session_user(self):
        transport = RecordingTransport(
            httpx.Response(
                200,
                json={
                    "response": {
                        "sessions": [
                            {
                                "id": "sess_123",
                                "user": {
                                    "id": "user_123",
                                    "first_name": "Ada",
                                    "last_name": "Lovelace",
                                    "username": "ada",
                                    "primary_email_address_id": "idn_2",
                                    "email_addresses": [
                                        {"id": "idn_1", "email_address": "old@example.com"},
                                        {"id": "idn_2", "email_address": "ada@example.com"},
                                    ],
                                },
                            }
                        ]
                    }
                },
            )
        )
        provider = make_provider(transport)

        identity = await provider.get_identity("sess_123")

        assert identity is not None
        assert identity.subject_id == "user_123"
        assert identity.session_id == "sess_123"
        assert identity.email == "ada@example.com"
        assert identity.username == "ada"
        assert transport.requests[0].method == "GET"
        assert transport.requests[0].url.path == "/v1/client"

    @pytest.mark.asyncio
    async def test_unknown_session(self):
        transport = RecordingTransport(httpx.Response(200, json={"response": {"sessions": []}}))
        provider = make_provider(transport)

        assert await provider.get_identity("sess_missing") is None

    @pytest.mark.asyncio
    async def test_signed_out_client(self):
        transport = RecordingTransport(httpx.Response(200, json={"response": None}))
        provider = make_provider(transport)

        assert await provider.get_identity("sess_123") is None


class TestSingleton:
    def test_missing_configuration(self):
        with pytest.raises(RuntimeError, match="CLERK_FRONTEND_API"):
            get_identity_provider()

    @pytest.mark.asyncio
    async def test_configured_provider_is_cached(self, monkeypatch):
        monkeypatch.setenv("CLERK_FRONTEND_API", "clerk.example.com")
        monkeypatch.setenv("CLERK_CLIENT_TOKEN", "client-token")

        provider = get_identity_provider()

        assert isinstance(provider, IIdentityProvider)
        assert provider is get_identity_provider()
        assert provider.client_token == "client-token"

        await provider.aclose()
        reset_identity_provider()
        fresh = get_identity_provider()
        assert fresh is not provider
        await fresh.aclose()
