"""
Clerk Frontend API client.

Implements IIdentityProvider the way a native (mobile) Clerk client does:
every request carries ``_is_native=true`` and the client token in the
Authorization header, and Clerk may rotate that token through the
``Authorization`` response header.

API docs: https://clerk.com/docs/reference/frontend-api
"""

import logging
from typing import Any, Optional

import httpx

from idsync.shared.config import get_settings

from .exceptions import IdentityProviderError
from .models import Identity, SignupForm, VerificationResult, VerificationStatus

logger = logging.getLogger(__name__)


class ClerkIdentityProvider:
    """Identity provider backed by Clerk's Frontend API."""

    DEFAULT_TIMEOUT_SECONDS = 30.0

    def __init__(
        self,
        frontend_api: str,
        client_token: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            frontend_api: Frontend API host (e.g. "clerk.example.com") or URL.
            client_token: Native client token from a previous sign-in.
            http_client: Client to send requests with. One is created
                         (and owned) if not given.
        """
        if not frontend_api.startswith(("http://", "https://")):
            frontend_api = f"https://{frontend_api}"
        self._base_url = frontend_api.rstrip("/")
        self._client_token = client_token or None
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=self.DEFAULT_TIMEOUT_SECONDS)

    @property
    def client_token(self) -> Optional[str]:
        return self._client_token

    async def acquire_credential(self, session_id: str, template: str) -> Optional[str]:
        payload = await self._request(
            "POST", f"/v1/client/sessions/{session_id}/tokens/{template}"
        )
        return payload.get("jwt") or None

    async def create_pending_signup(self, form: SignupForm) -> str:
        payload = await self._request(
            "POST",
            "/v1/client/sign_ups",
            data={
                "username": form.username,
                "first_name": form.first_name,
                "last_name": form.last_name,
                "email_address": form.email,
                "password": form.password,
            },
        )
        signup_id = self._unwrap(payload)["id"]

        await self._request(
            "POST",
            f"/v1/client/sign_ups/{signup_id}/prepare_verification",
            data={"strategy": "email_code"},
        )
        logger.debug(f"Created pending sign-up {signup_id}")
        return signup_id

    async def verify_code(self, pending_signup_id: str, code: str) -> VerificationResult:
        payload = await self._request(
            "POST",
            f"/v1/client/sign_ups/{pending_signup_id}/attempt_verification",
            data={"strategy": "email_code", "code": code},
        )
        signup = self._unwrap(payload)
        status = (
            VerificationStatus.COMPLETE
            if signup.get("status") == "complete"
            else VerificationStatus.FAILED
        )
        return VerificationResult(
            status=status,
            created_identity_id=signup.get("created_user_id"),
            created_session_id=signup.get("created_session_id"),
        )

    async def establish_session(self, session_id: str) -> None:
        await self._request("POST", f"/v1/client/sessions/{session_id}/touch")

    async def get_identity(self, session_id: str) -> Optional[Identity]:
        payload = await self._request("GET", "/v1/client")
        client = self._unwrap(payload) or {}
        for session in client.get("sessions", []):
            if session.get("id") == session_id and session.get("user"):
                return self._map_to_identity(session_id, session["user"])
        return None

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        data: Optional[dict[str, str]] = None,
    ) -> dict[str, Any]:
        headers = {}
        if self._client_token:
            headers["Authorization"] = self._client_token

        try:
            response = await self._http.request(
                method,
                f"{self._base_url}{path}",
                params={"_is_native": "true"},
                data=data,
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise IdentityProviderError(f"Request to identity provider failed: {e}")

        rotated = response.headers.get("authorization")
        if rotated:
            self._client_token = rotated

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if response.is_error:
            raise IdentityProviderError.from_payload(payload, response.status_code)
        return payload

    @staticmethod
    def _unwrap(payload: dict[str, Any]) -> dict[str, Any]:
        """Frontend API wraps resources as ``{"response": ..., "client": ...}``."""
        return payload.get("response", payload)

    @staticmethod
    def _map_to_identity(session_id: str, user: dict[str, Any]) -> Identity:
        email = None
        primary_id = user.get("primary_email_address_id")
        for address in user.get("email_addresses", []):
            if address.get("id") == primary_id:
                email = address.get("email_address")
                break

        return Identity(
            subject_id=user["id"],
            session_id=session_id,
            email=email,
            first_name=user.get("first_name"),
            last_name=user.get("last_name"),
            username=user.get("username"),
        )


# Module-level instance getter
_provider_instance: Optional[ClerkIdentityProvider] = None


def get_identity_provider() -> ClerkIdentityProvider:
    """Get the Clerk identity provider singleton."""
    global _provider_instance
    if _provider_instance is None:
        settings = get_settings()
        if not settings.clerk_frontend_api:
            raise RuntimeError(
                "Clerk configuration missing. "
                "Set the CLERK_FRONTEND_API environment variable."
            )
        _provider_instance = ClerkIdentityProvider(
            settings.clerk_frontend_api,
            client_token=settings.clerk_client_token,
        )
    return _provider_instance


def reset_identity_provider() -> None:
    """Reset the identity provider singleton (for testing)."""
    global _provider_instance
    _provider_instance = None
