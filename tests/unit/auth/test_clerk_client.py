"""Unit tests for the Clerk Backend API client."""

import httpx
import pytest

from core.config import ConfigurationError
from core.exceptions import ErrorCode, IdentityProviderError
from infrastructure.auth.clerk_client import ClerkIdentityProvider, identity_from_clerk_user

API_URL = "https://api.clerk.test/v1"

CLERK_USER = {
    "id": "user_2abc",
    "object": "user",
    "username": "EmiStar",
    "first_name": "Emi",
    "last_name": "Star",
    "image_url": "https://img.clerk.com/emi.png",
    "primary_email_address_id": "idn_2",
    "email_addresses": [
        {"id": "idn_1", "email_address": "old@example.com"},
        {"id": "idn_2", "email_address": "emi@example.com"},
    ],
}


def _provider(handler) -> ClerkIdentityProvider:
    return ClerkIdentityProvider(
        secret_key="sk_test_123",
        api_url=API_URL,
        transport=httpx.MockTransport(handler),
    )


class TestIdentityFromClerkUser:
    def test_maps_all_hints(self):
        identity = identity_from_clerk_user(CLERK_USER)

        assert identity.id == "user_2abc"
        assert identity.username == "EmiStar"
        assert identity.email == "emi@example.com"
        assert identity.first_name == "Emi"
        assert identity.last_name == "Star"
        assert identity.avatar_url == "https://img.clerk.com/emi.png"

    def test_falls_back_to_first_email(self):
        data = {**CLERK_USER, "primary_email_address_id": None}

        assert identity_from_clerk_user(data).email == "old@example.com"

    def test_missing_fields_become_none(self):
        identity = identity_from_clerk_user(
            {"id": "user_2abc", "username": "", "email_addresses": []}
        )

        assert identity.username is None
        assert identity.email is None
        assert identity.full_name == ""

    def test_missing_id_is_empty(self):
        assert identity_from_clerk_user({}).id == ""


class TestClerkIdentityProvider:
    @pytest.mark.asyncio
    async def test_fetches_user_with_secret_key(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=CLERK_USER)

        identity = await _provider(handler).get_identity("user_2abc")

        assert identity.username == "EmiStar"
        assert str(seen[0].url) == f"{API_URL}/users/user_2abc"
        assert seen[0].headers["Authorization"] == "Bearer sk_test_123"

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"errors": [{"code": "resource_not_found"}]})

        with pytest.raises(IdentityProviderError) as exc_info:
            await _provider(handler).get_identity("user_gone")

        assert exc_info.value.status_code == 502
        assert exc_info.value.error_code == ErrorCode.IDENTITY_PROVIDER_ERROR
        assert exc_info.value.details == {"upstream_status": 404}

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(IdentityProviderError):
            await _provider(handler).get_identity("user_2abc")

    def test_requires_secret_key(self):
        with pytest.raises(ConfigurationError):
            ClerkIdentityProvider(secret_key="", api_url=API_URL)
