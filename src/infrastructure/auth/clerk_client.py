"""Clerk Backend API client used to fetch profile hints."""

import logging
from typing import Any, Mapping

import httpx

from core.config import ConfigurationError, settings
from core.exceptions import IdentityProviderError
from domain.entities.identity import Identity

logger = logging.getLogger(__name__)


def identity_from_clerk_user(data: Mapping[str, Any]) -> Identity:
    """Map a Clerk ``User`` object (API response or webhook ``data``) to an Identity."""
    email = None
    primary_id = data.get("primary_email_address_id")
    addresses = data.get("email_addresses") or []
    for address in addresses:
        if address.get("id") == primary_id:
            email = address.get("email_address")
            break
    if email is None and addresses:
        email = addresses[0].get("email_address")

    return Identity(
        id=data.get("id") or "",
        username=data.get("username") or None,
        email=email or None,
        first_name=data.get("first_name") or None,
        last_name=data.get("last_name") or None,
        avatar_url=data.get("image_url") or None,
    )


class ClerkIdentityProvider:
    """Fetch users from the Clerk Backend API."""

    def __init__(
        self,
        secret_key: str = settings.clerk_secret_key,
        api_url: str = settings.clerk_api_url,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not secret_key:
            raise ConfigurationError("Missing required configuration: CLERK_SECRET_KEY")
        self._secret_key = secret_key
        self._api_url = api_url.rstrip("/")
        self._transport = transport

    async def get_identity(self, user_id: str) -> Identity:
        """Fetch a user and map it to an Identity with profile hints."""
        url = f"{self._api_url}/users/{user_id}"
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(
                    url,
                    headers={"Authorization": f"Bearer {self._secret_key}"},
                    timeout=10.0,
                )
        except httpx.HTTPError as exc:
            logger.exception("Clerk request failed for user %s", user_id)
            raise IdentityProviderError(f"Identity provider unreachable: {exc}") from exc

        if response.status_code != 200:
            logger.warning(
                "Clerk returned %d for user %s", response.status_code, user_id
            )
            raise IdentityProviderError(
                "Identity provider returned an error",
                upstream_status=response.status_code,
            )

        return identity_from_clerk_user(response.json())
