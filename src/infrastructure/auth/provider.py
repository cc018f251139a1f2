"""Authentication and identity provider protocols."""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol

from domain.entities.identity import Identity


@dataclass
class TokenUser:
    """Represents a user extracted from an auth token."""

    id: str
    email: Optional[str] = None
    username: Optional[str] = None
    session_id: Optional[str] = None


class IAuthProvider(Protocol):
    """Protocol for authentication providers."""

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate an authentication token.

        Args:
            token: The bearer token to validate

        Returns:
            TokenUser if valid, None if invalid
        """
        ...

    def create_token(self, user: TokenUser) -> str:
        """
        Create an authentication token for a user.

        Args:
            user: The user to create a token for

        Returns:
            The generated token string
        """
        ...


class IIdentityProvider(Protocol):
    """Protocol for fetching profile hints about a user."""

    async def get_identity(self, user_id: str) -> Identity:
        """
        Fetch the identity and its profile hints.

        Raises:
            IdentityProviderError: If the provider cannot be reached
        """
        ...


class IWebhookVerifier(Protocol):
    """Protocol for verifying signed identity-change notifications."""

    def verify(self, body: bytes, headers: Mapping[str, str]) -> dict[str, Any]:
        """
        Verify the signature and return the decoded event.

        Raises:
            SignatureInvalidError: If the signature does not match
        """
        ...
