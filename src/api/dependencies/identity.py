"""Identity provider adapters for FastAPI dependencies."""

from functools import lru_cache

from infrastructure.auth.clerk_client import ClerkIdentityProvider
from infrastructure.auth.webhook_verifier import ClerkWebhookVerifier


@lru_cache
def get_identity_provider() -> ClerkIdentityProvider:
    """Get Clerk Backend API client."""
    return ClerkIdentityProvider()


@lru_cache
def get_webhook_verifier() -> ClerkWebhookVerifier:
    """Get Clerk webhook signature verifier."""
    return ClerkWebhookVerifier()
