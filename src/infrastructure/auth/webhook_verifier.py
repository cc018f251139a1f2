"""Signature verification for Clerk webhooks (delivered through Svix)."""

import json
import logging
from typing import Any, Mapping

from svix.webhooks import Webhook, WebhookVerificationError

from core.config import ConfigurationError, settings
from core.exceptions import SignatureInvalidError

logger = logging.getLogger(__name__)


class ClerkWebhookVerifier:
    """Verify ``svix-id`` / ``svix-timestamp`` / ``svix-signature`` headers."""

    def __init__(self, signing_secret: str = settings.clerk_webhook_signing_secret) -> None:
        if not signing_secret:
            raise ConfigurationError(
                "Missing required configuration: CLERK_WEBHOOK_SIGNING_SECRET"
            )
        self._webhook = Webhook(signing_secret)

    def verify(self, body: bytes, headers: Mapping[str, str]) -> dict[str, Any]:
        """Return the decoded event if the signature matches."""
        svix_headers = {
            name: headers.get(name, "")
            for name in ("svix-id", "svix-timestamp", "svix-signature")
        }
        try:
            self._webhook.verify(body, svix_headers)
        except WebhookVerificationError as exc:
            logger.warning(
                "Webhook signature verification failed (svix-id=%s): %s",
                svix_headers["svix-id"] or "missing",
                exc,
            )
            raise SignatureInvalidError() from exc

        try:
            event = json.loads(body)
        except ValueError as exc:
            raise SignatureInvalidError("Webhook payload is not valid JSON") from exc

        if not isinstance(event, dict):
            raise SignatureInvalidError("Webhook payload is not a JSON object")
        return event
