"""Identity provider webhook routes."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.identity import get_webhook_verifier
from api.v1.dependencies import get_identity_webhook_service
from api.v1.schemas.common import WebhookResponse
from domain.services.identity_webhook_service import IdentityWebhookService
from infrastructure.auth.clerk_client import identity_from_clerk_user
from infrastructure.auth.provider import IWebhookVerifier

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post(
    "/clerk",
    response_model=WebhookResponse,
    summary="Receive Clerk user events",
    responses={
        400: {"description": "Invalid signature"},
    },
)
async def clerk_webhook(
    request: Request,
    verifier: IWebhookVerifier = Depends(get_webhook_verifier),
    service: IdentityWebhookService = Depends(get_identity_webhook_service),
) -> WebhookResponse:
    """
    Apply ``user.created`` / ``user.updated`` events to profiles.

    Other event types are acknowledged and ignored so the sender does not
    retry them.
    """
    body = await request.body()
    event = verifier.verify(body, request.headers)

    event_type = str(event.get("type") or "")
    identity = identity_from_clerk_user(event.get("data") or {})

    outcome = await service.handle_event(event_type, identity)
    return WebhookResponse(ignored=outcome.ignored)
