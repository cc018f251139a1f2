"""Apply identity-change notifications from the identity provider to profiles."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from core.exceptions import ValidationError
from domain.entities.identity import Identity
from domain.entities.profile import Profile
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.handle_service import (
    HandleResolver,
    default_handle,
    is_variant_of,
    normalize_handle,
)

logger = logging.getLogger(__name__)

HANDLED_EVENT_TYPES = frozenset({"user.created", "user.updated"})


@dataclass(frozen=True, slots=True)
class WebhookOutcome:
    """What a webhook event did to the profile store."""

    ignored: bool
    created: bool = False
    handle: str | None = None


class IdentityWebhookService:
    """Update-or-insert a profile from ``user.created`` / ``user.updated`` events."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def handle_event(self, event_type: str, identity: Identity) -> WebhookOutcome:
        if event_type not in HANDLED_EVENT_TYPES:
            logger.info("Ignoring identity webhook event %s", event_type)
            return WebhookOutcome(ignored=True)

        if not identity.id:
            raise ValidationError("Webhook payload has no user id", field="data.id")

        username = (identity.username or "").strip()
        base = normalize_handle(username) or default_handle(identity.id)

        async with self._uow_factory() as uow:
            existing = await uow.profiles.get(identity.id)
            handle = await self._choose_handle(uow, base, identity.id, existing)
            display_name = identity.full_name or username or handle

            if existing:
                existing.handle = handle
                existing.display_name = display_name
                existing.avatar_url = identity.avatar_url
                existing.updated_at = datetime.utcnow()
                await uow.profiles.update(existing)
                created = False
            else:
                await uow.profiles.create(
                    Profile(
                        id=identity.id,
                        handle=handle,
                        display_name=display_name,
                        avatar_url=identity.avatar_url,
                    )
                )
                created = True

            await uow.commit()

        logger.info(
            "Applied %s for user %s (handle=%s, created=%s)",
            event_type,
            identity.id,
            handle,
            created,
        )
        return WebhookOutcome(ignored=False, created=created, handle=handle)

    async def _choose_handle(
        self, uow: IUnitOfWork, base: str, owner_id: str, existing: Profile | None
    ) -> str:
        """Keep ``base`` unless another profile holds it.

        A stored handle that is already ``base`` with a suffix stays as is, so
        repeated events for the same username leave the handle unchanged.
        """
        if existing and existing.handle == base:
            return base

        holder = await uow.profiles.get_by_handle(base)
        if holder is None or holder.id == owner_id:
            return base
        if existing and is_variant_of(existing.handle, base):
            return existing.handle
        return await HandleResolver(uow.profiles.handle_exists).resolve(base)
