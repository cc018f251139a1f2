"""Profile ensure/sync strategies run on a user's first touch."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from sqlalchemy.exc import IntegrityError

from core.exceptions import AuthenticationError, HandleTakenError
from domain.entities.identity import Identity
from domain.entities.profile import (
    DEFAULT_DISPLAY_NAME,
    DEFAULT_TIMEZONE,
    Profile,
)
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.handle_service import (
    HandleResolver,
    default_handle,
    generated_handle,
    looks_generated,
    normalize_handle,
)

logger = logging.getLogger(__name__)

MAX_INSERT_ATTEMPTS = 3


@dataclass(frozen=True, slots=True)
class EnsureResult:
    """Outcome of an ensure call."""

    created: bool
    synced: bool
    handle: str


class IEnsureStrategy(Protocol):
    """Make sure the caller has a profile. Calling it twice is a no-op the second time."""

    async def ensure(self, identity: Identity) -> EnsureResult:
        ...


def is_unique_violation(exc: IntegrityError) -> bool:
    """True for unique/primary-key violations, False for NOT NULL, FK, CHECK..."""
    orig = str(exc.orig).lower() if exc.orig else ""
    return "unique" in orig or "duplicate" in orig


class _EnsureBase:
    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def _insert(self, uow: IUnitOfWork, profile: Profile, base: str) -> EnsureResult:
        """Insert the profile, treating unique violations as the collision signal.

        A violation means either a concurrent ensure already created this
        identity's row, or another profile grabbed the handle between the
        existence check and the insert. The first ends the call, the second
        gets a freshly resolved handle.
        """
        resolver = HandleResolver(uow.profiles.handle_exists)

        for _ in range(MAX_INSERT_ATTEMPTS):
            try:
                created = await uow.profiles.create(profile)
                await uow.commit()
            except IntegrityError as exc:
                await uow.rollback()
                if not is_unique_violation(exc):
                    raise

                existing = await uow.profiles.get(profile.id)
                if existing:
                    logger.debug(
                        "Profile already created (race condition) for user %s",
                        profile.id,
                    )
                    return EnsureResult(created=False, synced=False, handle=existing.handle)

                logger.info("Handle %s was taken during insert, resolving again", profile.handle)
                profile.handle = await resolver.resolve(base)
                continue

            logger.info("Created profile %s for user %s", created.handle, created.id)
            return EnsureResult(created=True, synced=False, handle=created.handle)

        raise HandleTakenError(base)


class HintedSyncEnsure(_EnsureBase):
    """Create the profile from identity hints, or adopt the username later.

    A profile whose handle still looks machine-assigned is moved to a handle
    derived from the identity's username once one is known. A handle the user
    picked is never overwritten.
    """

    async def ensure(self, identity: Identity) -> EnsureResult:
        if not identity.id:
            raise AuthenticationError()

        raw_handle = (
            identity.username
            or identity.email_local_part
            or f"player-{identity.id.removeprefix('user_')[:8]}"
        )
        base = normalize_handle(raw_handle) or generated_handle(6)
        display_name = (
            identity.full_name
            or identity.username
            or identity.email_local_part
            or DEFAULT_DISPLAY_NAME
        )

        async with self._uow_factory() as uow:
            existing = await uow.profiles.get(identity.id)
            if existing:
                return await self._sync(uow, existing, identity, display_name)

            resolver = HandleResolver(uow.profiles.handle_exists)
            handle = await resolver.resolve(base)
            profile = Profile(
                id=identity.id,
                handle=handle,
                display_name=display_name,
                avatar_url=identity.avatar_url,
            )
            return await self._insert(uow, profile, base)

    async def _sync(
        self,
        uow: IUnitOfWork,
        profile: Profile,
        identity: Identity,
        display_name: str,
    ) -> EnsureResult:
        current = profile.handle
        desired_base = normalize_handle(identity.username) if identity.username else ""

        if not desired_base or desired_base == current or not looks_generated(current):
            return EnsureResult(created=False, synced=False, handle=current)

        resolver = HandleResolver(uow.profiles.handle_exists)
        profile.handle = await resolver.resolve(desired_base)
        profile.display_name = display_name
        profile.avatar_url = identity.avatar_url
        profile.updated_at = datetime.utcnow()

        try:
            updated = await uow.profiles.update(profile)
            await uow.commit()
        except IntegrityError as exc:
            await uow.rollback()
            if not is_unique_violation(exc):
                raise
            # Next ensure call tries again
            logger.info("Handle %s was taken during sync of user %s", profile.handle, profile.id)
            return EnsureResult(created=False, synced=False, handle=current)

        logger.info("Synced profile handle %s -> %s for user %s", current, updated.handle, updated.id)
        return EnsureResult(created=False, synced=True, handle=updated.handle)


class DeterministicEnsure(_EnsureBase):
    """Create a profile with an id-derived handle and fixed defaults; never sync."""

    async def ensure(self, identity: Identity) -> EnsureResult:
        if not identity.id:
            raise AuthenticationError()

        async with self._uow_factory() as uow:
            existing = await uow.profiles.get(identity.id)
            if existing:
                return EnsureResult(created=False, synced=False, handle=existing.handle)

            base = default_handle(identity.id)
            profile = Profile(
                id=identity.id,
                handle=base,
                display_name=DEFAULT_DISPLAY_NAME,
                timezone=DEFAULT_TIMEZONE,
            )
            return await self._insert(uow, profile, base)
