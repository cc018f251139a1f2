"""Profile service layer: owner reads/updates and public lookup."""

from collections.abc import Callable
from datetime import datetime
from typing import Literal

from core.exceptions import AuthenticationError, ProfileNotFoundError, ValidationError
from domain.entities.profile import DEFAULT_RANK, Profile, ProfileDetails, ProfileUpdate
from domain.repositories.unit_of_work import IUnitOfWork

EmptyRankPolicy = Literal["default", "reject"]


class ProfileService:
    """Service layer for Profile business logic."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        empty_rank_policy: EmptyRankPolicy = "default",
    ) -> None:
        self._uow_factory = uow_factory
        self._empty_rank_policy = empty_rank_policy

    async def get_own(self, user_id: str) -> ProfileDetails:
        """Get the caller's profile and platforms.

        A signed-in user without a row yields ``profile=None``; the ensure
        call normally creates it right after sign-in.
        """
        if not user_id:
            raise AuthenticationError()

        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(user_id)
            if not profile:
                return ProfileDetails(profile=None, platforms=[])
            platforms = await uow.profiles.get_platforms(user_id)
            return ProfileDetails(profile=profile, platforms=platforms)

    async def get_by_handle(self, handle: str) -> ProfileDetails:
        """Get a profile by handle, case-insensitively."""
        handle = (handle or "").strip().lower()
        if not handle:
            raise ValidationError("Missing handle.", field="handle")

        async with self._uow_factory() as uow:
            profile = await uow.profiles.get_by_handle(handle)
            if not profile:
                raise ProfileNotFoundError(handle)
            platforms = await uow.profiles.get_platforms(profile.id)
            return ProfileDetails(profile=profile, platforms=platforms)

    async def update_own(self, user_id: str, update: ProfileUpdate) -> Profile:
        """Apply the settings form to the caller's profile.

        The row update and the platform set replacement share one transaction.
        """
        if not user_id:
            raise AuthenticationError()

        rank = self._resolve_rank(update.current_rank)
        platforms = list(dict.fromkeys(update.platforms))

        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(user_id)
            if not profile:
                raise ProfileNotFoundError(user_id)

            profile.bio = _clean_optional(update.bio)
            profile.region = update.region
            profile.timezone = _clean_optional(update.timezone)
            profile.current_rank = rank
            profile.main_role = update.main_role
            profile.is_lft = update.is_lft
            profile.updated_at = datetime.utcnow()

            updated = await uow.profiles.update(profile)
            await uow.profiles.replace_platforms(user_id, platforms)
            await uow.commit()
            return updated

    def _resolve_rank(self, raw: str | None) -> str:
        """Apply the empty-rank policy to a submitted rank."""
        if not raw:
            if self._empty_rank_policy == "reject":
                raise ValidationError("Current rank is required.", field="current_rank")
            return DEFAULT_RANK

        rank = raw.strip()
        if not rank:
            raise ValidationError("Current rank is required.", field="current_rank")
        return rank


def _clean_optional(value: str | None) -> str | None:
    """Trim free text; empty becomes None."""
    if value is None:
        return None
    return value.strip() or None
