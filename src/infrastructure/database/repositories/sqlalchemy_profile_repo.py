"""SQLAlchemy implementation of Profile repository."""

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.profile import MainRole, Platform, Profile, Region
from infrastructure.database.models import ProfileModel, ProfilePlatformModel


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: str) -> Profile | None:
        """Get a profile by identity ID."""
        model = await self._get_model(id)
        return self._to_entity(model) if model else None

    async def get_by_handle(self, handle: str) -> Profile | None:
        """Get a profile by handle (case-insensitive)."""
        stmt = select(ProfileModel).where(func.lower(ProfileModel.handle) == handle.lower())
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def handle_exists(self, handle: str) -> bool:
        """Check whether any profile uses the handle."""
        stmt = (
            select(ProfileModel.id)
            .where(func.lower(ProfileModel.handle) == handle.lower())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def create(self, profile: Profile) -> Profile:
        """Create a new profile."""
        model = self._to_model(profile)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, profile: Profile) -> Profile:
        """Update an existing profile."""
        model = await self._get_model(profile.id)

        if not model:
            raise ValueError(f"Profile {profile.id} not found")

        model.handle = profile.handle
        model.display_name = profile.display_name
        model.avatar_url = profile.avatar_url
        model.bio = profile.bio
        model.region = profile.region.value
        model.timezone = profile.timezone
        model.current_rank = profile.current_rank
        model.main_role = profile.main_role.value
        model.is_lft = profile.is_lft
        model.updated_at = profile.updated_at

        await self._session.flush()
        return self._to_entity(model)

    async def get_platforms(self, profile_id: str) -> list[Platform]:
        """Get the platform set of a profile."""
        stmt = (
            select(ProfilePlatformModel.platform)
            .where(ProfilePlatformModel.profile_id == profile_id)
            .order_by(ProfilePlatformModel.platform)
        )
        result = await self._session.execute(stmt)
        return [Platform(platform) for platform in result.scalars()]

    async def replace_platforms(self, profile_id: str, platforms: list[Platform]) -> None:
        """Delete all platform rows of a profile and insert the given ones."""
        stmt = delete(ProfilePlatformModel).where(ProfilePlatformModel.profile_id == profile_id)
        await self._session.execute(stmt)

        self._session.add_all(
            ProfilePlatformModel(profile_id=profile_id, platform=platform.value)
            for platform in platforms
        )
        await self._session.flush()

    async def _get_model(self, id: str) -> ProfileModel | None:
        stmt = select(ProfileModel).where(ProfileModel.id == id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _to_entity(self, model: ProfileModel) -> Profile:
        """Convert ORM model to domain entity."""
        return Profile(
            id=model.id,
            handle=model.handle,
            display_name=model.display_name,
            avatar_url=model.avatar_url,
            bio=model.bio,
            region=Region(model.region),
            timezone=model.timezone,
            current_rank=model.current_rank,
            main_role=MainRole(model.main_role),
            is_lft=model.is_lft,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Profile) -> ProfileModel:
        """Convert domain entity to ORM model."""
        return ProfileModel(
            id=entity.id,
            handle=entity.handle,
            display_name=entity.display_name,
            avatar_url=entity.avatar_url,
            bio=entity.bio,
            region=entity.region.value,
            timezone=entity.timezone,
            current_rank=entity.current_rank,
            main_role=entity.main_role.value,
            is_lft=entity.is_lft,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
