"""Profile repository protocol."""

from typing import Protocol

from domain.entities.profile import Platform, Profile


class IProfileRepository(Protocol):
    """Repository interface for Profile entities and their platform rows."""

    async def get(self, id: str) -> Profile | None:
        """Get a profile by identity ID."""
        ...

    async def get_by_handle(self, handle: str) -> Profile | None:
        """Get a profile by handle (case-insensitive)."""
        ...

    async def handle_exists(self, handle: str) -> bool:
        """Check whether any profile uses the handle (case-insensitive)."""
        ...

    async def create(self, profile: Profile) -> Profile:
        """Create a new profile."""
        ...

    async def update(self, profile: Profile) -> Profile:
        """Update an existing profile."""
        ...

    async def get_platforms(self, profile_id: str) -> list[Platform]:
        """Get the platform set of a profile."""
        ...

    async def replace_platforms(self, profile_id: str, platforms: list[Platform]) -> None:
        """Delete all platform rows of a profile and insert the given ones."""
        ...
