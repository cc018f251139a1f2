"""Profile domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


DEFAULT_RANK = "Unranked"
DEFAULT_DISPLAY_NAME = "New Player"
DEFAULT_TIMEZONE = "America/New_York"


class Region(StrEnum):
    """Player region."""

    NA = "NA"
    EU = "EU"
    APAC = "APAC"


class MainRole(StrEnum):
    """Preferred in-game role."""

    TANK = "Tank"
    DPS = "DPS"
    SUPPORT = "Support"


class Platform(StrEnum):
    """Platform a player plays on."""

    PC = "PC"
    CONSOLE = "Console"


@dataclass
class Profile:
    """Domain entity for a player profile, keyed by the identity provider's user id."""

    id: str
    handle: str
    display_name: str = DEFAULT_DISPLAY_NAME
    avatar_url: str | None = None
    bio: str | None = None
    region: Region = Region.NA
    timezone: str | None = None
    current_rank: str = DEFAULT_RANK
    main_role: MainRole = MainRole.SUPPORT
    is_lft: bool = False
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at


@dataclass(frozen=True, slots=True)
class ProfileDetails:
    """Read-only value object: a profile bundled with its platform set."""

    profile: Profile | None
    platforms: list[Platform]


@dataclass(frozen=True, slots=True)
class ProfileUpdate:
    """Fields the owner may change through the settings form."""

    region: Region
    main_role: MainRole
    is_lft: bool
    bio: str | None = None
    timezone: str | None = None
    current_rank: str | None = None
    platforms: tuple[Platform, ...] = ()
