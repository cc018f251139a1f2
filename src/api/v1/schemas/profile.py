"""Pydantic schemas for Profile API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.profile import MainRole, Platform, Region


class ProfileUpdateRequest(BaseModel):
    """Schema for the settings form submission."""

    bio: str | None = Field(None, max_length=500)
    region: Region
    timezone: str | None = Field(None, max_length=64)
    current_rank: str | None = Field(None, max_length=50)
    main_role: MainRole
    is_lft: bool = False
    platforms: list[Platform] = Field(default_factory=list)


class ProfileResponse(BaseModel):
    """Full profile row, returned to its owner."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    handle: str
    display_name: str
    avatar_url: str | None = None
    bio: str | None = None
    region: Region
    timezone: str | None = None
    current_rank: str
    main_role: MainRole
    is_lft: bool
    created_at: datetime
    updated_at: datetime


class PublicProfileResponse(BaseModel):
    """Public projection of a profile (no id, no timestamps)."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "handle": "emistar",
                "display_name": "Emi Star",
                "avatar_url": None,
                "bio": "Flex support, EU evenings",
                "region": "EU",
                "timezone": "Europe/Berlin",
                "current_rank": "Diamond 2",
                "main_role": "Support",
                "is_lft": True,
            }
        },
    )

    handle: str
    display_name: str
    avatar_url: str | None = None
    bio: str | None = None
    region: Region
    timezone: str | None = None
    current_rank: str
    main_role: MainRole
    is_lft: bool


class OwnProfileResponse(BaseModel):
    """Schema for GET /profile/me."""

    ok: bool = True
    profile: ProfileResponse | None
    platforms: list[Platform]


class PublicProfileDetailResponse(BaseModel):
    """Schema for GET /profile/by-handle."""

    ok: bool = True
    profile: PublicProfileResponse
    platforms: list[Platform]


class EnsureProfileResponse(BaseModel):
    """Schema for POST /profile/ensure."""

    ok: bool = True
    created: bool
    synced: bool
    handle: str
