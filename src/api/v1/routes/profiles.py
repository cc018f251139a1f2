"""Profile API routes."""

from fastapi import APIRouter, Depends, Query, Request

from api.dependencies.auth import CallerIdentity, CurrentUser
from api.v1.dependencies import get_ensure_strategy, get_profile_service
from api.v1.schemas.common import OkResponse
from api.v1.schemas.profile import (
    EnsureProfileResponse,
    OwnProfileResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    PublicProfileDetailResponse,
    PublicProfileResponse,
)
from core.rate_limit import limiter
from domain.entities.profile import ProfileUpdate
from domain.services.profile_service import ProfileService
from domain.services.profile_sync_service import IEnsureStrategy

router = APIRouter(prefix="/profile", tags=["profiles"])


@router.post(
    "/ensure",
    response_model=EnsureProfileResponse,
    summary="Create or sync the caller's profile",
    responses={
        200: {"description": "Profile exists (created, synced or untouched)"},
        401: {"description": "Not signed in"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def ensure_profile(
    request: Request,
    identity: CallerIdentity,
    strategy: IEnsureStrategy = Depends(get_ensure_strategy),
) -> EnsureProfileResponse:
    """
    Make sure the signed-in user has a profile.

    Safe to call on every page load: once the profile exists the call is a
    no-op, except that a machine-assigned handle is replaced by one derived
    from the user's username when it becomes available.
    """
    result = await strategy.ensure(identity)
    return EnsureProfileResponse(
        created=result.created,
        synced=result.synced,
        handle=result.handle,
    )


@router.get(
    "/me",
    response_model=OwnProfileResponse,
    summary="Get the caller's profile",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_own_profile(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> OwnProfileResponse:
    """Get the full profile row and platform set of the signed-in user."""
    details = await service.get_own(user.id)
    return OwnProfileResponse(
        profile=(
            ProfileResponse.model_validate(details.profile) if details.profile else None
        ),
        platforms=details.platforms,
    )


@router.get(
    "/by-handle",
    response_model=PublicProfileDetailResponse,
    summary="Get a public profile by handle",
    responses={
        400: {"description": "Missing handle"},
        404: {"description": "Profile not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_profile_by_handle(
    request: Request,
    handle: str = Query("", description="Profile handle (case-insensitive)"),
    service: ProfileService = Depends(get_profile_service),
) -> PublicProfileDetailResponse:
    """Public lookup used by the ``/u/{handle}`` page. No authentication required."""
    details = await service.get_by_handle(handle)
    return PublicProfileDetailResponse(
        profile=PublicProfileResponse.model_validate(details.profile),
        platforms=details.platforms,
    )


@router.post(
    "/update",
    response_model=OkResponse,
    summary="Update the caller's profile settings",
    responses={
        400: {"description": "Current rank is required"},
        404: {"description": "Profile not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_own_profile(
    request: Request,
    body: ProfileUpdateRequest,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> OkResponse:
    """Update settings fields and replace the platform set."""
    await service.update_own(
        user.id,
        ProfileUpdate(
            bio=body.bio,
            region=body.region,
            timezone=body.timezone,
            current_rank=body.current_rank,
            main_role=body.main_role,
            is_lft=body.is_lft,
            platforms=tuple(body.platforms),
        ),
    )
    return OkResponse()
