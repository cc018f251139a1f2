"""Session introspection route."""

from fastapi import APIRouter

from api.dependencies.auth import OptionalUser
from api.v1.schemas.common import SessionResponse

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/session", response_model=SessionResponse, summary="Check sign-in state")
async def get_session(user: OptionalUser) -> SessionResponse:
    """Report whether the request carries a valid session token."""
    return SessionResponse(signed_in=user is not None, user_id=user.id if user else None)
