"""Common Pydantic schemas shared across the API."""

from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standardized error response."""

    ok: bool = False
    error_code: str
    message: str
    details: Any | None = None


class OkResponse(BaseModel):
    """Bare success response."""

    ok: bool = True


class WebhookResponse(BaseModel):
    """Schema for the identity webhook acknowledgement."""

    ok: bool = True
    ignored: bool = False


class SessionResponse(BaseModel):
    """Schema for GET /auth/session."""

    signed_in: bool
    user_id: str | None = None
