"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.profiles import router as profiles_router
from api.v1.routes.session import router as session_router
from api.v1.routes.webhooks import router as webhooks_router

router = APIRouter()
router.include_router(profiles_router)
router.include_router(webhooks_router)
router.include_router(session_router)
