"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.services.identity_webhook_service import IdentityWebhookService
from domain.services.profile_service import ProfileService
from domain.services.profile_sync_service import (
    DeterministicEnsure,
    HintedSyncEnsure,
    IEnsureStrategy,
)
from infrastructure.database.session import get_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(get_session_factory())

    return factory


@lru_cache
def get_profile_service() -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(
        get_uow_factory(),
        empty_rank_policy=settings.empty_rank_policy,
    )


@lru_cache
def get_ensure_strategy() -> IEnsureStrategy:
    """Get the configured profile ensure strategy."""
    if settings.profile_ensure_strategy == "deterministic":
        return DeterministicEnsure(get_uow_factory())
    return HintedSyncEnsure(get_uow_factory())


@lru_cache
def get_identity_webhook_service() -> IdentityWebhookService:
    """Get identity webhook service instance."""
    return IdentityWebhookService(get_uow_factory())

