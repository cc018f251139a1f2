"""Pytest configuration and fixtures."""

import base64
import os
import sys
from collections.abc import AsyncGenerator
from pathlib import Path

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.entities.identity import Identity
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base

# Test database URL (SQLite in memory, one shared connection)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Fixed test user ID for consistency
TEST_USER_ID = "user_2abcDEFghiJKLmno"

# Svix-style signing secret for webhook tests
TEST_WEBHOOK_SECRET = "whsec_" + base64.b64encode(b"integration-webhook-secret-bytes").decode()


class FakeIdentityProvider:
    """In-memory stand-in for the Clerk Backend API."""

    def __init__(self) -> None:
        self.identities: dict[str, Identity] = {}

    async def get_identity(self, user_id: str) -> Identity:
        return self.identities.get(user_id, Identity(id=user_id))


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
def test_user() -> TokenUser:
    """Create a test user with fixed ID."""
    return TokenUser(id=TEST_USER_ID, email="emi@example.com")


@pytest.fixture
def identity_provider(test_user: TokenUser) -> FakeIdentityProvider:
    """Identity provider that knows the test user as EmiStar."""
    provider = FakeIdentityProvider()
    provider.identities[test_user.id] = Identity(
        id=test_user.id,
        username="EmiStar",
        email="emi@example.com",
        first_name="Emi",
        last_name="Star",
        avatar_url="https://img.example.com/emi.png",
    )
    return provider


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
        issuer="",
        allow_shared_secret=True,
    )


@pytest.fixture
def auth_token(auth_provider: JWTAuthProvider, test_user: TokenUser) -> str:
    """Create auth token for test user."""
    return str(auth_provider.create_token(test_user))


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth, no database overrides)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def app_client(
    session_factory: async_sessionmaker[AsyncSession],
    auth_provider: JWTAuthProvider,
    identity_provider: FakeIdentityProvider,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client wired to the in-memory database.

    This client:
    - Uses an in-memory SQLite database
    - Verifies tokens with the HS256 test auth provider
    - Fetches identity hints from FakeIdentityProvider
    - Verifies webhooks against TEST_WEBHOOK_SECRET
    - Overrides the service factories to use the test session factory

    Requests are anonymous unless they pass ``auth_headers``.
    """
    from api.dependencies.auth import get_auth_provider
    from api.dependencies.identity import get_identity_provider, get_webhook_verifier
    from api.routes.health import get_optional_session
    from api.v1.dependencies import (
        get_ensure_strategy,
        get_identity_webhook_service,
        get_profile_service,
    )
    from domain.services.identity_webhook_service import IdentityWebhookService
    from domain.services.profile_service import ProfileService
    from domain.services.profile_sync_service import HintedSyncEnsure
    from infrastructure.auth.webhook_verifier import ClerkWebhookVerifier
    from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
    from main import create_app

    app = create_app()

    def test_uow_factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    async def override_get_optional_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[get_identity_provider] = lambda: identity_provider
    app.dependency_overrides[get_profile_service] = lambda: ProfileService(test_uow_factory)
    app.dependency_overrides[get_ensure_strategy] = lambda: HintedSyncEnsure(test_uow_factory)
    app.dependency_overrides[get_identity_webhook_service] = lambda: IdentityWebhookService(
        test_uow_factory
    )
    app.dependency_overrides[get_webhook_verifier] = lambda: ClerkWebhookVerifier(
        TEST_WEBHOOK_SECRET
    )
    app.dependency_overrides[get_optional_session] = override_get_optional_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
