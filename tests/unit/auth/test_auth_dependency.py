"""Unit tests for authentication dependencies."""

import subprocess
import sys
from pathlib import Path

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from api.dependencies.auth import get_caller_identity, get_current_user, get_optional_user
from core.exceptions import AuthenticationError, ErrorCode
from domain.entities.identity import Identity
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from tests.conftest import FakeIdentityProvider


@pytest.fixture
def mock_auth_provider() -> JWTAuthProvider:
    provider = JWTAuthProvider(
        secret_key="test-secret", algorithm="HS256", expire_minutes=30, issuer=""
    )
    return provider


@pytest.fixture
def test_token_user() -> TokenUser:
    return TokenUser(id="user_2xyzTESTuser", email="test@example.com", session_id="sess_1")


# --- get_current_user ---


class TestGetCurrentUser:
    @pytest.mark.asyncio
    async def test_returns_user_with_valid_token(
        self, mock_auth_provider: JWTAuthProvider, test_token_user: TokenUser
    ):
        token = mock_auth_provider.create_token(test_token_user)
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)

        result = await get_current_user(credentials, mock_auth_provider)

        assert result.id == test_token_user.id
        assert result.email == test_token_user.email
        assert result.session_id == "sess_1"

    @pytest.mark.asyncio
    async def test_email_claim_is_optional(self, mock_auth_provider: JWTAuthProvider):
        token = mock_auth_provider.create_token(TokenUser(id="user_noemail"))
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)

        result = await get_current_user(credentials, mock_auth_provider)

        assert result.id == "user_noemail"
        assert result.email is None

    @pytest.mark.asyncio
    async def test_raises_when_no_credentials(self, mock_auth_provider: JWTAuthProvider):
        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_user(None, mock_auth_provider)

        assert exc_info.value.error_code == ErrorCode.UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_raises_when_invalid_token(self, mock_auth_provider: JWTAuthProvider):
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials="invalid.jwt.token")

        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_user(credentials, mock_auth_provider)

        assert exc_info.value.error_code == ErrorCode.INVALID_TOKEN

    @pytest.mark.asyncio
    async def test_raises_when_expired_token(self, test_token_user: TokenUser):
        # Negative expiry produces an already expired token
        provider = JWTAuthProvider(
            secret_key="test-secret", algorithm="HS256", expire_minutes=-1, issuer=""
        )
        token = provider.create_token(test_token_user)
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)

        normal_provider = JWTAuthProvider(
            secret_key="test-secret", algorithm="HS256", expire_minutes=30, issuer=""
        )

        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_user(credentials, normal_provider)

        assert exc_info.value.error_code == ErrorCode.INVALID_TOKEN

    @pytest.mark.asyncio
    async def test_raises_when_signed_with_other_secret(self, test_token_user: TokenUser):
        forged = JWTAuthProvider(
            secret_key="attacker", algorithm="HS256", expire_minutes=30, issuer=""
        ).create_token(test_token_user)
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials=forged)

        with pytest.raises(AuthenticationError):
            await get_current_user(
                credentials,
                JWTAuthProvider(
                    secret_key="test-secret", algorithm="HS256", expire_minutes=30, issuer=""
                ),
            )


# --- get_optional_user ---


class TestGetOptionalUser:
    @pytest.mark.asyncio
    async def test_returns_user_with_valid_token(
        self, mock_auth_provider: JWTAuthProvider, test_token_user: TokenUser
    ):
        token = mock_auth_provider.create_token(test_token_user)
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)

        result = await get_optional_user(credentials, mock_auth_provider)

        assert result is not None
        assert result.id == test_token_user.id

    @pytest.mark.asyncio
    async def test_returns_none_when_no_credentials(self, mock_auth_provider: JWTAuthProvider):
        result = await get_optional_user(None, mock_auth_provider)
        assert result is None

    @pytest.mark.asyncio
    async def test_returns_none_for_invalid_token(self, mock_auth_provider: JWTAuthProvider):
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials="invalid.jwt.token")

        result = await get_optional_user(credentials, mock_auth_provider)
        assert result is None


# --- get_caller_identity ---


class TestGetCallerIdentity:
    @pytest.mark.asyncio
    async def test_fetches_identity_for_token_subject(self, test_token_user: TokenUser):
        provider = FakeIdentityProvider()
        provider.identities[test_token_user.id] = Identity(
            id=test_token_user.id, username="Tester"
        )

        identity = await get_caller_identity(test_token_user, provider)

        assert identity.id == test_token_user.id
        assert identity.username == "Tester"

    @pytest.mark.asyncio
    async def test_unknown_user_yields_bare_identity(self, test_token_user: TokenUser):
        identity = await get_caller_identity(test_token_user, FakeIdentityProvider())

        assert identity == Identity(id=test_token_user.id)


class TestModuleImport:
    def test_auth_dependencies_import_first(self):
        """Importing the auth dependencies before the v1 routers must work."""
        src = Path(__file__).resolve().parents[3] / "src"
        result = subprocess.run(
            [sys.executable, "-c", "import api.dependencies.auth; import main"],
            cwd=src,
            capture_output=True,
            text=True,
        )

        assert result.returncode == 0, result.stderr
