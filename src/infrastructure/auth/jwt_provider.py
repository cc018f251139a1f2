"""Session token verification.

Clerk signs session tokens with RS256 and publishes the public keys as a JWKS
at ``{issuer}/.well-known/jwks.json``. HS256 tokens signed with
``JWT_SECRET_KEY`` are accepted too, so tests and local tooling can mint
their own. That path is off when the key is empty and in production.

Claims read from a Clerk session token:

    sub               user id (``user_...``), required
    sid               session id
    iss               Frontend API URL, checked when CLERK_ISSUER is set
    email, username   only present when the session token template adds them
"""

import logging
import time
from datetime import datetime, timedelta
from typing import Any

import httpx
from jose import JWTError, jwt

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = logging.getLogger(__name__)

JWKS_TTL_SECONDS = 3600.0


def jwks_url_for(issuer: str) -> str:
    """JWKS endpoint published under a Clerk Frontend API URL."""
    return f"{issuer.rstrip('/')}/.well-known/jwks.json" if issuer else ""


class JWKSKeySet:
    """Signing keys from a JWKS endpoint, indexed by ``kid``.

    Keys are fetched lazily and kept for ``ttl_seconds``. A lookup for an
    unknown ``kid`` forces one refetch, which picks up rotated keys. Fetch
    failures are logged and leave the previous keys in place.
    """

    def __init__(
        self,
        url: str,
        ttl_seconds: float = JWKS_TTL_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._ttl_seconds = ttl_seconds
        self._transport = transport
        self._keys: dict[str, dict[str, Any]] = {}
        self._fetched_at: float | None = None

    @property
    def stale(self) -> bool:
        return self._fetched_at is None or (
            time.monotonic() - self._fetched_at > self._ttl_seconds
        )

    async def get(self, kid: str) -> dict[str, Any] | None:
        refreshed = False
        if self.stale:
            await self.refresh()
            refreshed = True

        key = self._keys.get(kid)
        if key is None and not refreshed:
            await self.refresh()
            key = self._keys.get(kid)
        return key

    async def refresh(self) -> None:
        if not self._url:
            return

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(self._url, timeout=10.0)
                response.raise_for_status()
                body = response.json()
        except (httpx.HTTPError, ValueError):
            logger.exception("Failed to fetch JWKS from %s", self._url)
            return

        self._keys = {key["kid"]: key for key in body.get("keys", []) if key.get("kid")}
        self._fetched_at = time.monotonic()
        logger.info("Fetched %d JWKS keys from %s", len(self._keys), self._url)


class JWTAuthProvider:
    """Validates Clerk session tokens (RS256) and local HS256 tokens."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
        issuer: str = settings.clerk_issuer,
        key_set: JWKSKeySet | None = None,
        allow_shared_secret: bool = not settings.is_production,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes
        self._issuer = issuer or None
        self._key_set = key_set or JWKSKeySet(jwks_url_for(issuer))
        self._shared_secret_enabled = bool(secret_key) and allow_shared_secret

    async def validate_token(self, token: str) -> TokenUser | None:
        """
        Validate a session token and extract the user.

        Args:
            token: The bearer token from the Authorization header

        Returns:
            TokenUser if valid, None if invalid, expired or without ``sub``
        """
        try:
            header = jwt.get_unverified_header(token)
            if header.get("alg") == "RS256":
                payload = await self._decode_rs256(token, header.get("kid"))
            elif self._shared_secret_enabled:
                payload = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    options={"verify_aud": False},
                )
            else:
                logger.warning("Rejected %s token: shared secret disabled", header.get("alg"))
                return None
        except JWTError as exc:
            logger.debug("Rejected session token: %s", exc)
            return None

        if not payload or not payload.get("sub"):
            return None

        return TokenUser(
            id=payload["sub"],
            email=payload.get("email"),
            username=payload.get("username"),
            session_id=payload.get("sid"),
        )

    async def _decode_rs256(self, token: str, kid: str | None) -> dict[str, Any] | None:
        if not kid:
            return None

        key = await self._key_set.get(kid)
        if key is None:
            logger.warning("No JWKS key for kid=%s", kid)
            return None

        return jwt.decode(
            token,
            key,
            algorithms=["RS256"],
            issuer=self._issuer,
            options={"verify_aud": False},
        )

    def create_token(self, user: TokenUser) -> str:
        """Mint a token for ``user`` with the configured secret (tests and local use)."""
        claims: dict[str, Any] = {
            "sub": user.id,
            "exp": datetime.utcnow() + timedelta(minutes=self._expire_minutes),
            "email": user.email,
            "username": user.username,
            "sid": user.session_id,
        }
        payload = {name: value for name, value in claims.items() if value is not None}
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
