"""Handle normalization and unique handle resolution."""

import logging
import re
import secrets
import string
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

HANDLE_MAX_LENGTH = 20
GENERATED_PREFIXES = ("user-", "player-")
MAX_RESOLVE_ATTEMPTS = 6
SUFFIX_LENGTH = 4

_ALPHABET = string.ascii_lowercase + string.digits


def normalize_handle(raw: str) -> str:
    """Turn arbitrary text into a URL-safe handle.

    The result only contains ``[a-z0-9_-]``, has no repeated hyphens, does not
    start or end with ``-``/``_`` and is at most 20 characters long. It may be
    empty; callers fall back to a generated handle in that case.
    """
    handle = raw.lower().strip()
    handle = re.sub(r"\s+", "-", handle)
    handle = re.sub(r"[^a-z0-9_-]", "", handle)
    handle = re.sub(r"-+", "-", handle)
    handle = handle.strip("-_")
    return handle[:HANDLE_MAX_LENGTH].rstrip("-_")


def random_token(length: int) -> str:
    """Random lowercase alphanumeric string."""
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def generated_handle(length: int = 6) -> str:
    """Placeholder handle such as ``player-k3x9qa``."""
    return f"player-{random_token(length)}"[:HANDLE_MAX_LENGTH]


def default_handle(identity_id: str) -> str:
    """Deterministic handle derived from the identity id (``user-`` + 8 chars)."""
    return f"user-{identity_id.removeprefix('user_')[:8]}"


def looks_generated(handle: str) -> bool:
    """True if the handle was machine-assigned rather than chosen by the user."""
    return handle.startswith(GENERATED_PREFIXES)


def with_suffix(base: str, suffix: str) -> str:
    """``base-suffix``, shortening the base so the result fits a handle."""
    room = HANDLE_MAX_LENGTH - len(suffix) - 1
    return f"{base[:room].rstrip('-_')}-{suffix}"


def is_variant_of(handle: str, base: str) -> bool:
    """True if ``handle`` is ``base`` or ``base`` with a resolver suffix."""
    if handle == base:
        return True
    suffix = handle.rpartition("-")[2]
    return len(suffix) == SUFFIX_LENGTH and handle == with_suffix(base, suffix)


class HandleResolver:
    """Find a handle that no profile uses yet.

    ``exists`` is an async predicate backed by the profile store. Errors it
    raises abort the resolution and are not retried.
    """

    def __init__(self, exists: Callable[[str], Awaitable[bool]]) -> None:
        self._exists = exists

    async def resolve(self, base: str) -> str:
        if not base:
            base = generated_handle(6)

        candidate = base
        for _ in range(MAX_RESOLVE_ATTEMPTS):
            if not await self._exists(candidate):
                return candidate
            candidate = with_suffix(base, random_token(SUFFIX_LENGTH))

        # 36**8 possibilities; accepted without a final check
        fallback = generated_handle(8)
        logger.warning(
            "Handle base %r collided %d times, using fallback %s",
            base,
            MAX_RESOLVE_ATTEMPTS,
            fallback,
        )
        return fallback
