"""External identity value object."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    """A signed-in principal as described by the identity provider.

    Only ``id`` is guaranteed; the rest are profile hints that may be absent.
    """

    id: str
    username: str | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    avatar_url: str | None = None

    @property
    def email_local_part(self) -> str | None:
        """The part of the email before ``@``, if there is an email."""
        if not self.email:
            return None
        return self.email.split("@", 1)[0] or None

    @property
    def full_name(self) -> str:
        """``"first last"`` trimmed; empty when neither name is known."""
        return f"{self.first_name or ''} {self.last_name or ''}".strip()
