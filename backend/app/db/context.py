"""Request identity used to scope database operations."""

from dataclasses import dataclass

GUEST_SUBJECT = "guest-local"
GUEST_NAME = "Local Guest"


@dataclass(frozen=True)
class RequestIdentity:
    """Identity resolved from the request.

    `sub` is the Auth0 subject, or GUEST_SUBJECT when no token was sent.
    """

    sub: str
    email: str | None = None
    name: str | None = None

    @classmethod
    def guest(cls) -> "RequestIdentity":
        """Local guest identity for unauthenticated usage."""
        return cls(sub=GUEST_SUBJECT, name=GUEST_NAME)
