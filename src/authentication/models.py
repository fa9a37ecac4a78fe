"""Session identity decoded from the externally issued access token.

The dashboard owns no user table. Login, registration, and password storage
belong to the platform's auth service; this module only describes the caller
as the token presents them.
"""

from dataclasses import dataclass

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class SessionIdentity:
    """Authenticated caller as seen through the access token claims."""

    id: str
    role: str | None = None
    name: str = ""
    email: str = ""
    session_id: str = ""

    is_authenticated = True
    is_anonymous = False

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    @property
    def state_key(self) -> str:
        """Identifier the dashboard state is stored under."""
        return self.session_id or self.id

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.email or self.id


__all__ = ["ADMIN_ROLE", "SessionIdentity"]
