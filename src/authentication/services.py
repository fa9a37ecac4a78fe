"""Token service for decoding session JWTs issued by the platform's auth service."""

from typing import Any

import jwt
from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed

from .models import SessionIdentity


class TokenService:
    """Decode access tokens and turn their claims into a SessionIdentity."""

    ALGORITHM = "HS256"

    @classmethod
    def decode_token(cls, token: str, expected_type: str | None = None) -> dict[str, Any]:
        """Decode and validate a JWT; optionally enforce token type."""

        try:
            payload = jwt.decode(token, settings.SESSION_TOKEN_SECRET, algorithms=[cls.ALGORITHM])
        except jwt.ExpiredSignatureError as exc:  # pragma: no cover - simple mapping
            raise AuthenticationFailed("Token has expired") from exc
        except jwt.InvalidTokenError as exc:  # pragma: no cover - simple mapping
            raise AuthenticationFailed("Invalid token") from exc

        # Tokens without a type claim are accepted; a mismatching one is not.
        token_type = payload.get("type")
        if expected_type and token_type is not None and token_type != expected_type:
            raise AuthenticationFailed("Invalid token type")

        return payload

    @classmethod
    def identity_from_token(cls, token: str) -> SessionIdentity:
        """Decode an access token and build the caller's identity from its claims."""

        payload = cls.decode_token(token, expected_type="access")
        subject = payload.get("sub")
        if not subject:
            raise AuthenticationFailed("Token has no subject")

        return SessionIdentity(
            id=str(subject),
            role=payload.get("role"),
            name=payload.get("name") or "",
            email=payload.get("email") or "",
            session_id=str(payload.get("jti") or ""),
        )


__all__ = ["TokenService"]
