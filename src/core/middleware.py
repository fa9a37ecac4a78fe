"""Middleware to attach the caller's session identity from a bearer JWT."""

import logging

from django.contrib.auth.models import AnonymousUser
from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed

from authentication.services import TokenService

logger = logging.getLogger(__name__)


class SessionTokenMiddleware(MiddlewareMixin):
    """Decode the access JWT and attach request.user and request.session_token."""

    def process_request(self, request):  # type: ignore[override]
        """Authenticate request using Bearer access token if present."""
        request.session_token = None
        token = _get_bearer_token(request)
        if not token:
            request.user = AnonymousUser()
            return None

        try:
            identity = TokenService.identity_from_token(token)
        except AuthenticationFailed as exc:
            logger.info("Rejected session token: %s", exc.detail)
            return _unauthorized()

        request.user = identity
        # Forwarded to the backend API, which makes its own authorization decision.
        request.session_token = token
        return None


def _get_bearer_token(request) -> str | None:
    """Extract the Bearer token from Authorization header if present."""
    auth_header = request.META.get("HTTP_AUTHORIZATION", "")
    if auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1].strip() or None
    return None


def _unauthorized() -> JsonResponse:
    return JsonResponse(
        {
            "data": None,
            "errors": ["Authentication credentials were not provided or are invalid."],
        },
        status=status.HTTP_401_UNAUTHORIZED,
    )


__all__ = ["SessionTokenMiddleware"]
