"""Authentication helpers that bridge the session middleware into DRF.

DRF's ``Request.user`` normally relies on its own authentication classes.
Since this project decodes the session JWT in ``SessionTokenMiddleware``, this
module provides a lightweight authenticator that surfaces the identity already
attached to the underlying Django request, with the raw token as
``request.auth`` so views can forward it to the backend API.
"""

from typing import Any, Optional, Tuple

from django.contrib.auth.models import AnonymousUser
from rest_framework.authentication import BaseAuthentication


class MiddlewareUserAuthentication(BaseAuthentication):
    """Expose ``request._request.user`` and its session token to DRF.

    No credential parsing happens here. If the middleware left the request
    anonymous, authentication is skipped.
    """

    def authenticate(self, request) -> Optional[Tuple[Any, Optional[str]]]:
        # DRF's Request wraps the original Django HttpRequest as ``._request``.
        django_request = getattr(request, "_request", None)
        if django_request is None:
            return None

        user = getattr(django_request, "user", None)
        if user is None or isinstance(user, AnonymousUser):
            return None

        if not getattr(user, "is_authenticated", False):
            return None

        return user, getattr(django_request, "session_token", None)

    def authenticate_header(self, request) -> str:
        return "Bearer"


__all__ = ["MiddlewareUserAuthentication"]
