"""Admin-role gate for the dashboard views.

The gate is a convenience for the dashboard UI, not the security boundary:
every backend call is forwarded with the caller's token and authorized again
by the backend API.
"""

import logging

from django.conf import settings
from rest_framework import permissions
from rest_framework.exceptions import APIException

logger = logging.getLogger(__name__)


class LoginRedirect(APIException):
    """Send the caller to the login page without rendering anything."""

    status_code = 302
    default_detail = "Admin session required."
    default_code = "login_redirect"

    def __init__(self, location: str | None = None):
        super().__init__()
        self.location = location or settings.DASHBOARD_LOGIN_URL


class AdminSessionPermission(permissions.BasePermission):
    """Allow only sessions whose role claim is ``admin``.

    Anything else, including anonymous callers, is redirected to
    ``settings.DASHBOARD_LOGIN_URL`` before the view runs, so no collection is
    fetched or rendered.
    """

    message = "Admin session required."

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        if user is not None and getattr(user, "is_authenticated", False) and getattr(user, "is_admin", False):
            return True

        logger.info(
            "Redirecting non-admin caller away from %s (role=%s)",
            request.path,
            getattr(user, "role", None),
        )
        raise LoginRedirect()


__all__ = ["AdminSessionPermission", "LoginRedirect"]
