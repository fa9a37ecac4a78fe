"""Custom exception handling to enforce the API error envelope."""

import logging
from typing import Any

from django.conf import settings
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed, NotAuthenticated
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from access_control.permissions import LoginRedirect
from dashboard.state import StateStoreUnavailable

logger = logging.getLogger(__name__)


def _normalize_errors(payload: Any) -> list[Any]:
    """Convert DRF's response.data into a list for the envelope."""

    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and "detail" in payload:
        # Common DRF pattern: {"detail": "..."}
        return [payload["detail"]]
    return [payload]


def custom_exception_handler(exc: Exception, context: dict[str, Any]) -> Response | None:
    """Wrap DRF errors in `{ "data": null, "errors": [...] }` shape.

    - Callers failing the admin gate get a bare redirect to the login page.
    - Uses DRF's default handler to produce the base response.
    - Optionally exposes more detailed auth errors when DEBUG_AUTH_ERRORS is enabled.
    """

    # The access gate renders nothing: redirect with an empty body.
    if isinstance(exc, LoginRedirect):
        return Response(status=status.HTTP_302_FOUND, headers={"Location": exc.location})

    # Without the state store there is no dashboard to render; keep the
    # envelope instead of Django's HTML 500 page.
    if isinstance(exc, StateStoreUnavailable):
        logger.error("Dashboard state store unavailable: %s", exc)
        return Response(
            {"data": None, "errors": ["Dashboard state store unavailable."]},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    response = drf_exception_handler(exc, context)

    if response is None:
        return response

    if isinstance(exc, (AuthenticationFailed, NotAuthenticated)):
        response.status_code = status.HTTP_401_UNAUTHORIZED

    # Successful responses are untouched here; BaseAPIView handles them.
    if response.status_code >= 400:
        base_errors = response.data

        if response.status_code == status.HTTP_401_UNAUTHORIZED:
            if getattr(settings, "DEBUG_AUTH_ERRORS", False):
                # Surface the specific message (e.g. "Token has expired").
                errors = _normalize_errors(base_errors)
            else:
                errors = ["Authentication credentials were not provided or are invalid."]
        elif response.status_code == status.HTTP_403_FORBIDDEN:
            errors = ["You do not have permission to perform this action on this resource."]
        else:
            errors = _normalize_errors(base_errors)

        response.data = {"data": None, "errors": errors}

    return response
