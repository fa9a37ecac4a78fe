"""System checks for the dashboard access gate and backend configuration."""

from django.conf import settings
from django.core.checks import Error, register

from access_control.permissions import AdminSessionPermission


@register()
def dashboard_views_require_admin(app_configs, **kwargs):
    """Ensure every dashboard view carries the admin session gate.

    Only the views listed in ``dashboard.views.DASHBOARD_VIEWS`` are inspected;
    new dashboard views should be added there.
    """
    errors: list[Error] = []

    # Import here to avoid circular imports at module load time.
    from dashboard.views import DASHBOARD_VIEWS

    for view_cls in DASHBOARD_VIEWS:
        permission_classes = getattr(view_cls, "permission_classes", [])
        if AdminSessionPermission not in permission_classes:
            errors.append(
                Error(
                    f"{view_cls.__name__} does not use AdminSessionPermission.",
                    obj=view_cls,
                    id="access_control.E001",
                )
            )

    return errors


@register()
def dashboard_backend_configured(app_configs, **kwargs):
    """Ensure the backend API base URL is set."""
    if not getattr(settings, "DASHBOARD_API_BASE_URL", None):
        return [
            Error(
                "DASHBOARD_API_BASE_URL is not configured.",
                hint="Set the DASHBOARD_API_BASE_URL environment variable.",
                id="access_control.E002",
            )
        ]
    return []
