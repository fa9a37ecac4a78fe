"""App configuration for the admin dashboard."""

from django.apps import AppConfig


class DashboardConfig(AppConfig):
    """Dashboard app mirrors the backend collections and drives delete/create events."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "dashboard"
