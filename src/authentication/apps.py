"""App configuration for session identity components."""

from django.apps import AppConfig


class AuthenticationConfig(AppConfig):
    """Authentication app decodes the caller's session token; it owns no models."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "authentication"
