"""Root URL configuration for the Ghost Dashboard API."""
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView

urlpatterns = [
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("dashboard/", include("dashboard.urls")),
]
