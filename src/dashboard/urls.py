"""Routing for the dashboard event endpoints."""

from django.urls import path

from .views import (
    AdminCreateView,
    DashboardStateView,
    DashboardView,
    DeleteConfirmView,
    DeleteDialogView,
    SearchView,
)

urlpatterns = [
    path("", DashboardView.as_view(), name="dashboard"),
    path("state/", DashboardStateView.as_view(), name="dashboard-state"),
    path("search/", SearchView.as_view(), name="dashboard-search"),
    path("delete-dialog/", DeleteDialogView.as_view(), name="dashboard-delete-dialog"),
    path("delete-dialog/confirm/", DeleteConfirmView.as_view(), name="dashboard-delete-confirm"),
    path("admins/", AdminCreateView.as_view(), name="dashboard-admin-create"),
]
