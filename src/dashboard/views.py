"""Dashboard endpoints: each request is one UI event against the controller."""

from contextlib import contextmanager

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework.response import Response

from access_control.permissions import AdminSessionPermission
from core.response import BaseAPIView, api_response
from .client import build_api_client
from .controller import DashboardController
from .serializers import (
    DashboardSerializer,
    DeleteDialogSerializer,
    NewAdminSerializer,
    SearchSerializer,
)
from .state import DashboardState, DashboardStateStore


class DashboardEventView(BaseAPIView):
    """Load the caller's state, run one controller event, save, and render."""

    permission_classes = [AdminSessionPermission]
    state_store_class = DashboardStateStore

    @contextmanager
    def event(self, fresh: bool = False):
        """Yield a controller over the session's state and save it afterwards.

        The session lock is held from load to save. An event that raises is
        not saved.
        """
        store = self.state_store_class()
        state_key = self.request.user.state_key
        with store.locked(state_key):
            state = DashboardState() if fresh else store.load(state_key)
            controller = DashboardController(build_api_client(self.request.auth), state)
            yield controller
            store.save(state_key, controller.state)

    def respond(self, controller: DashboardController) -> Response:
        data = DashboardSerializer(controller.snapshot(viewer=self.request.user)).data
        return api_response(data)


class DashboardView(DashboardEventView):
    @extend_schema(responses=DashboardSerializer)
    def get(self, request):
        """Activate the dashboard: reset local state and fetch all three collections."""
        with self.event(fresh=True) as controller:
            async_to_sync(controller.load)()
        return self.respond(controller)


class DashboardStateView(DashboardEventView):
    @extend_schema(responses=DashboardSerializer)
    def get(self, request):
        """Render the stored state without contacting the backend."""
        with self.event() as controller:
            pass
        return self.respond(controller)


class SearchView(DashboardEventView):
    @extend_schema(request=SearchSerializer, responses=DashboardSerializer)
    def put(self, request):
        """Replace one collection's search string and return the refiltered view."""
        serializer = SearchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        with self.event() as controller:
            controller.set_search(serializer.validated_data["collection"], serializer.validated_data["query"])
        return self.respond(controller)


class DeleteDialogView(DashboardEventView):
    @extend_schema(request=DeleteDialogSerializer, responses=DashboardSerializer)
    def post(self, request):
        """Open the confirmation prompt for deleting one record."""
        serializer = DeleteDialogSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        with self.event() as controller:
            controller.open_delete_dialog(
                serializer.validated_data["type"],
                serializer.validated_data["id"],
                serializer.validated_data["name"],
            )
        return self.respond(controller)

    @extend_schema(request=None, responses=DashboardSerializer)
    def delete(self, request):
        """Cancel the prompt without deleting anything."""
        with self.event() as controller:
            controller.close_delete_dialog()
        return self.respond(controller)


class DeleteConfirmView(DashboardEventView):
    @extend_schema(request=None, responses=DashboardSerializer)
    def post(self, request):
        """Delete the record named by the open prompt, then close the prompt."""
        with self.event() as controller:
            async_to_sync(controller.confirm_delete)()
        return self.respond(controller)


class AdminCreateView(DashboardEventView):
    @extend_schema(request=NewAdminSerializer, responses=DashboardSerializer)
    def post(self, request):
        """Submit the create-admin form."""
        serializer = NewAdminSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        with self.event() as controller:
            controller.update_new_admin(**serializer.validated_data)
            async_to_sync(controller.create_admin)()
        return self.respond(controller)


DASHBOARD_VIEWS = [
    DashboardView,
    DashboardStateView,
    SearchView,
    DeleteDialogView,
    DeleteConfirmView,
    AdminCreateView,
]

__all__ = [
    "AdminCreateView",
    "DASHBOARD_VIEWS",
    "DashboardStateView",
    "DashboardView",
    "DeleteConfirmView",
    "DeleteDialogView",
    "SearchView",
]
