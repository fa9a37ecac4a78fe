"""Dashboard controller: load, filter, delete, and create-admin operations.

The controller owns a ``DashboardState`` (the local cache of the backend
collections) and reconciles it with every successful write: a delete removes
the record locally, a create appends the returned admin. Failures never raise
out of an operation; they become notifications and leave state unchanged.
"""

from __future__ import annotations

import logging
from typing import Any

from rest_framework.exceptions import APIException

from .client import BackendError, BackendRejected, DashboardAPIClient
from .filters import filter_records
from .notifications import Notification, error, success
from .records import AdminRecord, EntityType
from .state import DashboardState

logger = logging.getLogger(__name__)

LOAD_FAILED = "Failed to load dashboard data"
FIELDS_REQUIRED = "All fields are required"
ADMIN_CREATED = "Admin created successfully"
ADMIN_CREATE_FAILED = "Failed to create admin"


class DeletionNotPending(APIException):
    """Confirm was requested while no delete prompt is open."""

    status_code = 409
    default_detail = "No deletion is awaiting confirmation."
    default_code = "deletion_not_pending"


class DashboardController:
    def __init__(self, client: DashboardAPIClient, state: DashboardState | None = None):
        self.client = client
        self.state = state if state is not None else DashboardState()
        self.is_loading = False
        self.notifications: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    async def load(self) -> None:
        """Fetch the three collections concurrently and replace local copies.

        A failed request leaves its collection empty. Any number of failures
        produce one generic notification.
        """
        self.is_loading = True
        try:
            results = await self.client.fetch_all()
        finally:
            self.is_loading = False

        failed = False
        for entity_type, result in results.items():
            if isinstance(result, BackendError):
                logger.warning("Loading %s failed: %s", entity_type.collection, result)
                self.state.set_records(entity_type, [])
                failed = True
            else:
                self.state.set_records(entity_type, result)

        self.state.loaded = True
        if failed:
            self.notify(error(LOAD_FAILED))

    def set_search(self, entity_type: EntityType, query: str) -> None:
        self.state.searches[entity_type] = query

    def filtered(self, entity_type: EntityType) -> list:
        return filter_records(entity_type, self.state.records(entity_type), self.state.searches[entity_type])

    def open_delete_dialog(self, entity_type: EntityType, record_id: str, name: str = "") -> None:
        dialog = self.state.delete_dialog
        dialog.is_open = True
        dialog.entity_type = entity_type
        dialog.record_id = record_id
        dialog.name = name

    def close_delete_dialog(self) -> None:
        dialog = self.state.delete_dialog
        dialog.is_open = False
        dialog.entity_type = None
        dialog.record_id = ""
        dialog.name = ""

    async def confirm_delete(self) -> bool:
        """Delete the record named by the open prompt; the prompt always closes.

        Returns True when the backend accepted the delete.
        """
        dialog = self.state.delete_dialog
        if not dialog.is_open or dialog.entity_type is None:
            raise DeletionNotPending()

        entity_type, record_id = dialog.entity_type, dialog.record_id
        try:
            await self.client.delete(entity_type, record_id)
        except BackendError as exc:
            logger.warning("Deleting %s %s failed: %s", entity_type.value, record_id, exc)
            self.notify(error(f"Failed to delete {entity_type.value}"))
            return False
        else:
            remaining = [record for record in self.state.records(entity_type) if record.id != record_id]
            self.state.set_records(entity_type, remaining)
            logger.info("Deleted %s %s", entity_type.value, record_id)
            self.notify(success(f"{entity_type.label} deleted successfully"))
            return True
        finally:
            self.close_delete_dialog()

    def update_new_admin(self, name: str | None = None, email: str | None = None, password: str | None = None) -> None:
        draft = self.state.new_admin
        if name is not None:
            draft.name = name
        if email is not None:
            draft.email = email
        if password is not None:
            draft.password = password

    async def create_admin(self) -> AdminRecord | None:
        """Submit the new-admin draft; returns the created record when the reply carries one."""
        draft = self.state.new_admin
        if not draft.is_complete():
            self.notify(error(FIELDS_REQUIRED))
            return None

        try:
            admin = await self.client.create_admin(draft.name, draft.email, draft.password)
        except BackendRejected as exc:
            if not exc.write_accepted:
                logger.warning("Creating admin %s failed: %s", draft.email, exc)
                self.notify(error(exc.server_message or ADMIN_CREATE_FAILED))
                return None
            # Stored, but the reply had no record to append: re-fetch instead.
            logger.warning("Admin %s created without a record in the reply; reloading admins", draft.email)
            await self._reload(EntityType.ADMIN)
            admin = None
        except BackendError as exc:
            logger.warning("Creating admin %s failed: %s", draft.email, exc)
            self.notify(error(ADMIN_CREATE_FAILED))
            return None
        else:
            self.state.admins = [*self.state.admins, admin]

        logger.info("Created admin %s", draft.email)
        draft.clear()
        self.notify(success(ADMIN_CREATED))
        return admin

    async def _reload(self, entity_type: EntityType) -> None:
        try:
            self.state.set_records(entity_type, await self.client.fetch_collection(entity_type))
        except BackendError as exc:
            logger.warning("Reloading %s failed: %s", entity_type.collection, exc)

    def snapshot(self, viewer: Any = None) -> dict[str, Any]:
        """Everything a client needs to render the dashboard after this event."""
        dialog = self.state.delete_dialog
        data: dict[str, Any] = {
            "viewer": viewer,
            "is_loading": self.is_loading,
            "new_admin": {"name": self.state.new_admin.name, "email": self.state.new_admin.email},
            "delete_dialog": {
                "is_open": dialog.is_open,
                "type": dialog.entity_type.value if dialog.entity_type else None,
                "id": dialog.record_id,
                "name": dialog.name,
            },
            "notifications": list(self.notifications),
        }
        for entity_type in EntityType:
            data[entity_type.collection] = {
                "total": len(self.state.records(entity_type)),
                "search": self.state.searches[entity_type],
                "results": self.filtered(entity_type),
            }
        return data


__all__ = ["DashboardController", "DeletionNotPending"]
