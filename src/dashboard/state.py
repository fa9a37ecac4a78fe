"""Per-session dashboard state and its Redis-backed store.

The state is the dashboard's local cache of the backend collections plus the
UI inputs that survive between events: search strings, the new-admin draft,
and the delete confirmation prompt. The draft password is never persisted.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field

import redis
from django.conf import settings

from core.redis_client import get_redis_client

from .records import EntityType, MalformedRecord, parse_records

logger = logging.getLogger(__name__)


class StateStoreUnavailable(Exception):
    """Raised when Redis cannot be reached to load or save dashboard state."""


@dataclass
class AdminDraft:
    """Inputs of the create-admin form."""

    name: str = ""
    email: str = ""
    password: str = ""

    def is_complete(self) -> bool:
        return bool(self.name and self.email and self.password)

    def clear(self) -> None:
        self.name = ""
        self.email = ""
        self.password = ""


@dataclass
class DeleteDialog:
    """Confirmation prompt for a pending delete."""

    is_open: bool = False
    entity_type: EntityType | None = None
    record_id: str = ""
    name: str = ""


def _empty_searches() -> dict[EntityType, str]:
    return {entity_type: "" for entity_type in EntityType}


@dataclass
class DashboardState:
    users: list = field(default_factory=list)
    admins: list = field(default_factory=list)
    articles: list = field(default_factory=list)
    searches: dict[EntityType, str] = field(default_factory=_empty_searches)
    new_admin: AdminDraft = field(default_factory=AdminDraft)
    delete_dialog: DeleteDialog = field(default_factory=DeleteDialog)
    loaded: bool = False

    def records(self, entity_type: EntityType) -> list:
        return getattr(self, entity_type.collection)

    def set_records(self, entity_type: EntityType, records: list) -> None:
        setattr(self, entity_type.collection, records)

    def to_json(self) -> str:
        dialog = self.delete_dialog
        return json.dumps(
            {
                "collections": {
                    entity_type.collection: [record.to_payload() for record in self.records(entity_type)]
                    for entity_type in EntityType
                },
                "searches": {entity_type.collection: query for entity_type, query in self.searches.items()},
                "new_admin": {"name": self.new_admin.name, "email": self.new_admin.email},
                "delete_dialog": {
                    "is_open": dialog.is_open,
                    "type": dialog.entity_type.value if dialog.entity_type else None,
                    "id": dialog.record_id,
                    "name": dialog.name,
                },
                "loaded": self.loaded,
            }
        )

    @classmethod
    def from_json(cls, raw: str) -> DashboardState:
        data = json.loads(raw)
        state = cls(loaded=bool(data.get("loaded")))

        collections = data.get("collections") or {}
        for entity_type in EntityType:
            state.set_records(entity_type, parse_records(entity_type, collections.get(entity_type.collection, [])))

        searches = data.get("searches") or {}
        for entity_type in EntityType:
            state.searches[entity_type] = str(searches.get(entity_type.collection) or "")

        draft = data.get("new_admin") or {}
        state.new_admin = AdminDraft(name=draft.get("name") or "", email=draft.get("email") or "")

        dialog = data.get("delete_dialog") or {}
        dialog_type = dialog.get("type")
        state.delete_dialog = DeleteDialog(
            is_open=bool(dialog.get("is_open")) and dialog_type is not None,
            entity_type=EntityType(dialog_type) if dialog_type else None,
            record_id=str(dialog.get("id") or ""),
            name=str(dialog.get("name") or ""),
        )
        return state


class DashboardStateStore:
    """Load and save DashboardState as JSON under ``dashboard:state:<session>``.

    Events of one session run one at a time under ``locked``, so an event that
    saves later cannot overwrite what an overlapping event reconciled.
    """

    KEY_PREFIX = "dashboard:state:"
    LOCK_PREFIX = "dashboard:lock:"

    def __init__(
        self,
        client: redis.Redis | None = None,
        ttl: int | None = None,
        lock_timeout: float | None = None,
    ):
        self._client = client
        self.ttl = ttl if ttl is not None else settings.DASHBOARD_STATE_TTL
        self.lock_timeout = lock_timeout if lock_timeout is not None else settings.DASHBOARD_STATE_LOCK_TIMEOUT

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self._client = get_redis_client()
        return self._client

    def _key(self, session_key: str) -> str:
        return f"{self.KEY_PREFIX}{session_key}"

    @contextmanager
    def locked(self, session_key: str):
        """Hold the session's Redis lock for one load-mutate-save event."""

        lock = self.client.lock(
            f"{self.LOCK_PREFIX}{session_key}",
            timeout=self.lock_timeout,
            blocking_timeout=self.lock_timeout,
        )
        try:
            acquired = lock.acquire()
        except redis.RedisError as exc:
            raise StateStoreUnavailable("Redis unavailable while locking dashboard state") from exc
        if not acquired:
            raise StateStoreUnavailable(f"Timed out waiting for the dashboard state lock of {session_key}")

        try:
            yield
        finally:
            try:
                lock.release()
            except redis.RedisError as exc:
                # Lease already expired or Redis went away; the lease lapses on its own.
                logger.warning("Releasing dashboard state lock for %s failed: %s", session_key, exc)

    def load(self, session_key: str) -> DashboardState:
        """Return the stored state, or a fresh one if none is stored."""

        try:
            raw = self.client.get(self._key(session_key))
        except redis.RedisError as exc:
            raise StateStoreUnavailable("Redis unavailable while loading dashboard state") from exc

        if raw is None:
            return DashboardState()
        try:
            return DashboardState.from_json(raw)
        except (AttributeError, TypeError, ValueError, MalformedRecord) as exc:
            logger.warning("Discarding unreadable dashboard state for %s: %s", session_key, exc)
            return DashboardState()

    def save(self, session_key: str, state: DashboardState) -> None:
        try:
            self.client.setex(self._key(session_key), self.ttl, state.to_json())
        except redis.RedisError as exc:
            raise StateStoreUnavailable("Redis unavailable while saving dashboard state") from exc


__all__ = [
    "AdminDraft",
    "DashboardState",
    "DashboardStateStore",
    "DeleteDialog",
    "StateStoreUnavailable",
]
