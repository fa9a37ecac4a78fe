"""Records mirrored from the backend API: users, admins, and articles.

Payloads use the backend's wire names (``_id``, ``articlesGenerated``,
``authorName``, ``createdAt``). ``from_payload`` raises ``MalformedRecord``
when a required key is missing so the caller can discard the whole response.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class MalformedRecord(ValueError):
    """A backend payload lacks a field the dashboard needs."""


class EntityType(str, Enum):
    """The three resources the dashboard manages."""

    USER = "user"
    ADMIN = "admin"
    ARTICLE = "article"

    @property
    def collection(self) -> str:
        """Plural name: backend path segment and response payload key."""
        return f"{self.value}s"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def record_class(self) -> type:
        return RECORD_CLASSES[self]

    @classmethod
    def from_collection(cls, collection: str) -> EntityType:
        for entity_type in cls:
            if entity_type.collection == collection:
                return entity_type
        raise ValueError(f"Unknown collection: {collection!r}")


def _require(payload: Mapping[str, Any], key: str) -> Any:
    if not isinstance(payload, Mapping):
        raise MalformedRecord(f"Expected an object, got {type(payload).__name__}")
    value = payload.get(key)
    if value is None:
        raise MalformedRecord(f"Missing field {key!r}")
    return value


@dataclass
class UserRecord:
    id: str
    name: str
    email: str
    role: str = "user"
    articles_generated: int = 0

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> UserRecord:
        return cls(
            id=str(_require(payload, "_id")),
            name=str(_require(payload, "name")),
            email=str(_require(payload, "email")),
            role=str(payload.get("role") or "user"),
            articles_generated=int(payload.get("articlesGenerated") or 0),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "articlesGenerated": self.articles_generated,
        }


@dataclass
class AdminRecord:
    id: str
    name: str
    email: str
    created_at: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> AdminRecord:
        return cls(
            id=str(_require(payload, "_id")),
            name=str(_require(payload, "name")),
            email=str(_require(payload, "email")),
            created_at=str(payload.get("createdAt") or ""),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "name": self.name,
            "email": self.email,
            "createdAt": self.created_at,
        }


@dataclass
class ArticleRecord:
    id: str
    title: str
    author: str
    author_name: str | None = None
    # Open-ended; the backend uses "draft" and "published" today.
    status: str = "draft"
    created_at: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> ArticleRecord:
        author_name = payload.get("authorName")
        return cls(
            id=str(_require(payload, "_id")),
            title=str(_require(payload, "title")),
            author=str(payload.get("author") or ""),
            author_name=str(author_name) if author_name is not None else None,
            status=str(payload.get("status") or "draft"),
            created_at=str(payload.get("createdAt") or ""),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "title": self.title,
            "author": self.author,
            "authorName": self.author_name,
            "status": self.status,
            "createdAt": self.created_at,
        }


RECORD_CLASSES: dict[EntityType, type] = {
    EntityType.USER: UserRecord,
    EntityType.ADMIN: AdminRecord,
    EntityType.ARTICLE: ArticleRecord,
}


def parse_records(entity_type: EntityType, payloads: Any) -> list:
    """Parse a list of backend payloads into records of ``entity_type``."""
    if not isinstance(payloads, list):
        raise MalformedRecord(f"Expected a list of {entity_type.collection}")
    record_class = entity_type.record_class
    return [record_class.from_payload(item) for item in payloads]


__all__ = [
    "AdminRecord",
    "ArticleRecord",
    "EntityType",
    "MalformedRecord",
    "UserRecord",
    "parse_records",
]
