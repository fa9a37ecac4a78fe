"""Case-insensitive substring search over the dashboard collections."""

from typing import Callable, Iterable, TypeVar

from .records import AdminRecord, ArticleRecord, EntityType, UserRecord

R = TypeVar("R")


def _contains(value: str | None, query: str) -> bool:
    # A missing field never matches, not even the empty query.
    if value is None:
        return False
    return query in value.lower()


def user_matches(user: UserRecord, query: str) -> bool:
    needle = query.lower()
    return _contains(user.name, needle) or _contains(user.email, needle)


def admin_matches(admin: AdminRecord, query: str) -> bool:
    needle = query.lower()
    return _contains(admin.name, needle) or _contains(admin.email, needle)


def article_matches(article: ArticleRecord, query: str) -> bool:
    needle = query.lower()
    return _contains(article.title, needle) or _contains(article.author_name, needle)


PREDICATES: dict[EntityType, Callable] = {
    EntityType.USER: user_matches,
    EntityType.ADMIN: admin_matches,
    EntityType.ARTICLE: article_matches,
}


def filter_records(entity_type: EntityType, records: Iterable[R], query: str) -> list[R]:
    """Return the records of ``entity_type`` whose search fields contain ``query``.

    Recomputed on every call; an empty query keeps every record since each
    record has a title or name.
    """
    predicate = PREDICATES[entity_type]
    return [record for record in records if predicate(record, query)]


__all__ = ["admin_matches", "article_matches", "filter_records", "user_matches"]
