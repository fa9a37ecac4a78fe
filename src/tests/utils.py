"""Shared helpers for tests (session tokens, fake Redis, fake backend API)."""

from __future__ import annotations

import json
import threading
import time
import uuid
from typing import Dict

import httpx
import jwt
from django.conf import settings

from dashboard.client import DashboardAPIClient

BACKEND_URL = "http://backend.test/api/ghost-dashboard"


class FakeLock:
    """Thread lock with the acquire/release surface of ``redis.lock.Lock``."""

    def __init__(self, lock: threading.Lock, blocking_timeout: float | None = None):
        self._lock = lock
        self.blocking_timeout = blocking_timeout

    def acquire(self) -> bool:
        timeout = -1 if self.blocking_timeout is None else self.blocking_timeout
        return self._lock.acquire(timeout=timeout)

    def release(self) -> None:
        self._lock.release()


class FakeRedis:
    """Minimal Redis stub supporting the commands used by DashboardStateStore."""

    def __init__(self):
        self._store: Dict[str, str] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def setex(self, key: str, ttl_seconds: int, value: str) -> None:
        """Mimic Redis SETEX; TTL is ignored in tests, value stored in-memory."""
        self._store[key] = value

    def get(self, key: str):
        """Return stored value for key or None, matching Redis GET semantics."""
        return self._store.get(key)

    def lock(self, name: str, timeout: float | None = None, blocking_timeout: float | None = None) -> FakeLock:
        """Named lock shared by every caller; the lease timeout is ignored."""
        with self._locks_guard:
            lock = self._locks.setdefault(name, threading.Lock())
        return FakeLock(lock, blocking_timeout)


def make_token(role: str | None = "admin", **claims) -> str:
    """Mint an access token the way the platform's auth service does."""

    now = int(time.time())
    payload = {
        "sub": claims.pop("sub", str(uuid.uuid4())),
        "jti": str(uuid.uuid4()),
        "iat": now,
        "exp": now + 900,
        "type": "access",
        "name": "Grace Admin",
        "email": "grace@example.com",
        **claims,
    }
    if role is not None:
        payload["role"] = role
    return jwt.encode(payload, settings.SESSION_TOKEN_SECRET, algorithm="HS256")


def user_payload(_id: str, name: str, email: str, role: str = "user", articles: int = 0) -> dict:
    return {"_id": _id, "name": name, "email": email, "role": role, "articlesGenerated": articles}


def admin_payload(_id: str, name: str, email: str, created_at: str = "2024-05-01T10:00:00.000Z") -> dict:
    return {"_id": _id, "name": name, "email": email, "createdAt": created_at}


def article_payload(
    _id: str, title: str, author: str, author_name: str | None = None, status: str = "published"
) -> dict:
    payload = {"_id": _id, "title": title, "author": author, "status": status, "createdAt": "2024-05-02T08:30:00.000Z"}
    if author_name is not None:
        payload["authorName"] = author_name
    return payload


class FakeBackend:
    """In-memory dashboard backend API served through ``httpx.MockTransport``.

    ``fail(method, collection, ...)`` makes the matching endpoint answer with an
    error status, or raise a transport error when ``exc`` is given.
    """

    def __init__(self, users=None, admins=None, articles=None):
        self.collections = {
            "users": list(users or []),
            "admins": list(admins or []),
            "articles": list(articles or []),
        }
        self.requests: list[httpx.Request] = []
        self._failures: dict[tuple[str, str], tuple[int, dict] | Exception] = {}
        self._holds: dict[tuple[str, str], tuple[threading.Event, threading.Event]] = {}
        self._created = 0

    def fail(self, method: str, collection: str, status: int = 500, body=None, exc: Exception | None = None):
        self._failures[(method, collection)] = exc or (status, body if body is not None else {})

    def hold(self, method: str, collection: str) -> tuple[threading.Event, threading.Event]:
        """Keep the matching request open until ``release`` is set.

        Returns ``(entered, release)``; ``entered`` is set once the request arrives.
        """
        entered, release = threading.Event(), threading.Event()
        self._holds[(method, collection)] = (entered, release)
        return entered, release

    def requests_for(self, method: str) -> list[httpx.Request]:
        return [request for request in self.requests if request.method == method]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        collection = request.url.path.rstrip("/").rsplit("/", 1)[-1]

        held = self._holds.get((request.method, collection))
        if held is not None:
            entered, release = held
            entered.set()
            release.wait(timeout=5)

        failure = self._failures.get((request.method, collection))
        if isinstance(failure, Exception):
            raise failure
        if failure is not None:
            status, body = failure
            return httpx.Response(status, json=body)

        if request.method == "GET":
            return httpx.Response(200, json={collection: self.collections[collection]})
        if request.method == "DELETE":
            record_id = request.url.params.get("id")
            self.collections[collection] = [r for r in self.collections[collection] if r["_id"] != record_id]
            return httpx.Response(200, json={"message": "deleted"})
        if request.method == "POST" and collection == "admins":
            body = json.loads(request.content)
            self._created += 1
            admin = admin_payload(f"new-admin-{self._created}", body["name"], body["email"])
            self.collections["admins"].append(admin)
            return httpx.Response(201, json={"admin": admin})
        return httpx.Response(405, json={"error": "Method not allowed"})

    def client(self, token: str | None = None) -> DashboardAPIClient:
        return DashboardAPIClient(BACKEND_URL, token=token, transport=httpx.MockTransport(self.handler))


def sample_backend() -> FakeBackend:
    """Backend seeded with a few records of each kind."""

    return FakeBackend(
        users=[
            user_payload("1", "Ann", "a@x.com", articles=3),
            user_payload("2", "Bob Stone", "bob@example.com", role="admin"),
            user_payload("3", "Carla", "carla@ANNEX.org"),
        ],
        admins=[
            admin_payload("a1", "Root", "root@example.com"),
            admin_payload("a2", "Dana", "dana@example.com"),
        ],
        articles=[
            article_payload("1", "Intro to Django", "2", author_name="Bob Stone"),
            article_payload("p2", "Annual report", "1", author_name="Ann", status="draft"),
            article_payload("p3", "Orphaned draft", "9"),
        ],
    )
