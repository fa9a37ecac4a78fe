"""Async HTTP client for the platform's dashboard backend API.

Endpoints, relative to ``settings.DASHBOARD_API_BASE_URL``:

- ``GET /users``, ``GET /admins``, ``GET /articles`` return ``{<collection>: [...]}``
- ``DELETE /<collection>?id=<id>`` answers 2xx on success
- ``POST /admins`` with ``{name, email, password}`` returns ``{admin: {...}}``
  or ``{error: "..."}``

Each call is a single attempt: no retries and no idempotency keys. The caller's
bearer token is forwarded so the backend makes the real authorization decision.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx
from django.conf import settings

from .records import AdminRecord, EntityType, MalformedRecord, parse_records

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """Base class for failed backend calls."""


class BackendUnavailable(BackendError):
    """The request never produced a response (connection, DNS, timeout)."""


class BackendRejected(BackendError):
    """The backend answered with a non-2xx status or an unusable body."""

    def __init__(self, message: str, status_code: int | None = None, server_message: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.server_message = server_message

    @property
    def write_accepted(self) -> bool:
        """True when the backend answered 2xx but the body was unusable."""
        return self.status_code is not None and 200 <= self.status_code < 300


class DashboardAPIClient:
    """Thin async wrapper over ``httpx.AsyncClient`` for the dashboard endpoints."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._transport = transport

    def _session(self) -> httpx.AsyncClient:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=httpx.Timeout(self.timeout),
            transport=self._transport,
        )

    async def fetch_all(self) -> dict[EntityType, list | BackendError]:
        """Request the three collections concurrently and wait for all to settle.

        Each entry holds either the parsed records or the error that request
        raised; one failure does not cancel the others.
        """
        entity_types = list(EntityType)
        async with self._session() as http:
            results = await asyncio.gather(
                *(self._fetch_collection(http, entity_type) for entity_type in entity_types),
                return_exceptions=True,
            )

        outcome: dict[EntityType, list | BackendError] = {}
        for entity_type, result in zip(entity_types, results):
            if isinstance(result, BaseException) and not isinstance(result, BackendError):
                raise result
            outcome[entity_type] = result
        return outcome

    async def fetch_collection(self, entity_type: EntityType) -> list:
        async with self._session() as http:
            return await self._fetch_collection(http, entity_type)

    async def delete(self, entity_type: EntityType, record_id: str) -> None:
        async with self._session() as http:
            response = await self._send(http, "DELETE", f"/{entity_type.collection}", params={"id": record_id})
        if not response.is_success:
            raise BackendRejected(
                f"Deleting {entity_type.value} {record_id} failed with {response.status_code}",
                status_code=response.status_code,
                server_message=_error_message(response),
            )

    async def create_admin(self, name: str, email: str, password: str) -> AdminRecord:
        """Create an admin account and return the stored record.

        Raises ``BackendRejected`` with ``status_code`` set to the 2xx status
        when the backend accepted the write but returned no usable record.
        """
        async with self._session() as http:
            response = await self._send(
                http, "POST", "/admins", json={"name": name, "email": email, "password": password}
            )
        if not response.is_success:
            raise BackendRejected(
                f"Creating admin failed with {response.status_code}",
                status_code=response.status_code,
                server_message=_error_message(response),
            )
        try:
            return AdminRecord.from_payload(_json_body(response)["admin"])
        except (KeyError, TypeError, ValueError) as exc:
            raise BackendRejected(
                "Admin created but the response carried no admin record",
                status_code=response.status_code,
            ) from exc

    async def _fetch_collection(self, http: httpx.AsyncClient, entity_type: EntityType) -> list:
        response = await self._send(http, "GET", f"/{entity_type.collection}")
        if not response.is_success:
            raise BackendRejected(
                f"Fetching {entity_type.collection} failed with {response.status_code}",
                status_code=response.status_code,
                server_message=_error_message(response),
            )
        try:
            return parse_records(entity_type, _json_body(response)[entity_type.collection])
        except (KeyError, TypeError, ValueError, MalformedRecord) as exc:
            raise BackendRejected(
                f"Malformed {entity_type.collection} response: {exc}",
                status_code=response.status_code,
            ) from exc

    @staticmethod
    async def _send(http: httpx.AsyncClient, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return await http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise BackendUnavailable(f"{method} {path} failed: {exc}") from exc


def _json_body(response: httpx.Response) -> dict[str, Any]:
    body = response.json()
    if not isinstance(body, dict):
        raise TypeError("Expected a JSON object")
    return body


def _error_message(response: httpx.Response) -> str | None:
    """Return the backend's ``error`` string, if the body carries one."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("error"), str) and body["error"]:
        return body["error"]
    return None


def build_api_client(token: str | None = None) -> DashboardAPIClient:
    """Return a client configured from settings for the given session token."""

    return DashboardAPIClient(
        settings.DASHBOARD_API_BASE_URL,
        token=token,
        timeout=settings.DASHBOARD_API_TIMEOUT,
    )


__all__ = [
    "BackendError",
    "BackendRejected",
    "BackendUnavailable",
    "DashboardAPIClient",
    "build_api_client",
]
