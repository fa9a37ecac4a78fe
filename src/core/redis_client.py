"""Shared Redis client factory for the dashboard state store."""

import redis
from django.conf import settings

_client: redis.Redis | None = None


def get_redis_client() -> redis.Redis:
    """Return a singleton Redis client built from REDIS_URL.

    Responses are decoded to ``str`` since the state store keeps JSON text.
    Socket timeouts keep an unreachable Redis from stalling a dashboard event;
    the store turns the resulting error into a 503.
    """

    global _client
    if _client is None:
        timeout = settings.REDIS_SOCKET_TIMEOUT
        _client = redis.Redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_timeout=timeout,
            socket_connect_timeout=timeout,
        )
    return _client


__all__ = ["get_redis_client"]
