"""Dashboard state persistence tests."""

from __future__ import annotations

import json
from unittest import mock

import redis
from django.test import SimpleTestCase

from dashboard.records import AdminRecord, ArticleRecord, EntityType, UserRecord
from dashboard.state import DashboardState, DashboardStateStore, StateStoreUnavailable
from tests.utils import FakeRedis


class DashboardStateStoreTests(SimpleTestCase):
    def setUp(self):
        self.redis = FakeRedis()
        self.store = DashboardStateStore(client=self.redis, ttl=60)

    def test_missing_key_yields_fresh_state(self):
        state = self.store.load("nobody")

        self.assertEqual(state.users, [])
        self.assertFalse(state.loaded)
        self.assertEqual(state.searches, {entity_type: "" for entity_type in EntityType})

    def test_saved_state_loads_back(self):
        state = DashboardState(
            users=[UserRecord(id="1", name="Ann", email="a@x.com", articles_generated=2)],
            admins=[AdminRecord(id="a1", name="Root", email="root@example.com", created_at="2024-01-01")],
            articles=[ArticleRecord(id="p1", title="Intro", author="1")],
            loaded=True,
        )
        state.searches[EntityType.ARTICLE] = "intro"
        state.new_admin.name = "Eve"
        state.delete_dialog.is_open = True
        state.delete_dialog.entity_type = EntityType.ADMIN
        state.delete_dialog.record_id = "a1"

        self.store.save("session-1", state)
        restored = self.store.load("session-1")

        self.assertEqual(restored.users, state.users)
        self.assertEqual(restored.admins, state.admins)
        self.assertEqual(restored.articles, state.articles)
        self.assertEqual(restored.searches[EntityType.ARTICLE], "intro")
        self.assertEqual(restored.new_admin.name, "Eve")
        self.assertEqual(restored.delete_dialog.entity_type, EntityType.ADMIN)
        self.assertTrue(restored.loaded)

    def test_draft_password_is_never_persisted(self):
        state = DashboardState()
        state.new_admin.password = "hunter2!"

        self.store.save("session-1", state)

        raw = self.redis.get("dashboard:state:session-1")
        self.assertNotIn("hunter2!", raw)
        self.assertNotIn("password", json.loads(raw)["new_admin"])

    def test_unreadable_state_is_discarded(self):
        self.redis.setex("dashboard:state:session-1", 60, "{not json")

        self.assertEqual(self.store.load("session-1").users, [])

    def test_redis_errors_raise_store_unavailable(self):
        broken = mock.Mock()
        broken.get.side_effect = redis.ConnectionError("down")
        store = DashboardStateStore(client=broken, ttl=60)

        with self.assertRaises(StateStoreUnavailable):
            store.load("session-1")

    def test_locked_waits_out_then_reports_busy_session(self):
        store = DashboardStateStore(client=self.redis, ttl=60, lock_timeout=0.05)

        with store.locked("session-1"):
            with self.assertRaises(StateStoreUnavailable):
                with store.locked("session-1"):
                    pass
            with store.locked("session-2"):
                pass

        with store.locked("session-1"):
            pass

    def test_locked_uses_a_per_session_redis_lock(self):
        client = mock.Mock()
        client.lock.return_value.acquire.return_value = True
        store = DashboardStateStore(client=client, ttl=60, lock_timeout=7)

        with store.locked("session-1"):
            client.lock.return_value.release.assert_not_called()

        client.lock.assert_called_once_with("dashboard:lock:session-1", timeout=7, blocking_timeout=7)
        client.lock.return_value.release.assert_called_once_with()

    def test_lock_errors_raise_store_unavailable(self):
        broken = mock.Mock()
        broken.lock.return_value.acquire.side_effect = redis.ConnectionError("down")
        store = DashboardStateStore(client=broken, ttl=60)

        with self.assertRaises(StateStoreUnavailable):
            with store.locked("session-1"):
                pass


class RedisClientFactoryTests(SimpleTestCase):
    @mock.patch("core.redis_client._client", None)
    @mock.patch("core.redis_client.redis.Redis.from_url")
    def test_client_is_built_once_from_settings(self, from_url):
        from core.redis_client import get_redis_client

        with self.settings(REDIS_URL="redis://cache.test:6379/3", REDIS_SOCKET_TIMEOUT=0.5):
            first = get_redis_client()
            second = get_redis_client()

        self.assertIs(first, second)
        from_url.assert_called_once_with(
            "redis://cache.test:6379/3",
            decode_responses=True,
            socket_timeout=0.5,
            socket_connect_timeout=0.5,
        )
