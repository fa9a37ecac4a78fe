"""Search predicate tests for users, admins, and articles."""

from __future__ import annotations

from django.test import SimpleTestCase

from dashboard.filters import filter_records
from dashboard.records import AdminRecord, ArticleRecord, EntityType, UserRecord


class FilterTests(SimpleTestCase):
    """Substring matching is case-insensitive over each collection's search fields."""

    def setUp(self):
        self.users = [
            UserRecord(id="1", name="Ann", email="a@x.com"),
            UserRecord(id="2", name="Bob", email="bob@annex.org"),
            UserRecord(id="3", name="Carla", email="carla@example.com"),
        ]
        self.admins = [
            AdminRecord(id="a1", name="Root", email="root@example.com"),
            AdminRecord(id="a2", name="Dana", email="DANA@corp.io"),
        ]
        self.articles = [
            ArticleRecord(id="p1", title="Intro to Django", author="2", author_name="Bob"),
            ArticleRecord(id="p2", title="Weekly digest", author="1", author_name="Ann"),
            ArticleRecord(id="p3", title="Untitled", author="9"),
        ]

    def test_single_user_example(self):
        """A user named Ann matches "an" but not "zz"."""
        users = [UserRecord(id="1", name="Ann", email="a@x.com")]

        self.assertEqual(filter_records(EntityType.USER, users, "an"), users)
        self.assertEqual(filter_records(EntityType.USER, users, "zz"), [])

    def test_users_match_on_name_or_email(self):
        matched = filter_records(EntityType.USER, self.users, "AN")

        # "Ann" by name, "bob@annex.org" by email.
        self.assertEqual([u.id for u in matched], ["1", "2"])

    def test_user_role_is_not_searched(self):
        users = [UserRecord(id="1", name="Ann", email="a@x.com", role="admin")]
        self.assertEqual(filter_records(EntityType.USER, users, "admin"), [])

    def test_admins_match_on_name_or_email(self):
        self.assertEqual([a.id for a in filter_records(EntityType.ADMIN, self.admins, "corp")], ["a2"])
        self.assertEqual([a.id for a in filter_records(EntityType.ADMIN, self.admins, "dana")], ["a2"])
        self.assertEqual([a.id for a in filter_records(EntityType.ADMIN, self.admins, "example")], ["a1"])

    def test_articles_match_on_title_or_author_name(self):
        self.assertEqual([a.id for a in filter_records(EntityType.ARTICLE, self.articles, "django")], ["p1"])
        self.assertEqual([a.id for a in filter_records(EntityType.ARTICLE, self.articles, "ann")], ["p2"])

    def test_article_author_reference_is_not_searched(self):
        self.assertEqual(filter_records(EntityType.ARTICLE, self.articles, "9"), [])

    def test_empty_query_keeps_everything(self):
        self.assertEqual(filter_records(EntityType.USER, self.users, ""), self.users)
        self.assertEqual(filter_records(EntityType.ADMIN, self.admins, ""), self.admins)
        self.assertEqual(filter_records(EntityType.ARTICLE, self.articles, ""), self.articles)

    def test_matching_lowercases_without_case_folding(self):
        users = [UserRecord(id="1", name="Straße", email="s@x.com")]

        self.assertEqual(filter_records(EntityType.USER, users, "STRASSE"), [])
        self.assertEqual(filter_records(EntityType.USER, users, "STRAßE"), users)

    def test_filtered_view_is_exactly_the_matching_records(self):
        """Every record is either in the view and matching, or out of it and not matching."""
        query = "o"
        matched = filter_records(EntityType.USER, self.users, query)
        for user in self.users:
            contains = query in user.name.lower() or query in user.email.lower()
            self.assertEqual(user in matched, contains, user)
