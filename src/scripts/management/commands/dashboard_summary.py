"""Print the admin dashboard collections for a session token."""

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand, CommandError
from rest_framework.exceptions import AuthenticationFailed

from authentication.services import TokenService
from dashboard.client import build_api_client
from dashboard.controller import DashboardController
from dashboard.notifications import ERROR
from dashboard.records import AdminRecord, ArticleRecord, EntityType, UserRecord


class Command(BaseCommand):
    """Management command to load and filter the dashboard from a terminal."""

    help = (
        "Load users, admins, and articles from the backend API using an admin "
        "session token and print each collection, optionally filtered."
    )

    def add_arguments(self, parser):
        parser.add_argument("--token", required=True, help="Admin session JWT forwarded to the backend API.")
        for entity_type in EntityType:
            parser.add_argument(
                f"--{entity_type.collection}",
                default="",
                metavar="QUERY",
                help=f"Only list {entity_type.collection} matching QUERY (case-insensitive).",
            )

    def handle(self, *args, **options):
        """Entrypoint for the management command."""
        token = options["token"]
        try:
            identity = TokenService.identity_from_token(token)
        except AuthenticationFailed as exc:
            raise CommandError(f"Invalid session token: {exc.detail}") from exc
        if not identity.is_admin:
            raise CommandError("Admin session required.")

        controller = DashboardController(build_api_client(token))
        async_to_sync(controller.load)()

        for entity_type in EntityType:
            controller.set_search(entity_type, options[entity_type.collection])
            matches = controller.filtered(entity_type)
            total = len(controller.state.records(entity_type))
            self.stdout.write(self.style.MIGRATE_HEADING(f"{entity_type.label}s ({len(matches)} of {total})"))
            for record in matches:
                self.stdout.write(f"  {self._describe(record)}")

        for notification in controller.notifications:
            style = self.style.ERROR if notification.level == ERROR else self.style.SUCCESS
            self.stderr.write(style(notification.message))

    @staticmethod
    def _describe(record) -> str:
        if isinstance(record, UserRecord):
            return f"{record.id}  {record.name} <{record.email}>  [{record.role}]  {record.articles_generated} articles"
        if isinstance(record, AdminRecord):
            return f"{record.id}  {record.name} <{record.email}>  created {record.created_at or '-'}"
        if isinstance(record, ArticleRecord):
            return f"{record.id}  {record.title}  by {record.author_name or record.author}  ({record.status})"
        return str(record)
