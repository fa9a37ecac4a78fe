"""Serializers for dashboard events and the dashboard snapshot."""

from rest_framework import serializers

from .records import EntityType

ENTITY_TYPE_CHOICES = [entity_type.value for entity_type in EntityType]
COLLECTION_CHOICES = [entity_type.collection for entity_type in EntityType]


class SearchSerializer(serializers.Serializer):
    """Update the search string of one collection."""

    collection = serializers.ChoiceField(choices=COLLECTION_CHOICES)
    query = serializers.CharField(allow_blank=True, trim_whitespace=False)

    def validate_collection(self, value):
        return EntityType.from_collection(value)


class DeleteDialogSerializer(serializers.Serializer):
    """Open the delete confirmation prompt for one record."""

    type = serializers.ChoiceField(choices=ENTITY_TYPE_CHOICES)
    id = serializers.CharField()
    name = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_type(self, value):
        return EntityType(value)


class NewAdminSerializer(serializers.Serializer):
    """Create-admin form inputs.

    Blank values are accepted here; the controller reports missing fields as a
    notification without contacting the backend. Values are passed on as typed,
    so whitespace counts as input.
    """

    name = serializers.CharField(required=False, allow_blank=True, default="", trim_whitespace=False)
    email = serializers.CharField(required=False, allow_blank=True, default="", trim_whitespace=False)
    password = serializers.CharField(required=False, allow_blank=True, default="", write_only=True, trim_whitespace=False)


class UserRecordSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    email = serializers.CharField()
    role = serializers.CharField()
    articles_generated = serializers.IntegerField()


class AdminRecordSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    email = serializers.CharField()
    created_at = serializers.CharField()


class ArticleRecordSerializer(serializers.Serializer):
    id = serializers.CharField()
    title = serializers.CharField()
    author = serializers.CharField()
    author_name = serializers.CharField(allow_null=True)
    status = serializers.CharField()
    created_at = serializers.CharField()


class UserCollectionSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    search = serializers.CharField()
    results = UserRecordSerializer(many=True)


class AdminCollectionSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    search = serializers.CharField()
    results = AdminRecordSerializer(many=True)


class ArticleCollectionSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    search = serializers.CharField()
    results = ArticleRecordSerializer(many=True)


class ViewerSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    email = serializers.CharField()
    role = serializers.CharField(allow_null=True)


class DraftSerializer(serializers.Serializer):
    name = serializers.CharField()
    email = serializers.CharField()


class DialogSerializer(serializers.Serializer):
    is_open = serializers.BooleanField()
    type = serializers.CharField(allow_null=True)
    id = serializers.CharField()
    name = serializers.CharField()


class NotificationSerializer(serializers.Serializer):
    level = serializers.CharField()
    message = serializers.CharField()


class DashboardSerializer(serializers.Serializer):
    """Read-only snapshot returned by every dashboard event.

    A snapshot is rendered after the event's backend calls have settled, so
    ``is_loading`` is always false here.
    """

    viewer = ViewerSerializer()
    is_loading = serializers.BooleanField(help_text="Always false: snapshots are taken once loading has settled.")
    users = UserCollectionSerializer()
    admins = AdminCollectionSerializer()
    articles = ArticleCollectionSerializer()
    new_admin = DraftSerializer()
    delete_dialog = DialogSerializer()
    notifications = NotificationSerializer(many=True)


__all__ = [
    "DashboardSerializer",
    "DeleteDialogSerializer",
    "NewAdminSerializer",
    "SearchSerializer",
]
