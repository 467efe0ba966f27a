from __future__ import annotations

from rest_framework import serializers

from txoko.notifications.models import DEFAULT_LANGUAGE
from txoko.notifications.models import Language
from txoko.notifications.models import Notification
from txoko.notifications.services import localize


class NotificationSerializer(serializers.ModelSerializer[Notification]):
    """Notification rendered in ``context["language"]``."""

    userId = serializers.IntegerField(source="user_id", read_only=True)  # noqa: N815
    societyId = serializers.IntegerField(source="society_id", read_only=True)  # noqa: N815
    title = serializers.SerializerMethodField()
    message = serializers.SerializerMethodField()
    type = serializers.CharField(source="notification_type", read_only=True)
    isRead = serializers.BooleanField(source="is_read", read_only=True)  # noqa: N815
    readAt = serializers.DateTimeField(source="read_at", read_only=True)  # noqa: N815
    referenceId = serializers.SerializerMethodField()  # noqa: N815
    defaultLanguage = serializers.CharField(  # noqa: N815
        source="default_language", read_only=True
    )
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)  # noqa: N815
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)  # noqa: N815

    class Meta:
        model = Notification
        fields = [
            "id",
            "userId",
            "societyId",
            "title",
            "message",
            "type",
            "isRead",
            "readAt",
            "referenceId",
            "defaultLanguage",
            "createdAt",
            "updatedAt",
        ]

    def _localized(self, obj: Notification) -> tuple[str, str]:
        cache = self.context.setdefault("_localized", {})
        if obj.pk not in cache:
            language = self.context.get("language") or DEFAULT_LANGUAGE
            cache[obj.pk] = localize(obj, language)
        return cache[obj.pk]

    def get_title(self, obj: Notification) -> str:
        return self._localized(obj)[0]

    def get_message(self, obj: Notification) -> str:
        return self._localized(obj)[1]

    def get_referenceId(self, obj: Notification) -> str | None:  # noqa: N802
        return obj.reference_id or None


class LocalizedTextSerializer(serializers.Serializer):
    title = serializers.CharField(required=False, allow_blank=True)
    message = serializers.CharField(required=False, allow_blank=True)


class NotificationCreateSerializer(serializers.Serializer):
    """Payload for ``POST /notifications/``.

    ``messages`` maps a language code to ``{"title", "message"}``. Base
    ``title``/``message`` default to the Basque entry when omitted.
    """

    title = serializers.CharField(required=False, allow_blank=True, default="")
    message = serializers.CharField(required=False, allow_blank=True, default="")
    type = serializers.ChoiceField(
        choices=Notification.Type.choices, default=Notification.Type.INFO
    )
    targetUserId = serializers.IntegerField(required=False, allow_null=True)  # noqa: N815
    messages = serializers.DictField(child=LocalizedTextSerializer(), required=False)
    defaultLanguage = serializers.ChoiceField(  # noqa: N815
        choices=Language.choices, default=DEFAULT_LANGUAGE
    )

    def validate_messages(self, value):
        unknown = sorted(set(value) - set(Language.values))
        if unknown:
            msg = f"Unsupported languages: {', '.join(unknown)}"
            raise serializers.ValidationError(msg)
        return value

    def validate(self, attrs):
        basque = (attrs.get("messages") or {}).get(Language.BASQUE) or {}
        attrs["title"] = attrs["title"] or basque.get("title", "")
        attrs["message"] = attrs["message"] or basque.get("message", "")
        if not attrs["title"]:
            raise serializers.ValidationError({"title": "This field is required."})
        return attrs
