from __future__ import annotations

from django.db import transaction
from rest_framework import serializers

from txoko.announcements.models import Announcement
from txoko.announcements.models import AnnouncementMessage


class AnnouncementMessageSerializer(serializers.ModelSerializer[AnnouncementMessage]):
    class Meta:
        model = AnnouncementMessage
        fields = ["language", "title", "content"]


class AnnouncementSerializer(serializers.ModelSerializer[Announcement]):
    societyId = serializers.IntegerField(source="society_id", read_only=True)  # noqa: N815
    createdBy = serializers.IntegerField(source="created_by_id", read_only=True)  # noqa: N815
    isActive = serializers.BooleanField(source="is_active", required=False)  # noqa: N815
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)  # noqa: N815
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)  # noqa: N815
    messages = AnnouncementMessageSerializer(many=True, required=False)

    class Meta:
        model = Announcement
        fields = [
            "id",
            "societyId",
            "createdBy",
            "isActive",
            "createdAt",
            "updatedAt",
            "messages",
        ]

    def validate_messages(self, value):
        languages = [m["language"] for m in value]
        if len(languages) != len(set(languages)):
            msg = "Only one message per language is allowed."
            raise serializers.ValidationError(msg)
        return value

    def validate(self, attrs):
        if self.instance is None and not attrs.get("messages"):
            raise serializers.ValidationError(
                {"messages": "At least one message is required."}
            )
        return attrs

    def create(self, validated_data):
        messages = validated_data.pop("messages", [])
        with transaction.atomic():
            announcement = Announcement.objects.create(**validated_data)
            AnnouncementMessage.objects.bulk_create(
                AnnouncementMessage(announcement=announcement, **m) for m in messages
            )
        return announcement

    def update(self, instance, validated_data):
        messages = validated_data.pop("messages", None)
        with transaction.atomic():
            instance = super().update(instance, validated_data)
            if messages:
                instance.messages.all().delete()
                AnnouncementMessage.objects.bulk_create(
                    AnnouncementMessage(announcement=instance, **m) for m in messages
                )
        return instance
