from __future__ import annotations

from rest_framework import serializers

from txoko.chat.models import ChatMessage
from txoko.chat.models import ChatRoom


class ChatMessageSerializer(serializers.ModelSerializer[ChatMessage]):
    roomId = serializers.UUIDField(source="room_id", read_only=True)  # noqa: N815
    senderId = serializers.IntegerField(source="sender_id", read_only=True)  # noqa: N815
    messageType = serializers.CharField(source="message_type", read_only=True)  # noqa: N815
    isRead = serializers.BooleanField(source="is_read", read_only=True)  # noqa: N815
    readAt = serializers.DateTimeField(source="read_at", read_only=True)  # noqa: N815
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)  # noqa: N815
    senderName = serializers.CharField(source="sender.name", read_only=True)  # noqa: N815
    senderRole = serializers.CharField(source="sender.role", read_only=True)  # noqa: N815

    class Meta:
        model = ChatMessage
        fields = [
            "id",
            "roomId",
            "senderId",
            "content",
            "messageType",
            "isRead",
            "readAt",
            "createdAt",
            "senderName",
            "senderRole",
        ]


class ChatMessageCreateSerializer(serializers.Serializer):
    id = serializers.UUIDField(required=False)
    content = serializers.CharField(trim_whitespace=True)
    messageType = serializers.ChoiceField(  # noqa: N815
        choices=ChatMessage.MessageType.choices,
        default=ChatMessage.MessageType.TEXT,
    )

    def validate_id(self, value):
        if ChatMessage.objects.filter(pk=value).exists():
            msg = "A message with this id already exists."
            raise serializers.ValidationError(msg)
        return value


class ChatRoomCreateSerializer(serializers.Serializer):
    otherUserId = serializers.IntegerField()  # noqa: N815


class ChatRoomSerializer(serializers.ModelSerializer[ChatRoom]):
    """Room as seen by ``context["user_id"]``."""

    user1Id = serializers.IntegerField(source="user1_id", read_only=True)  # noqa: N815
    user2Id = serializers.IntegerField(source="user2_id", read_only=True)  # noqa: N815
    lastMessageAt = serializers.DateTimeField(  # noqa: N815
        source="last_message_at", read_only=True
    )
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)  # noqa: N815
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)  # noqa: N815
    otherUserId = serializers.SerializerMethodField()  # noqa: N815
    otherUserName = serializers.SerializerMethodField()  # noqa: N815
    otherUserRole = serializers.SerializerMethodField()  # noqa: N815
    unread = serializers.SerializerMethodField()
    lastMessage = serializers.SerializerMethodField()  # noqa: N815

    class Meta:
        model = ChatRoom
        fields = [
            "id",
            "user1Id",
            "user2Id",
            "lastMessageAt",
            "createdAt",
            "updatedAt",
            "otherUserId",
            "otherUserName",
            "otherUserRole",
            "unread",
            "lastMessage",
        ]

    def _other_user(self, obj: ChatRoom):
        user_id = self.context.get("user_id")
        return obj.user2 if obj.user1_id == user_id else obj.user1

    def get_otherUserId(self, obj: ChatRoom) -> int:  # noqa: N802
        return obj.other_participant_id(self.context.get("user_id"))

    def get_otherUserName(self, obj: ChatRoom) -> str:  # noqa: N802
        return self._other_user(obj).name or "Unknown User"

    def get_otherUserRole(self, obj: ChatRoom) -> str:  # noqa: N802
        return self._other_user(obj).role or "member"

    def get_unread(self, obj: ChatRoom) -> int:
        return int(getattr(obj, "unread_count", 0) or 0)

    def get_lastMessage(self, obj: ChatRoom) -> dict | None:  # noqa: N802
        content = getattr(obj, "last_message_content", None)
        if obj.last_message_at is None or content is None:
            return None
        created = getattr(obj, "last_message_created_at", None)
        return {
            "content": content,
            "createdAt": created.isoformat() if created else None,
        }
