import uuid

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _


class ChatRoomQuerySet(models.QuerySet):
    def for_participant(self, user_id):
        return self.filter(Q(user1_id=user_id) | Q(user2_id=user_id))

    def between(self, user_a_id, user_b_id):
        return self.filter(
            Q(user1_id=user_a_id, user2_id=user_b_id)
            | Q(user1_id=user_b_id, user2_id=user_a_id)
        )


class ChatRoom(models.Model):
    """One-to-one conversation between two members of a society."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    society = models.ForeignKey(
        "societies.Society", on_delete=models.CASCADE, related_name="chat_rooms"
    )
    user1 = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="+"
    )
    user2 = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="+"
    )
    is_active = models.BooleanField(default=True)
    last_message_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ChatRoomQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.user1_id} <-> {self.user2_id}"

    def other_participant_id(self, user_id):
        return self.user2_id if self.user1_id == user_id else self.user1_id


class ChatMessage(models.Model):
    class MessageType(models.TextChoices):
        TEXT = "text", _("Text")
        IMAGE = "image", _("Image")
        FILE = "file", _("File")

    # Clients may supply the id to de-duplicate optimistic renders.
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    room = models.ForeignKey(ChatRoom, on_delete=models.CASCADE, related_name="messages")
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="chat_messages"
    )
    content = models.TextField()
    message_type = models.CharField(
        max_length=20, choices=MessageType.choices, default=MessageType.TEXT
    )
    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]

    def __str__(self):
        return f"{self.sender_id}: {self.content[:40]}"
