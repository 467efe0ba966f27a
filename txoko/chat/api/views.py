from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Count
from django.db.models import F
from django.db.models import OuterRef
from django.db.models import Q
from django.db.models import Subquery
from django.utils import timezone
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from txoko.chat.models import ChatMessage
from txoko.chat.models import ChatRoom
from txoko.core.exceptions import error_response
from txoko.core.society import society_id_for
from txoko.realtime.events.chat import publish_chat_message

from .serializers import ChatMessageCreateSerializer
from .serializers import ChatMessageSerializer
from .serializers import ChatRoomCreateSerializer
from .serializers import ChatRoomSerializer

logger = logging.getLogger(__name__)

User = get_user_model()


@extend_schema_view(
    list=extend_schema(tags=["Chat"]),
    create=extend_schema(tags=["Chat"], request=ChatRoomCreateSerializer),
    messages=extend_schema(tags=["Chat"]),
)
class ChatRoomViewSet(GenericViewSet):
    """One-to-one chat rooms of the authenticated member.

    - list: rooms with unread count and last message
    - create: get-or-create the room shared with ``otherUserId``
    - messages (GET): history, marking the other member's messages read
    - messages (POST): send, then push ``new-message`` in realtime
    """

    permission_classes = [IsAuthenticated]
    serializer_class = ChatRoomSerializer
    pagination_class = None

    def get_queryset(self):
        user = self.request.user
        return (
            ChatRoom.objects.filter(society_id=society_id_for(user))
            .for_participant(user.id)
            .select_related("user1", "user2")
        )

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context["user_id"] = self.request.user.id
        return context

    def list(self, request):
        last = ChatMessage.objects.filter(room=OuterRef("pk")).order_by("-created_at")
        rooms = (
            self.get_queryset()
            .annotate(
                unread_count=Count(
                    "messages",
                    filter=Q(messages__is_read=False)
                    & ~Q(messages__sender_id=request.user.id),
                ),
                last_message_content=Subquery(last.values("content")[:1]),
                last_message_created_at=Subquery(last.values("created_at")[:1]),
            )
            .order_by(F("last_message_at").desc(nulls_last=True), "-created_at")
        )
        return Response(self.get_serializer(rooms, many=True).data)

    def create(self, request):
        serializer = ChatRoomCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        other_id = serializer.validated_data["otherUserId"]
        society_id = society_id_for(request.user)

        if other_id == request.user.id or not User.objects.filter(
            pk=other_id, society_id=society_id, is_active=True
        ).exists():
            return error_response("Invalid user ID", status.HTTP_400_BAD_REQUEST)

        existing = self.get_queryset().between(request.user.id, other_id).first()
        if existing is not None:
            return Response(self.get_serializer(existing).data)

        room = ChatRoom.objects.create(
            society_id=society_id,
            user1_id=request.user.id,
            user2_id=other_id,
        )
        logger.info(
            "Chat room %s created between %s and %s", room.id, request.user.id, other_id
        )
        return Response(
            self.get_serializer(room).data,
            status=status.HTTP_201_CREATED,
        )

    @action(detail=True, methods=["get", "post"])
    def messages(self, request, pk=None):
        room = self.get_object()
        if request.method == "POST":
            return self._send_message(request, room)

        history = room.messages.select_related("sender").order_by("created_at")
        data = ChatMessageSerializer(history, many=True).data
        room.messages.filter(is_read=False).exclude(sender_id=request.user.id).update(
            is_read=True, read_at=timezone.now()
        )
        return Response(data)

    def _send_message(self, request, room: ChatRoom):
        serializer = ChatMessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        content = data["content"].strip()
        if not content:
            return error_response(
                "Message content is required",
                status.HTTP_400_BAD_REQUEST,
            )

        with transaction.atomic():
            extra = {"id": data["id"]} if data.get("id") else {}
            message = ChatMessage.objects.create(
                room=room,
                sender=request.user,
                content=content,
                message_type=data["messageType"],
                **extra,
            )
            room.last_message_at = message.created_at
            room.save(update_fields=["last_message_at", "updated_at"])
            transaction.on_commit(lambda: publish_chat_message(room, message))

        return Response(
            ChatMessageSerializer(message).data,
            status=status.HTTP_201_CREATED,
        )
