from __future__ import annotations

from typing import TYPE_CHECKING
from typing import Any

from txoko.chat.api.serializers import ChatMessageSerializer
from txoko.realtime.socketio import emit_to_room
from txoko.realtime.socketio import emit_to_user

if TYPE_CHECKING:  # import for type checking only
    from txoko.chat.models import ChatMessage
    from txoko.chat.models import ChatRoom


def build_message_payload(message: ChatMessage) -> dict[str, Any]:
    return dict(ChatMessageSerializer(message).data)


def publish_chat_message(room: ChatRoom, message: ChatMessage) -> None:
    """Deliver a message to the room (sender included) and ping the other member.

    Clients de-duplicate by message id.
    """

    payload = build_message_payload(message)
    emit_to_room(str(room.id), "new-message", payload)
    emit_to_user(
        room.other_participant_id(message.sender_id),
        "new-message-notification",
        {
            "roomId": str(room.id),
            "message": payload,
            "senderName": payload.get("senderName") or "Unknown User",
        },
    )
