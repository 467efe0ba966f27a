import uuid
from datetime import timedelta
from unittest import mock

import pytest
from django.utils import timezone
from rest_framework import status

from txoko.chat.models import ChatMessage
from txoko.chat.models import ChatRoom
from txoko.conftest import make_member

pytestmark = pytest.mark.django_db

ROOMS_URL = "/api/v1/chat/rooms/"


@pytest.fixture
def room(member, treasurer):
    return ChatRoom.objects.create(
        society=member.society, user1=member, user2=treasurer
    )


def _messages_url(room):
    return f"{ROOMS_URL}{room.id}/messages/"


def test_create_room(auth_client, member, treasurer):
    r = auth_client(member).post(
        ROOMS_URL, {"otherUserId": treasurer.id}, format="json"
    )
    assert r.status_code == status.HTTP_201_CREATED, r.data
    assert r.data["otherUserId"] == treasurer.id
    assert r.data["otherUserName"] == treasurer.name


def test_existing_room_is_returned_for_either_side(auth_client, room, treasurer):
    r = auth_client(treasurer).post(
        ROOMS_URL, {"otherUserId": room.user1_id}, format="json"
    )
    assert r.status_code == status.HTTP_200_OK
    assert r.data["id"] == str(room.id)
    assert ChatRoom.objects.count() == 1


def test_cannot_chat_with_self(auth_client, member):
    r = auth_client(member).post(ROOMS_URL, {"otherUserId": member.id}, format="json")
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.data["message"] == "Invalid user ID"


def test_cannot_chat_across_societies(auth_client, member, other_society):
    stranger = make_member(other_society, "stranger")
    r = auth_client(member).post(
        ROOMS_URL, {"otherUserId": stranger.id}, format="json"
    )
    assert r.status_code == status.HTTP_400_BAD_REQUEST


def test_list_rooms_with_unread_and_last_message(auth_client, room, member, treasurer):
    start = timezone.now() - timedelta(minutes=10)
    for minutes, (sender, content) in enumerate(
        [(treasurer, "Kaixo"), (treasurer, "Zer moduz?"), (member, "Ondo")]
    ):
        msg = ChatMessage.objects.create(room=room, sender=sender, content=content)
        ChatMessage.objects.filter(pk=msg.pk).update(
            created_at=start + timedelta(minutes=minutes)
        )
    room.last_message_at = start + timedelta(minutes=2)
    room.save()

    r = auth_client(member).get(ROOMS_URL)
    assert r.status_code == status.HTTP_200_OK
    [data] = r.data
    assert data["unread"] == 2  # noqa: PLR2004
    assert data["lastMessage"]["content"] == "Ondo"
    assert data["otherUserId"] == treasurer.id


def test_outsider_does_not_see_room(auth_client, room, cellarman):
    assert auth_client(cellarman).get(ROOMS_URL).data == []
    r = auth_client(cellarman).get(_messages_url(room))
    assert r.status_code == status.HTTP_404_NOT_FOUND


def test_history_marks_incoming_read(auth_client, room, member, treasurer):
    incoming = ChatMessage.objects.create(room=room, sender=treasurer, content="a")
    outgoing = ChatMessage.objects.create(room=room, sender=member, content="b")

    r = auth_client(member).get(_messages_url(room))
    assert r.status_code == status.HTTP_200_OK
    assert [m["content"] for m in r.data] == ["a", "b"]
    incoming.refresh_from_db()
    outgoing.refresh_from_db()
    assert incoming.is_read is True
    assert outgoing.is_read is False


def test_send_message_publishes_after_commit(
    auth_client, room, member, treasurer, django_capture_on_commit_callbacks
):
    client_id = uuid.uuid4()
    with mock.patch(
        "txoko.realtime.events.chat.emit_to_room"
    ) as to_room, mock.patch(
        "txoko.realtime.events.chat.emit_to_user"
    ) as to_user, django_capture_on_commit_callbacks(execute=True):
        r = auth_client(member).post(
            _messages_url(room),
            {"id": str(client_id), "content": "  Kaixo!  "},
            format="json",
        )
    assert r.status_code == status.HTTP_201_CREATED, r.data
    assert r.data["id"] == str(client_id)
    assert r.data["content"] == "Kaixo!"

    to_room.assert_called_once()
    assert to_room.call_args.args[:2] == (str(room.id), "new-message")
    to_user.assert_called_once()
    user_id, event, payload = to_user.call_args.args
    assert user_id == treasurer.id
    assert event == "new-message-notification"
    assert payload["roomId"] == str(room.id)
    assert payload["senderName"] == member.name

    room.refresh_from_db()
    assert room.last_message_at is not None


def test_blank_message_is_rejected(auth_client, room, member):
    r = auth_client(member).post(_messages_url(room), {"content": "   "}, format="json")
    assert r.status_code == status.HTTP_400_BAD_REQUEST


def test_duplicate_client_id_is_rejected(auth_client, room, member):
    existing = ChatMessage.objects.create(room=room, sender=member, content="x")
    r = auth_client(member).post(
        _messages_url(room),
        {"id": str(existing.id), "content": "again"},
        format="json",
    )
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert "id" in r.data
