from unittest import mock

import pytest
from rest_framework import status

from txoko.conftest import make_member
from txoko.notifications.models import Notification
from txoko.notifications.services import create_notification

pytestmark = pytest.mark.django_db

URL = "/api/v1/notifications/"


@pytest.fixture(autouse=True)
def _no_realtime():
    with mock.patch("txoko.realtime.events.notifications.emit_to_user"):
        yield


def _make(user, title="Title", *, read=False, reference_id="", messages=None):
    n = create_notification(
        user_id=user.id,
        society_id=user.society_id,
        title=title,
        message=f"{title} body",
        reference_id=reference_id,
        messages=messages,
    )
    if read:
        Notification.objects.filter(pk=n.pk).update(is_read=True)
    return n


def test_list_is_paginated_newest_first(auth_client, member):
    for i in range(3):
        _make(member, f"n{i}")
    r = auth_client(member).get(URL, {"limit": 2})
    assert r.status_code == status.HTTP_200_OK, r.data
    assert [n["title"] for n in r.data["notifications"]] == ["n2", "n1"]
    assert r.data["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}

    r = auth_client(member).get(URL, {"limit": 2, "page": 2})
    assert [n["title"] for n in r.data["notifications"]] == ["n0"]


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("unread", {"new"}),
        ("read", {"old"}),
        ("all", {"new", "old"}),
        ("bogus", {"new", "old"}),
    ],
)
def test_list_filter(auth_client, member, value, expected):
    _make(member, "new")
    _make(member, "old", read=True)
    r = auth_client(member).get(URL, {"filter": value})
    assert {n["title"] for n in r.data["notifications"]} == expected
    assert r.data["pagination"]["total"] == len(expected)


def test_list_is_localized(auth_client, member):
    _make(
        member,
        messages={
            "eu": {"title": "Kaixo", "message": "a"},
            "es": {"title": "Hola", "message": "b"},
        },
    )
    r = auth_client(member).get(URL, {"lang": "es"})
    assert r.data["notifications"][0]["title"] == "Hola"
    client = auth_client(member)
    r = client.get(URL, HTTP_ACCEPT_LANGUAGE="eu")
    assert r.data["notifications"][0]["title"] == "Kaixo"


def test_list_only_shows_own_notifications(auth_client, member, treasurer):
    _make(treasurer, "theirs")
    _make(member, "mine")
    r = auth_client(member).get(URL)
    assert [n["title"] for n in r.data["notifications"]] == ["mine"]


def test_unread_count(auth_client, member):
    _make(member)
    _make(member)
    _make(member, read=True)
    r = auth_client(member).get(f"{URL}unread-count/")
    assert r.data == {"count": 2}


def test_recent_returns_five(auth_client, member):
    for i in range(7):
        _make(member, f"n{i}")
    r = auth_client(member).get(f"{URL}recent/")
    assert len(r.data) == 5  # noqa: PLR2004
    assert r.data[0]["title"] == "n6"


def test_mark_read(auth_client, member):
    n = _make(member)
    r = auth_client(member).patch(f"{URL}{n.id}/read/")
    assert r.status_code == status.HTTP_200_OK
    assert r.data["isRead"] is True
    n.refresh_from_db()
    assert n.read_at is not None


def test_mark_read_of_someone_else_is_404(auth_client, member, treasurer):
    n = _make(treasurer)
    r = auth_client(member).patch(f"{URL}{n.id}/read/")
    assert r.status_code == status.HTTP_404_NOT_FOUND


def test_mark_all_read(auth_client, member, treasurer):
    _make(member)
    _make(member)
    other = _make(treasurer)
    r = auth_client(member).patch(f"{URL}mark-all-read/")
    assert r.status_code == status.HTTP_200_OK
    assert r.data["updated"] == 2  # noqa: PLR2004
    assert not Notification.objects.filter(user=member, is_read=False).exists()
    other.refresh_from_db()
    assert other.is_read is False


def test_mark_announcement_notifications_read(auth_client, member):
    plain = _make(member)
    from_announcement = _make(member, reference_id="announcement:7")
    r = auth_client(member).patch(f"{URL}notes/mark-all-read/")
    assert r.status_code == status.HTTP_200_OK
    assert r.data["success"] is True
    plain.refresh_from_db()
    from_announcement.refresh_from_db()
    assert plain.is_read is False
    assert from_announcement.is_read is True


def test_create_for_self(auth_client, member):
    r = auth_client(member).post(
        URL,
        {
            "messages": {
                "eu": {"title": "Kaixo", "message": "Mezua"},
                "es": {"title": "Hola", "message": "Mensaje"},
            },
            "type": "success",
        },
        format="json",
    )
    assert r.status_code == status.HTTP_201_CREATED, r.data
    n = Notification.objects.get(pk=r.data["id"])
    assert n.user_id == member.id
    assert n.title == "Kaixo"
    assert n.notification_type == "success"
    assert n.messages.count() == 2  # noqa: PLR2004


def test_create_requires_a_title(auth_client, member):
    r = auth_client(member).post(URL, {"message": "x"}, format="json")
    assert r.status_code == status.HTTP_400_BAD_REQUEST


def test_non_admin_cannot_notify_others(auth_client, treasurer, member):
    r = auth_client(treasurer).post(
        URL, {"title": "x", "targetUserId": member.id}, format="json"
    )
    assert r.status_code == status.HTTP_403_FORBIDDEN
    assert r.data["message"] == "Only admins can create notifications for other users"


def test_admin_notifies_member(auth_client, admin, member):
    r = auth_client(admin).post(
        URL, {"title": "Bilera", "targetUserId": member.id}, format="json"
    )
    assert r.status_code == status.HTTP_201_CREATED, r.data
    assert Notification.objects.filter(user=member, title="Bilera").exists()


def test_admin_cannot_notify_other_society(auth_client, admin, other_society):
    stranger = make_member(other_society, "stranger")
    r = auth_client(admin).post(
        URL, {"title": "x", "targetUserId": stranger.id}, format="json"
    )
    assert r.status_code == status.HTTP_404_NOT_FOUND
