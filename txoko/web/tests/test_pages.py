import pytest

from txoko.announcements.models import Announcement
from txoko.conftest import make_member
from txoko.notifications.services import create_notification

pytestmark = pytest.mark.django_db


def _notify(user, title, *, read=False, messages=None):
    notification = create_notification(
        user_id=user.id,
        society_id=user.society_id,
        title=title,
        message="",
        messages=messages,
    )
    if read:
        notification.is_read = True
        notification.save()
    return notification


def test_home_lists_sections_for_capabilities(client, cellarman):
    _notify(cellarman, "Ardoa")
    client.force_login(cellarman)
    response = client.get("/")
    assert response.context["unread_count"] == 1
    assert response.context["capabilities"] == {
        "admin": False,
        "treasurer": False,
        "cellarman": True,
        "post_announcements": True,
    }
    assert b"/cellar/" in response.content
    assert b"/treasury/" not in response.content


def test_home_shows_active_announcements_only(client, member, admin):
    Announcement.objects.create(society=member.society, created_by=admin)
    Announcement.objects.create(
        society=member.society, created_by=admin, is_active=False
    )
    client.force_login(member)
    assert len(client.get("/").context["announcements"]) == 1


def test_notifications_filter_from_query(client, member):
    _notify(member, "Unread one")
    _notify(member, "Read one", read=True)
    client.force_login(member)

    response = client.get("/notifications/", {"filter": "unread"})
    assert [row["title"] for row in response.context["rows"]] == ["Unread one"]
    tabs = {tab["value"]: tab for tab in response.context["tabs"]}
    assert tabs["unread"]["active"]
    assert tabs["all"]["url"] == "/notifications/"
    assert tabs["read"]["url"] == "/notifications/?filter=read"

    response = client.get("/notifications/")
    assert response.context["filter"] == "all"
    assert len(response.context["rows"]) == 2  # noqa: PLR2004


def test_unknown_filter_shows_everything(client, member):
    _notify(member, "One")
    client.force_login(member)
    response = client.get("/notifications/", {"filter": "abc"})
    assert response.context["filter"] == "abc"
    assert len(response.context["rows"]) == 1


def test_notifications_are_localized(client, member):
    _notify(member, "Oharra", messages={"es": {"title": "Aviso"}})
    client.force_login(member)
    response = client.get("/notifications/", {"lang": "es"})
    assert response.context["rows"][0]["title"] == "Aviso"


def test_members_page_is_scoped_to_society(client, admin, member, other_society):
    make_member(other_society, "outsider")
    client.force_login(admin)
    names = {m.username for m in client.get("/members/").context["members"]}
    assert names == {"admin", "member"}
