from unittest import mock

import pytest

from txoko.announcements.models import Announcement
from txoko.announcements.models import AnnouncementMessage
from txoko.announcements.services import fan_out
from txoko.announcements.services import remove_notifications
from txoko.announcements.tasks import fan_out_announcement
from txoko.notifications.models import Notification

pytestmark = pytest.mark.django_db


@pytest.fixture(autouse=True)
def _no_realtime():
    with mock.patch("txoko.realtime.events.notifications.emit_to_user"):
        yield


@pytest.fixture
def announcement(admin):
    a = Announcement.objects.create(society=admin.society, created_by=admin)
    AnnouncementMessage.objects.create(
        announcement=a, language="es", title="Cena", content="Viernes"
    )
    return a


def test_fan_out_skips_inactive_members(announcement, admin, member):
    member.is_active = False
    member.save()
    assert fan_out(announcement) == 1
    assert Notification.objects.get().user_id == admin.id


def test_missing_language_borrows_the_other(announcement, admin):
    fan_out(announcement)
    notification = Notification.objects.get(user=admin)
    assert notification.title == "Cena"
    assert notification.messages.get(language="eu").title == "Cena"


def test_fan_out_without_messages_creates_nothing(admin):
    empty = Announcement.objects.create(society=admin.society, created_by=admin)
    assert fan_out(empty) == 0
    assert not Notification.objects.exists()


def test_task_ignores_inactive_announcement(announcement, admin):
    announcement.is_active = False
    announcement.save()
    assert fan_out_announcement.delay(announcement.id).get() == 0
    assert fan_out_announcement(announcement.id + 1000) == 0


def test_task_runs_fan_out(announcement, admin, member):
    assert fan_out_announcement.delay(announcement.id).get() == 2  # noqa: PLR2004


def test_remove_notifications_is_scoped(announcement, admin):
    fan_out(announcement)
    Notification.objects.create(
        user=admin, society=admin.society, title="other", message="x"
    )
    remove_notifications(announcement)
    assert list(Notification.objects.values_list("title", flat=True)) == ["other"]
