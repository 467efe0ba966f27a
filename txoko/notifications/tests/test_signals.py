from unittest import mock

import pytest

from txoko.notifications.services import create_notification

pytestmark = pytest.mark.django_db


def test_new_notification_is_pushed_after_commit(
    member, django_capture_on_commit_callbacks
):
    with mock.patch(
        "txoko.realtime.events.notifications.emit_to_user"
    ) as emit, django_capture_on_commit_callbacks(execute=True):
        notification = create_notification(
            user_id=member.id,
            society_id=member.society_id,
            title="Kaixo",
            message="Mezua",
        )
        emit.assert_not_called()

    emit.assert_called_once()
    user_id, event, payload = emit.call_args.args
    assert user_id == member.id
    assert event == "notification"
    assert payload["id"] == notification.id
    assert payload["title"] == "Kaixo"
    assert payload["isRead"] is False


def test_update_is_not_pushed(member, django_capture_on_commit_callbacks):
    notification = create_notification(
        user_id=member.id,
        society_id=member.society_id,
        title="Kaixo",
        message="Mezua",
    )
    with mock.patch(
        "txoko.realtime.events.notifications.emit_to_user"
    ) as emit, django_capture_on_commit_callbacks(execute=True):
        notification.is_read = True
        notification.save()
    emit.assert_not_called()
