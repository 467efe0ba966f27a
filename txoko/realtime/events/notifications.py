from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

from txoko.notifications.services import localize
from txoko.realtime.socketio import emit_to_user

if TYPE_CHECKING:  # import for type checking only
    from txoko.notifications.models import Notification

logger = logging.getLogger(__name__)


def build_notification_payload(notification: Notification) -> dict[str, Any]:
    title, message = localize(notification, notification.default_language)
    return {
        "id": notification.id,
        "title": title,
        "message": message,
        "type": notification.notification_type,
        "isRead": notification.is_read,
        "referenceId": notification.reference_id or None,
        "createdAt": notification.created_at.isoformat(),
    }


def publish_notification_created(notification: Notification) -> None:
    """Publish a newly created Notification to the recipient in realtime."""

    payload = build_notification_payload(notification)
    emit_to_user(notification.user_id, "notification", payload)
    logger.debug(
        "Pushed notification %s to user %s", notification.id, notification.user_id
    )
