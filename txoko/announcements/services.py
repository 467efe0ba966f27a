"""Turning announcements into member notifications."""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.db import transaction

from txoko.announcements.models import Announcement
from txoko.notifications.models import Language
from txoko.notifications.models import Notification
from txoko.notifications.services import create_notification

logger = logging.getLogger(__name__)


def _localized_messages(announcement: Announcement) -> dict[str, dict[str, str]]:
    """Title/message per supported language, borrowing from the other one."""
    by_language = {m.language: m for m in announcement.messages.all()}
    out: dict[str, dict[str, str]] = {}
    for code, other in (
        (Language.BASQUE, Language.SPANISH),
        (Language.SPANISH, Language.BASQUE),
    ):
        source = by_language.get(code) or by_language.get(other)
        if source is not None:
            out[code] = {"title": source.title, "message": source.content}
    return out


def fan_out(announcement: Announcement) -> int:
    """Create one notification per active society member. Returns the count."""
    messages = _localized_messages(announcement)
    if not messages:
        logger.warning("Announcement %s has no messages; skipping", announcement.pk)
        return 0
    base = messages.get(Language.BASQUE) or next(iter(messages.values()))
    members = get_user_model().objects.filter(
        society_id=announcement.society_id,
        is_active=True,
    )
    count = 0
    with transaction.atomic():
        for member_id in members.values_list("id", flat=True):
            create_notification(
                user_id=member_id,
                society_id=announcement.society_id,
                title=base["title"],
                message=base["message"],
                messages=messages,
                reference_id=announcement.reference_id,
            )
            count += 1
    logger.info(
        "Converted announcement %s to notifications for %s members",
        announcement.pk,
        count,
    )
    return count


def remove_notifications(announcement: Announcement) -> int:
    deleted, _ = Notification.objects.filter(
        society_id=announcement.society_id,
        reference_id=announcement.reference_id,
    ).delete()
    logger.info(
        "Removed notifications for announcement %s (%s rows)", announcement.pk, deleted
    )
    return deleted
