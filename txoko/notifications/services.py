"""Notification creation and localization helpers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

from django.db import transaction

from txoko.notifications.models import DEFAULT_LANGUAGE
from txoko.notifications.models import Language
from txoko.notifications.models import Notification
from txoko.notifications.models import NotificationMessage

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

SUPPORTED_LANGUAGES = frozenset(Language.values)


def resolve_language(query_value: str | None, accept_language: str = "") -> str:
    """Pick the response language from ``?lang=`` then ``Accept-Language``."""
    for candidate in (query_value or "", accept_language or ""):
        code = candidate.strip().lower()[:2]
        if code in SUPPORTED_LANGUAGES:
            return code
    return DEFAULT_LANGUAGE


def _other_language(language: str) -> str:
    return Language.SPANISH if language == Language.BASQUE else Language.BASQUE


def localize(notification: Notification, language: str) -> tuple[str, str]:
    """Return ``(title, message)`` for ``language``.

    Fallback order: requested language, the other supported language, the
    notification's default language, then the base fields.
    """
    by_language = {m.language: m for m in notification.messages.all()}
    for code in (language, _other_language(language), notification.default_language):
        found = by_language.get(code)
        if found is not None:
            return found.title, found.message
    return notification.title, notification.message


def create_notification(  # noqa: PLR0913
    *,
    user_id: int,
    society_id: int,
    title: str,
    message: str,
    notification_type: str = Notification.Type.INFO,
    messages: Mapping[str, Mapping[str, Any]] | None = None,
    reference_id: str = "",
    default_language: str = DEFAULT_LANGUAGE,
) -> Notification:
    """Create a notification plus its per-language messages.

    ``messages`` maps a language code to ``{"title": ..., "message": ...}``;
    missing keys fall back to ``title``/``message``. The realtime push is
    scheduled by the post-save signal once the transaction commits.
    """
    with transaction.atomic():
        notification = Notification.objects.create(
            user_id=user_id,
            society_id=society_id,
            title=title,
            message=message,
            notification_type=notification_type,
            reference_id=reference_id,
            default_language=default_language,
        )
        rows = [
            NotificationMessage(
                notification=notification,
                language=lang,
                title=(payload or {}).get("title") or title,
                message=(payload or {}).get("message") or message,
            )
            for lang, payload in (messages or {}).items()
            if lang in SUPPORTED_LANGUAGES
        ]
        if rows:
            NotificationMessage.objects.bulk_create(rows)
    return notification
