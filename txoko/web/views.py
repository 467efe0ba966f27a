from __future__ import annotations

from django.contrib.auth import get_user_model
from django.shortcuts import render

from txoko.announcements.models import Announcement
from txoko.core.society import society_id_for
from txoko.notifications.models import Notification
from txoko.notifications.services import localize
from txoko.notifications.services import resolve_language
from txoko.users.access import AccessLevel
from txoko.users.access import can_post_announcements
from txoko.users.access import has_admin_access
from txoko.users.access import has_cellarman_access
from txoko.users.access import has_treasurer_access

from .guards import protected_route
from .url_filter import RecordingHistory
from .url_filter import RequestLocation
from .url_filter import UrlFilter

FILTER_TABS = [("all", "All"), ("unread", "Unread"), ("read", "Read")]
NOTIFICATIONS_PAGE_SIZE = 50


def _capabilities(user) -> dict[str, bool]:
    return {
        "admin": has_admin_access(user),
        "treasurer": has_treasurer_access(user),
        "cellarman": has_cellarman_access(user),
        "post_announcements": can_post_announcements(user),
    }


@protected_route()
def home(request):
    user = request.user
    society_id = society_id_for(user)
    context = {
        "capabilities": _capabilities(user),
        "unread_count": Notification.objects.filter(
            user=user, society_id=society_id, is_read=False
        ).count(),
        "announcements": Announcement.objects.filter(
            society_id=society_id, is_active=True
        ).prefetch_related("messages")[:5],
    }
    return render(request, "pages/home.html", context)


@protected_route()
def notifications_page(request):
    user = request.user
    url_filter = UrlFilter(RequestLocation(request), RecordingHistory(), default="all")
    qs = Notification.objects.filter(
        user=user, society_id=society_id_for(user)
    ).prefetch_related("messages")
    if url_filter.value == "unread":
        qs = qs.filter(is_read=False)
    elif url_filter.value == "read":
        qs = qs.filter(is_read=True)

    language = resolve_language(
        request.GET.get("lang"), request.headers.get("Accept-Language", "")
    )
    rows = []
    for notification in qs[:NOTIFICATIONS_PAGE_SIZE]:
        title, message = localize(notification, language)
        rows.append({"notification": notification, "title": title, "message": message})

    tabs = [
        {
            "value": value,
            "label": label,
            "url": url_filter.url_for(value),
            "active": value == url_filter.value,
        }
        for value, label in FILTER_TABS
    ]
    return render(
        request,
        "pages/notifications.html",
        {"rows": rows, "tabs": tabs, "filter": url_filter.value},
    )


@protected_route(AccessLevel.ADMIN)
def members(request):
    members = (
        get_user_model()
        .objects.filter(society_id=society_id_for(request.user))
        .order_by("name")
    )
    return render(request, "pages/members.html", {"members": members})


@protected_route(AccessLevel.TREASURER)
def treasury(request):
    return render(request, "pages/treasury.html")


@protected_route(AccessLevel.CELLARMAN)
def cellar(request):
    return render(request, "pages/cellar.html")
