"""Route guard for server-rendered pages.

The outcome is recomputed for every request from ``request.user``:

- anonymous: nothing is rendered (empty 401)
- signed in without the required capability: access-denied page (403)
- otherwise: the wrapped view
"""

from __future__ import annotations

import enum
import functools
import logging
from typing import Any

from django.http import HttpResponse
from django.shortcuts import render

from txoko.users.access import AccessLevel
from txoko.users.access import has_access

logger = logging.getLogger(__name__)

ACCESS_DENIED_TEMPLATE = "access_denied.html"


class GuardOutcome(enum.Enum):
    HIDDEN = "hidden"
    DENIED = "denied"
    ALLOWED = "allowed"


def _is_present(user: Any | None) -> bool:
    return user is not None and bool(getattr(user, "is_authenticated", True))


def evaluate(
    user: Any | None,
    required_access: AccessLevel | str | None = None,
) -> GuardOutcome:
    if not _is_present(user):
        return GuardOutcome.HIDDEN
    if required_access and not has_access(user, required_access):
        return GuardOutcome.DENIED
    return GuardOutcome.ALLOWED


def protected_route(required_access: AccessLevel | str | None = None):
    """Decorate a page view with the route guard for ``required_access``."""
    if required_access:
        # Fail at import time on an unknown level.
        required_access = AccessLevel(required_access)

    def decorator(view_func):
        @functools.wraps(view_func)
        def wrapper(request, *args, **kwargs):
            outcome = evaluate(getattr(request, "user", None), required_access)
            if outcome is GuardOutcome.HIDDEN:
                return HttpResponse(status=401)
            if outcome is GuardOutcome.DENIED:
                logger.info(
                    "User %s denied %s access to %s",
                    request.user.pk,
                    required_access,
                    request.path,
                )
                return render(
                    request,
                    ACCESS_DENIED_TEMPLATE,
                    {"required_access": required_access},
                    status=403,
                )
            return view_func(request, *args, **kwargs)

        wrapper.required_access = required_access
        return wrapper

    return decorator
