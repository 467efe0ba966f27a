"""Capability checks derived from a member's ``function``.

The function is a closed enumeration and every member maps to an explicit
capability set. The table is validated when this module is imported so a new
function cannot silently end up with no capabilities.

These helpers are pure and accept anything with a ``function`` attribute
(Django users, ``SessionUser`` snapshots) or ``None``.
"""

from __future__ import annotations

import enum
from typing import Any

from django.core.exceptions import ImproperlyConfigured
from django.db import models
from django.utils.translation import gettext_lazy as _


class Function(models.TextChoices):
    ADMINISTRATOR = "administratzailea", _("Administrator")
    TREASURER = "diruzaina", _("Treasurer")
    CELLARMAN = "sotolaria", _("Cellarman")
    ORDINARY = "arrunta", _("Ordinary")


class Role(models.TextChoices):
    MEMBER = "bazkidea", _("Member")
    ASSOCIATE = "laguna", _("Associate member")


class Capability(enum.Enum):
    ADMIN = "admin"
    TREASURER = "treasurer"
    CELLARMAN = "cellarman"
    POST_ANNOUNCEMENTS = "post_announcements"


class AccessLevel(models.TextChoices):
    """Levels a route can require."""

    ADMIN = "admin", _("Admin")
    TREASURER = "treasurer", _("Treasurer")
    CELLARMAN = "cellarman", _("Cellarman")


CAPABILITIES: dict[Function, frozenset[Capability]] = {
    Function.ADMINISTRATOR: frozenset(Capability),
    Function.TREASURER: frozenset(
        {Capability.TREASURER, Capability.POST_ANNOUNCEMENTS},
    ),
    Function.CELLARMAN: frozenset(
        {Capability.CELLARMAN, Capability.POST_ANNOUNCEMENTS},
    ),
    Function.ORDINARY: frozenset(),
}

LEVEL_CAPABILITY: dict[AccessLevel, Capability] = {
    AccessLevel.ADMIN: Capability.ADMIN,
    AccessLevel.TREASURER: Capability.TREASURER,
    AccessLevel.CELLARMAN: Capability.CELLARMAN,
}


def _check_tables() -> None:
    missing = [f.value for f in Function if f not in CAPABILITIES]
    if missing:
        msg = f"No capability set declared for functions: {', '.join(missing)}"
        raise ImproperlyConfigured(msg)
    unmapped = [lvl.value for lvl in AccessLevel if lvl not in LEVEL_CAPABILITY]
    if unmapped:
        msg = f"No capability declared for access levels: {', '.join(unmapped)}"
        raise ImproperlyConfigured(msg)


_check_tables()


def function_of(user: Any | None) -> Function | None:
    """Return the user's function, or None for absent/anonymous users."""
    if user is None or not getattr(user, "is_authenticated", True):
        return None
    raw = getattr(user, "function", None)
    try:
        return Function(raw)
    except ValueError:
        return None


def capabilities_for(user: Any | None) -> frozenset[Capability]:
    function = function_of(user)
    if function is None:
        return frozenset()
    return CAPABILITIES[function]


def has_capability(user: Any | None, capability: Capability) -> bool:
    return capability in capabilities_for(user)


def has_admin_access(user: Any | None) -> bool:
    return has_capability(user, Capability.ADMIN)


def has_treasurer_access(user: Any | None) -> bool:
    return has_capability(user, Capability.TREASURER)


def has_cellarman_access(user: Any | None) -> bool:
    return has_capability(user, Capability.CELLARMAN)


def can_post_announcements(user: Any | None) -> bool:
    return has_capability(user, Capability.POST_ANNOUNCEMENTS)


def has_access(user: Any | None, level: AccessLevel | str | None) -> bool:
    """Check a route requirement. ``None`` means any present user passes."""
    if user is None or not getattr(user, "is_authenticated", True):
        return False
    if not level:
        return True
    return has_capability(user, LEVEL_CAPABILITY[AccessLevel(level)])
