"""Permission classes gating API routes on member capabilities.

Anonymous requests fail with 401 (the JWT authenticator supplies the
``WWW-Authenticate`` header); authenticated members lacking the capability get
403 with the message below.
"""

from rest_framework.permissions import SAFE_METHODS
from rest_framework.permissions import BasePermission

from txoko.users.access import AccessLevel
from txoko.users.access import can_post_announcements
from txoko.users.access import has_access


def _is_authenticated(request) -> bool:
    user = getattr(request, "user", None)
    return bool(user and getattr(user, "is_authenticated", False))


class _AccessPermission(BasePermission):
    """Base helper to gate access by a required access level."""

    required_access: AccessLevel | None = None

    def has_permission(self, request, view) -> bool:
        if not _is_authenticated(request):
            return False
        return has_access(request.user, self.required_access)


class HasAdminAccess(_AccessPermission):
    required_access = AccessLevel.ADMIN
    message = "Admin access required"


class HasTreasurerAccess(_AccessPermission):
    required_access = AccessLevel.TREASURER
    message = "Treasurer access required"


class HasCellarmanAccess(_AccessPermission):
    required_access = AccessLevel.CELLARMAN
    message = "Cellarman access required"


class CanPostAnnouncements(BasePermission):
    """Reads for every member; writes only for administrator/treasurer/cellarman."""

    message = "Announcement posting requires admin, treasurer or cellarman access"

    def has_permission(self, request, view) -> bool:
        if not _is_authenticated(request):
            return False
        if request.method in SAFE_METHODS:
            return True
        return can_post_announcements(request.user)
