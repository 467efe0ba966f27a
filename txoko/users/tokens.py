from __future__ import annotations

from typing import TYPE_CHECKING

from rest_framework_simplejwt.tokens import RefreshToken

if TYPE_CHECKING:  # pragma: no cover - typing only
    from txoko.users.models import User


def issue_tokens(user: User) -> RefreshToken:
    """Refresh token whose access token carries the member's tenant and function."""
    refresh = RefreshToken.for_user(user)
    refresh["society_id"] = user.society_id
    refresh["function"] = user.function
    refresh["name"] = user.name
    return refresh
