from __future__ import annotations

from django.utils.functional import SimpleLazyObject
from rest_framework.exceptions import AuthenticationFailed

from txoko.users.authentication import CookieJWTAuthentication


def _resolve_user(request, fallback):
    if getattr(fallback, "is_authenticated", False):
        return fallback
    try:
        result = CookieJWTAuthentication().authenticate(request)
    except AuthenticationFailed:
        return fallback
    if result is None:
        return fallback
    return result[0]


class JWTAuthenticationMiddleware:
    """Expose JWT-authenticated users on ``request.user`` for HTML views.

    Must sit after ``AuthenticationMiddleware``; a Django session user wins.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        session_user = request.user
        request.user = SimpleLazyObject(lambda: _resolve_user(request, session_user))
        return self.get_response(request)
