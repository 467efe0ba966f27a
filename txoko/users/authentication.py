from __future__ import annotations

import logging

from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import TokenError

logger = logging.getLogger(__name__)


class CookieJWTAuthentication(JWTAuthentication):
    """JWT auth reading the ``auth-token`` cookie first, then the header.

    An unusable cookie is ignored so a valid ``Authorization`` header still
    authenticates the request.
    """

    def authenticate(self, request):
        raw_token = request.COOKIES.get(settings.AUTH_COOKIE_NAME)
        if raw_token:
            try:
                validated = self.get_validated_token(raw_token)
                return self.get_user(validated), validated
            except (TokenError, AuthenticationFailed) as exc:
                logger.info("Ignoring unusable auth cookie: %s", exc)
        return super().authenticate(request)
