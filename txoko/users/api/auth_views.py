from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from datetime import timedelta

from django.conf import settings
from django.contrib.auth import authenticate
from django.contrib.auth.models import update_last_login
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.serializers import TokenRefreshSerializer

from txoko.core.exceptions import error_response
from txoko.users.tokens import issue_tokens

from .serializers import LoginSerializer
from .serializers import UserSerializer


def _set_cookie(
    response: Response,
    name: str,
    value: str,
    max_age: int | None,
) -> None:
    if not value:
        return
    cookie_kwargs = {
        "httponly": True,
        "secure": getattr(settings, "AUTH_COOKIE_SECURE", not settings.DEBUG),
        "samesite": getattr(settings, "AUTH_COOKIE_SAMESITE", "Lax"),
        "path": "/",
    }
    if max_age is not None:
        cookie_kwargs["max_age"] = max_age
    response.set_cookie(name, value, **cookie_kwargs)


def _set_jwt_cookies(
    response: Response, access: str | None, refresh: str | None
) -> None:
    access_lifetime: timedelta = settings.SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"]
    refresh_lifetime: timedelta = settings.SIMPLE_JWT["REFRESH_TOKEN_LIFETIME"]

    if access:
        _set_cookie(
            response,
            settings.AUTH_COOKIE_NAME,
            access,
            int(access_lifetime.total_seconds()),
        )
    if refresh:
        _set_cookie(
            response,
            settings.AUTH_REFRESH_COOKIE_NAME,
            refresh,
            int(refresh_lifetime.total_seconds()),
        )


@extend_schema(tags=["Authentication"], request=LoginSerializer)
class LoginView(APIView):
    """Email/password login scoped to a society.

    Tokens are returned in the body (the SPA keeps the access token under
    ``auth:token``) and mirrored into HttpOnly cookies.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        user = authenticate(
            request,
            username=data["email"],
            password=data["password"],
            society_id=data.get("societyId"),
        )
        if user is None:
            return error_response("Invalid credentials", status.HTTP_401_UNAUTHORIZED)
        update_last_login(None, user)
        refresh = issue_tokens(user)
        access = str(refresh.access_token)
        response = Response(
            {
                "token": access,
                "refresh": str(refresh),
                "user": UserSerializer(user, context={"request": request}).data,
            }
        )
        _set_jwt_cookies(response, access, str(refresh))
        return response


@extend_schema(tags=["Authentication"], request=TokenRefreshSerializer)
class RefreshView(APIView):
    """Refresh from the body or the refresh cookie; sets a new access cookie."""

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        raw = request.data.get("refresh") or request.COOKIES.get(
            settings.AUTH_REFRESH_COOKIE_NAME
        )
        serializer = TokenRefreshSerializer(data={"refresh": raw or ""})
        serializer.is_valid(raise_exception=True)
        access = serializer.validated_data["access"]
        rotated = serializer.validated_data.get("refresh")
        body = {"token": access}
        if rotated:
            body["refresh"] = rotated
        response = Response(body)
        _set_jwt_cookies(response, access, rotated)
        return response


@extend_schema(tags=["Authentication"], request=None)
class LogoutView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        response = Response({"message": "Logged out"})
        response.delete_cookie(settings.AUTH_COOKIE_NAME, path="/")
        response.delete_cookie(settings.AUTH_REFRESH_COOKIE_NAME, path="/")
        return response
