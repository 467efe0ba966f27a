from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.utils import timezone
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import mixins
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from txoko.core.exceptions import error_response
from txoko.core.pagination import PageLimitPagination
from txoko.core.society import society_id_for
from txoko.notifications.models import Notification
from txoko.notifications.services import create_notification
from txoko.notifications.services import resolve_language
from txoko.users.access import has_admin_access

from .filters import NotificationFilter
from .serializers import NotificationCreateSerializer
from .serializers import NotificationSerializer

logger = logging.getLogger(__name__)

User = get_user_model()

RECENT_LIMIT = 5

LANG_PARAMETER = OpenApiParameter(
    "lang", str, description="Preferred language (eu or es)", required=False
)


class NotificationPagination(PageLimitPagination):
    results_key = "notifications"


@extend_schema_view(
    list=extend_schema(
        tags=["Notifications"],
        parameters=[
            LANG_PARAMETER,
            OpenApiParameter("page", int, required=False),
            OpenApiParameter("limit", int, required=False),
        ],
    ),
    create=extend_schema(
        tags=["Notifications"],
        request=NotificationCreateSerializer,
        responses=NotificationSerializer,
    ),
    recent=extend_schema(tags=["Notifications"], parameters=[LANG_PARAMETER]),
    unread_count=extend_schema(tags=["Notifications"]),
    read=extend_schema(tags=["Notifications"], request=None),
    mark_all_read=extend_schema(tags=["Notifications"], request=None),
    mark_announcements_read=extend_schema(tags=["Notifications"], request=None),
)
class NotificationViewSet(mixins.ListModelMixin, GenericViewSet):
    """Notifications of the authenticated member, within their society.

    - list: paginated, newest first, ``?filter=all|unread|read``
    - create: for self, or for another member with admin access
    - read / mark-all-read / notes/mark-all-read
    """

    permission_classes = [IsAuthenticated]
    serializer_class = NotificationSerializer
    pagination_class = NotificationPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = NotificationFilter
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        user = self.request.user
        return (
            Notification.objects.filter(user=user, society_id=society_id_for(user))
            .prefetch_related("messages")
            .order_by("-created_at", "-id")
        )

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context["language"] = resolve_language(
            self.request.query_params.get("lang"),
            self.request.headers.get("Accept-Language", ""),
        )
        return context

    def create(self, request, *args, **kwargs):
        serializer = NotificationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        society_id = society_id_for(request.user)

        target_id = data.get("targetUserId") or request.user.id
        if target_id != request.user.id:
            if not has_admin_access(request.user):
                return error_response(
                    "Only admins can create notifications for other users",
                    status.HTTP_403_FORBIDDEN,
                )
            if not User.objects.filter(pk=target_id, society_id=society_id).exists():
                return error_response(
                    "Target user not found",
                    status.HTTP_404_NOT_FOUND,
                )

        notification = create_notification(
            user_id=target_id,
            society_id=society_id,
            title=data["title"],
            message=data["message"],
            notification_type=data["type"],
            messages=data.get("messages"),
            default_language=data["defaultLanguage"],
        )
        logger.info(
            "User %s created notification %s for user %s",
            request.user.id,
            notification.id,
            target_id,
        )
        out = self.get_serializer(notification).data
        return Response(out, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["get"], url_path="unread-count")
    def unread_count(self, request):
        count = self.get_queryset().filter(is_read=False).count()
        return Response({"count": count})

    @action(detail=False, methods=["get"])
    def recent(self, request):
        items = self.get_queryset()[:RECENT_LIMIT]
        return Response(self.get_serializer(items, many=True).data)

    @action(detail=True, methods=["patch"])
    def read(self, request, pk=None):
        notification = self.get_object()
        if not notification.is_read:
            notification.is_read = True
            notification.read_at = timezone.now()
            notification.save(update_fields=["is_read", "read_at", "updated_at"])
        return Response(self.get_serializer(notification).data)

    @action(detail=False, methods=["patch"], url_path="mark-all-read")
    def mark_all_read(self, request):
        now = timezone.now()
        updated = (
            self.get_queryset()
            .filter(is_read=False)
            .update(is_read=True, read_at=now, updated_at=now)
        )
        return Response(
            {"message": "All notifications marked as read", "updated": updated}
        )

    @action(detail=False, methods=["patch"], url_path="notes/mark-all-read")
    def mark_announcements_read(self, request):
        now = timezone.now()
        updated = (
            self.get_queryset()
            .filter(is_read=False)
            .exclude(reference_id="")
            .update(is_read=True, read_at=now, updated_at=now)
        )
        return Response({"success": True, "updated": updated})
