from __future__ import annotations

import logging

from django.db import transaction
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework.mixins import CreateModelMixin
from rest_framework.mixins import DestroyModelMixin
from rest_framework.mixins import ListModelMixin
from rest_framework.mixins import RetrieveModelMixin
from rest_framework.mixins import UpdateModelMixin
from rest_framework.viewsets import GenericViewSet

from txoko.announcements.models import Announcement
from txoko.announcements.services import remove_notifications
from txoko.announcements.tasks import fan_out_announcement
from txoko.core.society import society_id_for
from txoko.users.access import can_post_announcements
from txoko.users.api.permissions import CanPostAnnouncements

from .serializers import AnnouncementSerializer

logger = logging.getLogger(__name__)


def _queue_fan_out(announcement_id: int) -> None:
    transaction.on_commit(lambda: fan_out_announcement.delay(announcement_id))


@extend_schema_view(
    list=extend_schema(tags=["Announcements"]),
    retrieve=extend_schema(tags=["Announcements"]),
    create=extend_schema(tags=["Announcements"]),
    update=extend_schema(tags=["Announcements"]),
    partial_update=extend_schema(tags=["Announcements"]),
    destroy=extend_schema(tags=["Announcements"]),
)
class AnnouncementViewSet(
    ListModelMixin,
    RetrieveModelMixin,
    CreateModelMixin,
    UpdateModelMixin,
    DestroyModelMixin,
    GenericViewSet,
):
    """Society announcements.

    Members read the active ones; administrators, treasurers and cellarmen
    see all of them and may write. Each active announcement is mirrored as one
    notification per member.
    """

    serializer_class = AnnouncementSerializer
    permission_classes = [CanPostAnnouncements]
    pagination_class = None

    def get_queryset(self):
        user = self.request.user
        qs = Announcement.objects.filter(
            society_id=society_id_for(user)
        ).prefetch_related("messages")
        if can_post_announcements(user):
            return qs
        return qs.filter(is_active=True)

    def perform_create(self, serializer):
        announcement = serializer.save(
            society_id=society_id_for(self.request.user),
            created_by=self.request.user,
        )
        logger.info(
            "User %s posted announcement %s", self.request.user.pk, announcement.pk
        )
        if announcement.is_active:
            _queue_fan_out(announcement.pk)

    def perform_update(self, serializer):
        was_active = serializer.instance.is_active
        announcement = serializer.save()
        if was_active and not announcement.is_active:
            remove_notifications(announcement)
        elif announcement.is_active and not was_active:
            _queue_fan_out(announcement.pk)

    def perform_destroy(self, instance):
        remove_notifications(instance)
        logger.info("User %s deleted announcement %s", self.request.user.pk, instance.pk)
        instance.delete()
