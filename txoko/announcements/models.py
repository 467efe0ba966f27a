from django.conf import settings
from django.db import models

from txoko.notifications.models import Language


class Announcement(models.Model):
    """Society-wide notice; each member receives it as a notification."""

    society = models.ForeignKey(
        "societies.Society", on_delete=models.CASCADE, related_name="announcements"
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="announcements",
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        first = self.messages.first()
        return first.title if first else f"Announcement {self.pk}"

    @property
    def reference_id(self) -> str:
        return f"announcement:{self.pk}"


class AnnouncementMessage(models.Model):
    announcement = models.ForeignKey(
        Announcement, on_delete=models.CASCADE, related_name="messages"
    )
    language = models.CharField(max_length=5, choices=Language.choices)
    title = models.CharField(max_length=255)
    content = models.TextField()

    class Meta:
        ordering = ["language"]
        constraints = [
            models.UniqueConstraint(
                fields=["announcement", "language"],
                name="announcement_message_unique_language",
            ),
        ]

    def __str__(self):
        return f"{self.language}: {self.title}"
