from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class Language(models.TextChoices):
    BASQUE = "eu", _("Basque")
    SPANISH = "es", _("Spanish")


DEFAULT_LANGUAGE = Language.BASQUE


class Notification(models.Model):
    class Type(models.TextChoices):
        INFO = "info", _("Info")
        SUCCESS = "success", _("Success")
        WARNING = "warning", _("Warning")
        ERROR = "error", _("Error")

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notifications"
    )
    society = models.ForeignKey(
        "societies.Society", on_delete=models.CASCADE, related_name="notifications"
    )
    title = models.CharField(max_length=255)
    message = models.TextField()
    notification_type = models.CharField(
        max_length=20, choices=Type.choices, default=Type.INFO
    )
    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)
    # Set for notifications generated from an announcement.
    reference_id = models.CharField(max_length=64, blank=True, default="")
    default_language = models.CharField(
        max_length=5, choices=Language.choices, default=DEFAULT_LANGUAGE
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(
                fields=["user", "society", "is_read"],
                name="notif_user_society_read_idx",
            ),
        ]

    def __str__(self):
        return f"{self.title} - {self.user}"


class NotificationMessage(models.Model):
    """Per-language title and body of a notification."""

    notification = models.ForeignKey(
        Notification, on_delete=models.CASCADE, related_name="messages"
    )
    language = models.CharField(max_length=5, choices=Language.choices)
    title = models.CharField(max_length=255)
    message = models.TextField()

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["notification", "language"],
                name="notification_message_unique_language",
            ),
        ]

    def __str__(self):
        return f"{self.language}: {self.title}"
