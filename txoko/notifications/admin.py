from django.contrib import admin

from txoko.notifications import models


class NotificationMessageInline(admin.TabularInline):
    model = models.NotificationMessage
    extra = 0


@admin.register(models.Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ["id", "user", "society", "title", "notification_type", "is_read"]
    search_fields = ["title", "message", "reference_id"]
    list_filter = ["notification_type", "is_read", "created_at"]
    inlines = [NotificationMessageInline]
