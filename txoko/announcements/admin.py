from django.contrib import admin

from txoko.announcements import models


class AnnouncementMessageInline(admin.TabularInline):
    model = models.AnnouncementMessage
    extra = 0


@admin.register(models.Announcement)
class AnnouncementAdmin(admin.ModelAdmin):
    list_display = ["id", "society", "created_by", "is_active", "created_at"]
    list_filter = ["is_active", "society"]
    inlines = [AnnouncementMessageInline]
