from django.contrib import admin

from txoko.societies import models


@admin.register(models.Society)
class SocietyAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "email", "is_active", "created_at"]
    search_fields = ["name", "email"]
    list_filter = ["is_active"]
