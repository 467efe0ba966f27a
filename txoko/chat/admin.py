from django.contrib import admin

from txoko.chat import models


@admin.register(models.ChatRoom)
class ChatRoomAdmin(admin.ModelAdmin):
    list_display = ["id", "society", "user1", "user2", "last_message_at", "is_active"]
    list_filter = ["is_active", "society"]


@admin.register(models.ChatMessage)
class ChatMessageAdmin(admin.ModelAdmin):
    list_display = ["id", "room", "sender", "message_type", "is_read", "created_at"]
    search_fields = ["content"]
    list_filter = ["message_type", "is_read"]
