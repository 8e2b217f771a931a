from django.contrib import admin

from .models import ChatMessage


@admin.register(ChatMessage)
class ChatMessageAdmin(admin.ModelAdmin):
    list_display = ("event_service", "sender", "created_at")
    search_fields = ("message", "sender__email")
    raw_id_fields = ("event_service", "sender")
    readonly_fields = ("created_at",)
