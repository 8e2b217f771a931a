"""Serializers for chat messages."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import MESSAGE_MAX_LENGTH, ChatMessage


class ChatMessageSerializer(serializers.ModelSerializer):
    sender_name = serializers.ReadOnlyField(source="sender.display_name")

    class Meta:
        model = ChatMessage
        fields = ["id", "event_service", "sender", "sender_name", "message", "created_at"]
        read_only_fields = fields


class SendMessageSerializer(serializers.Serializer):
    message = serializers.CharField(
        max_length=MESSAGE_MAX_LENGTH,
        error_messages={
            "blank": "Mensagem não pode estar vazia",
            "max_length": "Mensagem muito longa",
        },
    )


class ChatAccessSerializer(serializers.Serializer):
    can_access = serializers.BooleanField()
    reason = serializers.CharField(allow_null=True)


class ChatInfoSerializer(serializers.Serializer):
    event_title = serializers.CharField()
    event_date = serializers.DateField()
    service_name = serializers.CharField()
    provider_name = serializers.CharField()
    client_name = serializers.CharField()
    counterpart_name = serializers.CharField()
    message_count = serializers.IntegerField()
    can_chat = serializers.BooleanField()
    reason = serializers.CharField(allow_null=True)
