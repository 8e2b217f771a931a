"""Serializers for notifications and email templates."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import EmailTemplate, Notification


class NotificationSerializer(serializers.ModelSerializer):
    """Serializer for notifications."""

    class Meta:
        model = Notification
        fields = ['id', 'user', 'title', 'message', 'link', 'is_read', 'created_at']
        read_only_fields = ['user', 'title', 'message', 'link', 'created_at']


class EmailTemplateSerializer(serializers.ModelSerializer):
    type_display = serializers.CharField(source='get_template_type_display', read_only=True)

    class Meta:
        model = EmailTemplate
        fields = [
            'id',
            'template_type',
            'type_display',
            'subject',
            'content',
            'is_active',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'template_type', 'is_active', 'created_at', 'updated_at']


class EmailTemplateUpdateSerializer(serializers.Serializer):
    subject = serializers.CharField(allow_blank=True, trim_whitespace=False)
    content = serializers.CharField(allow_blank=True, trim_whitespace=False)


class TestEmailSerializer(serializers.Serializer):
    email = serializers.EmailField()
