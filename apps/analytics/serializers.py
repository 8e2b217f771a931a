"""Serializers for analytics endpoints."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.events.models import EventService
from apps.users.models import User


class AgendaQuerySerializer(serializers.Serializer):
    """Semana (``week_start``) ou mês (``year`` + ``month``)."""

    week_start = serializers.DateField(required=False)
    year = serializers.IntegerField(min_value=2000, max_value=2100, required=False)
    month = serializers.IntegerField(min_value=1, max_value=12, required=False)
    provider = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(role=User.RoleChoices.PROVIDER),
        required=False,
    )

    def validate(self, attrs):  # type: ignore
        has_week = "week_start" in attrs
        has_month = "year" in attrs and "month" in attrs
        if has_week == has_month:
            raise serializers.ValidationError("Informe week_start ou year e month.")
        return attrs


class AgendaEntrySerializer(serializers.ModelSerializer):
    event_service_id = serializers.ReadOnlyField(source="id")
    event_id = serializers.ReadOnlyField(source="event.id")
    event_title = serializers.ReadOnlyField(source="event.title")
    event_date = serializers.ReadOnlyField(source="event.event_date")
    event_location = serializers.ReadOnlyField(source="event.location")
    guest_count = serializers.ReadOnlyField(source="event.guest_count")
    service_name = serializers.ReadOnlyField(source="service.name")
    provider_name = serializers.ReadOnlyField(source="provider.display_name")
    client_id = serializers.ReadOnlyField(source="event.client_id")
    client_name = serializers.ReadOnlyField(source="event.client.display_name")
    client_email = serializers.ReadOnlyField(source="event.client.email")
    can_chat = serializers.SerializerMethodField()

    class Meta:
        model = EventService
        fields = [
            "id",
            "event_service_id",
            "event_id",
            "event_title",
            "event_date",
            "event_location",
            "guest_count",
            "service",
            "service_name",
            "provider",
            "provider_name",
            "client_id",
            "client_name",
            "client_email",
            "booking_status",
            "total_estimated_price",
            "can_chat",
        ]
        read_only_fields = fields

    def get_can_chat(self, obj: EventService) -> bool:
        today = self.context["today"]
        return obj.booking_status in EventService.CHAT_STATUSES and obj.event.event_date >= today
