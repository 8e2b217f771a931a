"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.events.models import Event, EventService
from apps.services.models import Service
from .models import Booking


class BookingCreateSerializer(serializers.Serializer):
    """Criação da reserva pelo cliente."""

    event = serializers.PrimaryKeyRelatedField(queryset=Event.objects.all())
    service = serializers.PrimaryKeyRelatedField(queryset=Service.objects.all())
    guest_count = serializers.IntegerField(min_value=1, required=False)
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")


class BookingFromQuoteSerializer(serializers.Serializer):
    event_service = serializers.PrimaryKeyRelatedField(queryset=EventService.objects.select_related("event", "service"))
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")


class BookingUpdateSerializer(serializers.Serializer):
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    guest_count = serializers.IntegerField(min_value=1, required=False)
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=Booking.Status.choices, required=False)


class BookingSerializer(serializers.ModelSerializer):
    """Leitura detalhada da reserva."""

    event_title = serializers.ReadOnlyField(source="event.title")
    event_date = serializers.ReadOnlyField(source="event.event_date")
    service_name = serializers.ReadOnlyField(source="service.name")
    provider_id = serializers.ReadOnlyField(source="service.provider_id")
    status_display = serializers.ReadOnlyField(source="get_status_display")

    class Meta:
        model = Booking
        fields = [
            "id",
            "event",
            "event_title",
            "event_date",
            "service",
            "service_name",
            "provider_id",
            "client",
            "price",
            "guest_count",
            "notes",
            "status",
            "status_display",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
