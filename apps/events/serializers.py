"""Serializers for events, quotes and the cart."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.services.models import Service
from apps.services.pricing import format_guest_breakdown
from .models import Event, EventService
from .services import EventRuleError, cart_totals, ensure_date_not_in_past


def _validate_future_date(value):
    try:
        ensure_date_not_in_past(value)
    except EventRuleError as exc:
        raise serializers.ValidationError(str(exc))
    return value


class EventServiceSerializer(serializers.ModelSerializer):
    service_name = serializers.CharField(source="service.name", read_only=True)
    service_category = serializers.CharField(source="service.category", read_only=True)
    provider_name = serializers.CharField(source="provider.display_name", read_only=True)
    provider_logo_url = serializers.CharField(source="provider.logo_url", read_only=True)
    booking_status_display = serializers.ReadOnlyField(source="get_booking_status_display")
    allowed_transitions = serializers.SerializerMethodField()

    class Meta:
        model = EventService
        fields = [
            "id",
            "event",
            "service",
            "service_name",
            "service_category",
            "provider",
            "provider_name",
            "provider_logo_url",
            "price_per_guest_at_booking",
            "befest_fee_at_booking",
            "total_estimated_price",
            "booking_status",
            "booking_status_display",
            "allowed_transitions",
            "provider_notes",
            "client_notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_allowed_transitions(self, obj: EventService) -> list[str]:
        return list(obj.allowed_transitions())


class EventSerializer(serializers.ModelSerializer):
    """Leitura da festa com os orçamentos e o resumo de convidados."""

    client_name = serializers.CharField(source="client.display_name", read_only=True)
    status_display = serializers.ReadOnlyField(source="get_status_display")
    guest_breakdown = serializers.SerializerMethodField()
    event_services = EventServiceSerializer(many=True, read_only=True)

    class Meta:
        model = Event
        fields = [
            "id",
            "client",
            "client_name",
            "title",
            "description",
            "event_date",
            "start_time",
            "location",
            "full_guests",
            "half_guests",
            "free_guests",
            "guest_count",
            "guest_breakdown",
            "budget",
            "observations",
            "status",
            "status_display",
            "event_services",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_guest_breakdown(self, obj: Event) -> str:
        return format_guest_breakdown(obj.full_guests, obj.half_guests, obj.free_guests)


class EventWriteSerializer(serializers.ModelSerializer):
    class Meta:
        model = Event
        fields = [
            "title",
            "description",
            "event_date",
            "start_time",
            "location",
            "full_guests",
            "half_guests",
            "free_guests",
            "guest_count",
            "budget",
            "observations",
        ]
        extra_kwargs = {
            "guest_count": {"required": False},
            "description": {"required": False},
            "location": {"required": False},
            "observations": {"required": False},
        }

    def validate_title(self, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise serializers.ValidationError("Título deve ter pelo menos 2 caracteres")
        return value

    def validate_event_date(self, value):  # type: ignore
        return _validate_future_date(value)

    def validate(self, attrs):  # type: ignore
        guest_fields = ("full_guests", "half_guests", "free_guests")
        if any(field in attrs for field in guest_fields):
            # New breakdown always wins over a stale head count
            for field in guest_fields:
                attrs.setdefault(field, getattr(self.instance, field, 0) if self.instance else 0)
            attrs["guest_count"] = 0
        elif "guest_count" in attrs:
            attrs.update(full_guests=0, half_guests=0, free_guests=0)
        if self.instance is None:
            total = sum(attrs.get(field, 0) for field in guest_fields) or attrs.get("guest_count", 0)
            if total < 1:
                raise serializers.ValidationError(
                    {"guest_count": "Número de convidados deve ser maior que 0"}
                )
        return attrs


class EventStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Event.Status.choices)


class QuoteRequestSerializer(serializers.Serializer):
    event = serializers.PrimaryKeyRelatedField(queryset=Event.objects.all())
    service = serializers.PrimaryKeyRelatedField(queryset=Service.objects.all())
    client_notes = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_event(self, value: Event) -> Event:
        request = self.context["request"]
        if value.client_id != request.user.pk:
            raise serializers.ValidationError("Evento não encontrado ou acesso negado")
        return value


class ProviderQuoteUpdateSerializer(serializers.Serializer):
    price_per_guest_at_booking = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    befest_fee_at_booking = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    total_estimated_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    provider_notes = serializers.CharField(required=False, allow_blank=True)
    booking_status = serializers.ChoiceField(choices=EventService.BookingStatus.choices, required=False)


class ClientQuoteUpdateSerializer(serializers.Serializer):
    client_notes = serializers.CharField(allow_blank=True)


class CartEventSerializer(serializers.Serializer):
    event_id = serializers.IntegerField(required=False, allow_null=True)
    title = serializers.CharField(max_length=100)
    event_date = serializers.DateField()
    start_time = serializers.TimeField(required=False, allow_null=True)
    location = serializers.CharField(max_length=200, required=False, allow_blank=True, allow_null=True)
    full_guests = serializers.IntegerField(min_value=0, default=0)
    half_guests = serializers.IntegerField(min_value=0, default=0)
    free_guests = serializers.IntegerField(min_value=0, default=0)

    def validate_title(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Nome do evento é obrigatório")
        return value

    def validate_event_date(self, value):  # type: ignore
        return _validate_future_date(value)


class CartItemSerializer(serializers.Serializer):
    service_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, default=1)
    client_notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class CartAddSerializer(serializers.Serializer):
    event_id = serializers.IntegerField()
    service_id = serializers.IntegerField()
    client_notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class CartSyncSerializer(serializers.Serializer):
    event_id = serializers.IntegerField(required=False, allow_null=True)
    party = CartEventSerializer()
    items = CartItemSerializer(many=True)


class CartSerializer(EventSerializer):
    totals = serializers.SerializerMethodField()

    class Meta(EventSerializer.Meta):
        fields = EventSerializer.Meta.fields + ["totals"]
        read_only_fields = fields

    def get_totals(self, obj: Event) -> dict:
        return cart_totals(obj).as_dict()
