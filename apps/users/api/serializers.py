"""Serializers for the platform admin API."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.events.models import Event, EventService
from apps.events.serializers import EventServiceSerializer
from apps.services.models import Service
from apps.users.models import CustomUser


class AdminUserSerializer(serializers.ModelSerializer):
    """Listagem de usuários para o painel administrativo."""

    role_display = serializers.CharField(source="get_role_display", read_only=True)
    display_name = serializers.ReadOnlyField()

    class Meta:
        model = CustomUser
        fields = [
            "id",
            "email",
            "full_name",
            "display_name",
            "role",
            "role_display",
            "phone",
            "organization_name",
            "city",
            "state",
            "is_active",
            "created_at",
        ]
        read_only_fields = fields


class AdminEventListSerializer(serializers.ModelSerializer):
    """Festa com dados do cliente e contagem de orçamentos."""

    client_name = serializers.CharField(source="client.display_name", read_only=True)
    client_email = serializers.CharField(source="client.email", read_only=True)
    services_count = serializers.IntegerField(read_only=True)
    approved_services_count = serializers.IntegerField(read_only=True)
    total_estimated_value = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    progress = serializers.SerializerMethodField()

    class Meta:
        model = Event
        fields = [
            "id",
            "title",
            "client",
            "client_name",
            "client_email",
            "event_date",
            "location",
            "guest_count",
            "status",
            "services_count",
            "approved_services_count",
            "total_estimated_value",
            "progress",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_progress(self, obj: Event) -> int:
        if not obj.services_count:
            return 0
        return round(obj.approved_services_count * 100 / obj.services_count)


class AdminEventDetailSerializer(AdminEventListSerializer):
    client_phone = serializers.CharField(source="client.phone", read_only=True)
    event_services = EventServiceSerializer(many=True, read_only=True)

    class Meta(AdminEventListSerializer.Meta):
        fields = AdminEventListSerializer.Meta.fields + [
            "client_phone",
            "description",
            "start_time",
            "full_guests",
            "half_guests",
            "free_guests",
            "budget",
            "observations",
            "event_services",
        ]
        read_only_fields = fields


class AdminServiceSerializer(serializers.ModelSerializer):
    provider_name = serializers.CharField(source="provider.display_name", read_only=True)
    provider_email = serializers.CharField(source="provider.email", read_only=True)

    class Meta:
        model = Service
        fields = [
            "id",
            "name",
            "category",
            "provider",
            "provider_name",
            "provider_email",
            "price_per_guest",
            "base_price",
            "status",
            "created_at",
        ]
        read_only_fields = fields


class AdminQuoteSerializer(EventServiceSerializer):
    event_title = serializers.CharField(source="event.title", read_only=True)
    event_date = serializers.DateField(source="event.event_date", read_only=True)
    client_name = serializers.CharField(source="event.client.display_name", read_only=True)

    class Meta(EventServiceSerializer.Meta):
        model = EventService
        fields = EventServiceSerializer.Meta.fields + ["event_title", "event_date", "client_name"]
        read_only_fields = fields
