"""Admin registrations for events and quotes."""

from __future__ import annotations

from django.contrib import admin

from .models import Event, EventService


class EventServiceInline(admin.TabularInline):
    model = EventService
    extra = 0
    fields = (
        "service",
        "provider",
        "price_per_guest_at_booking",
        "total_estimated_price",
        "booking_status",
    )
    raw_id_fields = ("service", "provider")


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ("title", "client", "event_date", "guest_count", "status", "created_at")
    list_filter = ("status", "event_date")
    search_fields = ("title", "location", "client__email", "client__full_name")
    inlines = (EventServiceInline,)
    readonly_fields = ("guest_count", "created_at", "updated_at")


@admin.register(EventService)
class EventServiceAdmin(admin.ModelAdmin):
    list_display = (
        "event",
        "service",
        "provider",
        "booking_status",
        "total_estimated_price",
        "created_at",
    )
    list_filter = ("booking_status",)
    search_fields = ("event__title", "service__name", "provider__email")
    raw_id_fields = ("event", "service", "provider")
