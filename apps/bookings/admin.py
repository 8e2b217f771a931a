"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "event",
        "service",
        "client",
        "status",
        "guest_count",
        "price",
        "created_at",
    )
    list_filter = ("status",)
    search_fields = ("event__title", "service__name", "client__email")
    raw_id_fields = ("event", "service", "client")
    readonly_fields = ("created_at", "updated_at")
