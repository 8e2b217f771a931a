"""Admin registrations for the service catalogue."""

from __future__ import annotations

from django.contrib import admin

from .models import Service, ServiceAgePricingRule, ServiceDateSurcharge, ServiceGuestTier


class ServiceGuestTierInline(admin.TabularInline):
    model = ServiceGuestTier
    extra = 0
    fields = ("min_total_guests", "max_total_guests", "base_price_per_adult", "tier_description")


class ServiceAgePricingRuleInline(admin.TabularInline):
    model = ServiceAgePricingRule
    extra = 0
    fields = ("rule_description", "age_min_years", "age_max_years", "pricing_method", "value")


class ServiceDateSurchargeInline(admin.TabularInline):
    model = ServiceDateSurcharge
    extra = 0
    fields = ("surcharge_description", "start_date", "end_date", "surcharge_type", "surcharge_value")


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "provider",
        "category",
        "status",
        "price_per_guest",
        "base_price",
        "created_at",
    )
    list_filter = ("status", "category")
    search_fields = ("name", "description", "provider__email", "provider__organization_name")
    inlines = (ServiceGuestTierInline, ServiceAgePricingRuleInline, ServiceDateSurchargeInline)
    readonly_fields = ("is_active", "created_at", "updated_at")


@admin.register(ServiceDateSurcharge)
class ServiceDateSurchargeAdmin(admin.ModelAdmin):
    list_display = ("service", "surcharge_description", "start_date", "end_date", "surcharge_type", "surcharge_value")
    list_filter = ("surcharge_type",)
    search_fields = ("service__name", "surcharge_description")
