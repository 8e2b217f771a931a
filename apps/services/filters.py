"""FilterSet definitions for the public service catalogue."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Q  # type: ignore

from .models import Service, ServiceCategory


class ServiceFilterSet(django_filters.FilterSet):
    """Filters used by the service list and search."""

    category = django_filters.ChoiceFilter(field_name="category", choices=ServiceCategory.choices)
    provider = django_filters.NumberFilter(field_name="provider_id", lookup_expr="exact")
    city = django_filters.CharFilter(field_name="provider__city", lookup_expr="icontains")
    state = django_filters.CharFilter(field_name="provider__state", lookup_expr="iexact")
    price_min = django_filters.NumberFilter(method="filter_price_min")
    price_max = django_filters.NumberFilter(method="filter_price_max")
    guests = django_filters.NumberFilter(method="filter_guests")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Service
        fields = ["category", "provider", "status"]

    def filter_price_min(self, queryset, name, value):  # type: ignore
        return queryset.filter(
            Q(price_per_guest__gte=value) | Q(price_per_guest__isnull=True, base_price__gte=value)
        )

    def filter_price_max(self, queryset, name, value):  # type: ignore
        return queryset.filter(
            Q(price_per_guest__lte=value) | Q(price_per_guest__isnull=True, base_price__lte=value)
        )

    def filter_guests(self, queryset, name, value):  # type: ignore
        guests = int(value)
        return queryset.filter(min_guests__lte=guests).filter(
            Q(max_guests__isnull=True) | Q(max_guests__gte=guests)
        )

    def filter_search(self, queryset, name, value):  # type: ignore
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(Q(name__icontains=value) | Q(description__icontains=value))
