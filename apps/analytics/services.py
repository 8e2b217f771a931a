"""Aggregations behind the admin dashboard and the agenda."""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Optional

from django.db.models import Count, Sum  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.models import Booking
from apps.events.models import Event, EventService
from apps.services.models import Service
from apps.users.models import User

NEW_CLIENTS_WINDOW_DAYS = 30
RECENT_ACTIVITY_WINDOW_DAYS = 7


def _count_by(queryset, field: str, choices) -> dict[str, int]:
    counts = {str(value): 0 for value, _label in choices}
    for row in queryset.order_by().values(field).annotate(total=Count("id")):
        counts[row[field]] = row["total"]
    return counts


def _sum_prices(queryset) -> Decimal:
    return queryset.aggregate(total=Sum("total_estimated_price"))["total"] or Decimal("0.00")


def dashboard_stats(now: Optional[datetime] = None) -> dict[str, Any]:
    """
    Números do painel administrativo.

    A receita considera orçamentos aprovados; a mensal usa a data de
    criação do orçamento dentro do mês corrente.
    """
    now = now or timezone.now()
    month_start = timezone.localtime(now).replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    recent_since = now - timedelta(days=RECENT_ACTIVITY_WINDOW_DAYS)

    clients = User.objects.filter(role=User.RoleChoices.CLIENT, is_deleted=False)
    providers = User.objects.filter(role=User.RoleChoices.PROVIDER, is_deleted=False)
    active_events = Event.objects.exclude(status__in=[Event.Status.DRAFT, Event.Status.CANCELLED]).count()
    approved = EventService.objects.filter(booking_status=EventService.BookingStatus.APPROVED)

    total_revenue = _sum_prices(approved)
    monthly_revenue = _sum_prices(approved.filter(created_at__gte=month_start, created_at__lte=now))
    if active_events:
        average_event_value = (total_revenue / active_events).quantize(Decimal("0.01"))
    else:
        average_event_value = Decimal("0.00")

    return {
        "total_providers": providers.count(),
        "total_clients": clients.count(),
        "total_services": Service.objects.filter(status=Service.Status.ACTIVE).count(),
        "total_events": Event.objects.count(),
        "total_event_services": EventService.objects.count(),
        "total_bookings": Booking.objects.count(),
        "total_active_events": active_events,
        "total_pending_requests": EventService.objects.filter(
            booking_status=EventService.BookingStatus.PENDING_PROVIDER_APPROVAL
        ).count(),
        "new_clients": clients.filter(created_at__gte=now - timedelta(days=NEW_CLIENTS_WINDOW_DAYS)).count(),
        "events_by_status": _count_by(Event.objects.all(), "status", Event.Status.choices),
        "event_services_by_status": _count_by(
            EventService.objects.all(), "booking_status", EventService.BookingStatus.choices
        ),
        "monthly_revenue": monthly_revenue,
        "total_revenue": total_revenue,
        "average_event_value": average_event_value,
        "recent_activity": {
            "new_events": Event.objects.filter(created_at__gte=recent_since).count(),
            "new_event_services": EventService.objects.filter(created_at__gte=recent_since).count(),
            "new_services": Service.objects.filter(created_at__gte=recent_since).count(),
            "new_clients": clients.filter(created_at__gte=recent_since).count(),
            "new_providers": providers.filter(created_at__gte=recent_since).count(),
        },
    }


def week_range(week_start: date) -> tuple[date, date]:
    return week_start, week_start + timedelta(days=6)


def month_range(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def agenda_entries(start: date, end: date, provider: Optional[User] = None):
    """Orçamentos cujas festas acontecem entre ``start`` e ``end`` (inclusive)."""
    qs = EventService.objects.select_related(
        "event", "event__client", "service", "provider"
    ).filter(event__event_date__gte=start, event__event_date__lte=end)
    if provider is not None:
        qs = qs.filter(provider=provider)
    return qs.order_by("event__event_date", "event__start_time", "id")
