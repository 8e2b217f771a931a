"""Tests for the admin dashboard and the agenda."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from datetime import timezone as dt_timezone
from zoneinfo import ZoneInfo
from decimal import Decimal

import pytest
from django.urls import reverse

from apps.analytics.services import dashboard_stats, month_range, week_range
from apps.events.models import Event, EventService
from apps.services.models import Service
from apps.users.models import User


@pytest.fixture
def second_provider(db):
    return User.objects.create_user(
        email="doces@example.com",
        password="DocesPass123",
        role=User.RoleChoices.PROVIDER,
        organization_name="Doces da Vovó",
    )


def _quote(event, provider, status, total):
    service = Service.objects.create(provider=provider, name=f"Serviço {total}", base_price=Decimal("10.00"))
    return EventService.objects.create(
        event=event,
        service=service,
        provider=provider,
        price_per_guest_at_booking=Decimal("10.00"),
        total_estimated_price=Decimal(total),
        booking_status=status,
    )


def test_week_and_month_ranges():
    assert week_range(date(2030, 3, 4)) == (date(2030, 3, 4), date(2030, 3, 10))
    assert month_range(2028, 2) == (date(2028, 2, 1), date(2028, 2, 29))
    assert month_range(2030, 12) == (date(2030, 12, 1), date(2030, 12, 31))


@pytest.mark.django_db
def test_dashboard_stats(client_user, provider_user, admin_user):
    future = date.today() + timedelta(days=30)
    planning = Event.objects.create(
        client=client_user, title="Festa A", event_date=future, guest_count=10, status=Event.Status.PLANNING
    )
    Event.objects.create(client=client_user, title="Rascunho", event_date=future, guest_count=5)
    _quote(planning, provider_user, EventService.BookingStatus.APPROVED, "500.00")
    _quote(planning, provider_user, EventService.BookingStatus.PENDING_PROVIDER_APPROVAL, "300.00")

    stats = dashboard_stats()

    assert stats["total_clients"] == 1
    assert stats["total_providers"] == 1
    assert stats["total_events"] == 2
    assert stats["total_active_events"] == 1
    assert stats["total_pending_requests"] == 1
    assert stats["total_event_services"] == 2
    assert stats["total_services"] == 2
    assert stats["new_clients"] == 1
    assert stats["events_by_status"]["draft"] == 1
    assert stats["events_by_status"]["planning"] == 1
    assert stats["events_by_status"]["cancelled"] == 0
    assert stats["event_services_by_status"]["approved"] == 1
    assert stats["total_revenue"] == Decimal("500.00")
    assert stats["monthly_revenue"] == Decimal("500.00")
    assert stats["average_event_value"] == Decimal("500.00")
    assert stats["recent_activity"]["new_events"] == 2


@pytest.mark.django_db
def test_monthly_revenue_uses_local_month(client_user, provider_user):
    planning = Event.objects.create(
        client=client_user,
        title="Festa B",
        event_date=date(2030, 4, 20),
        guest_count=10,
        status=Event.Status.PLANNING,
    )
    quote = _quote(planning, provider_user, EventService.BookingStatus.APPROVED, "500.00")
    # 31/03 23:30 in São Paulo is already 01/04 in UTC
    late_march = datetime(2030, 3, 31, 23, 30, tzinfo=ZoneInfo("America/Sao_Paulo"))
    EventService.objects.filter(pk=quote.pk).update(created_at=late_march)

    stats = dashboard_stats(now=datetime(2030, 4, 1, 12, 0, tzinfo=dt_timezone.utc))

    assert stats["total_revenue"] == Decimal("500.00")
    assert stats["monthly_revenue"] == Decimal("0.00")


@pytest.mark.django_db
def test_dashboard_requires_admin(api_client, client_user, admin_user):
    url = reverse("analytics-dashboard")
    api_client.force_authenticate(client_user)
    assert api_client.get(url).status_code == 403

    api_client.force_authenticate(admin_user)
    response = api_client.get(url)
    assert response.status_code == 200
    assert response.data["average_event_value"] == Decimal("0.00")


@pytest.mark.django_db
def test_agenda_by_week_is_scoped_to_provider(api_client, client_user, provider_user, second_provider):
    week_start = date.today() + timedelta(days=7)
    inside = Event.objects.create(
        client=client_user, title="Dentro", event_date=week_start + timedelta(days=6), guest_count=20
    )
    outside = Event.objects.create(
        client=client_user, title="Fora", event_date=week_start + timedelta(days=7), guest_count=20
    )
    mine = _quote(inside, provider_user, EventService.BookingStatus.APPROVED, "100.00")
    _quote(outside, provider_user, EventService.BookingStatus.APPROVED, "100.00")
    _quote(inside, second_provider, EventService.BookingStatus.APPROVED, "100.00")

    api_client.force_authenticate(provider_user)
    response = api_client.get(reverse("analytics-agenda"), {"week_start": str(week_start)})
    assert response.status_code == 200, response.data
    assert [entry["event_service_id"] for entry in response.data["entries"]] == [mine.pk]
    entry = response.data["entries"][0]
    assert entry["client_name"] == "Maria Cliente"
    assert entry["can_chat"] is True


@pytest.mark.django_db
def test_admin_agenda_by_month_with_provider_filter(api_client, admin_user, client_user, provider_user, second_provider):
    target = date.today() + timedelta(days=90)
    event = Event.objects.create(client=client_user, title="Mensal", event_date=target, guest_count=15)
    _quote(event, provider_user, EventService.BookingStatus.PENDING_PROVIDER_APPROVAL, "100.00")
    other = _quote(event, second_provider, EventService.BookingStatus.APPROVED, "100.00")

    api_client.force_authenticate(admin_user)
    url = reverse("analytics-agenda")
    everything = api_client.get(url, {"year": target.year, "month": target.month})
    assert len(everything.data["entries"]) == 2

    filtered = api_client.get(url, {"year": target.year, "month": target.month, "provider": second_provider.pk})
    assert [entry["id"] for entry in filtered.data["entries"]] == [other.pk]


@pytest.mark.django_db
def test_agenda_validation_and_permissions(api_client, client_user, provider_user):
    url = reverse("analytics-agenda")
    api_client.force_authenticate(client_user)
    assert api_client.get(url, {"week_start": "2030-01-07"}).status_code == 403

    api_client.force_authenticate(provider_user)
    assert api_client.get(url).status_code == 400
    assert api_client.get(url, {"year": 2030}).status_code == 400
