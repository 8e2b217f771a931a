"""Tests for the cart flow, price reconciliation and event tasks."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal
from io import StringIO
from types import SimpleNamespace

import pytest
from django.core.management import call_command
from django.urls import reverse

from apps.events.models import Event, EventService
from apps.events.services import (
    CartError,
    QuoteError,
    add_service_to_cart,
    duplicate_line_ids,
    price_line_for_event,
    recalculate_prices,
    request_quote,
    save_cart_event,
    sync_cart,
)
from apps.events.tasks import complete_past_events, reconcile_event_service_prices
from apps.services.models import Service, ServiceGuestTier

FUTURE = date.today() + timedelta(days=60)


@pytest.fixture
def service(provider_user):
    return Service.objects.create(
        provider=provider_user,
        name="Buffet completo",
        price_per_guest=Decimal("80.00"),
    )


@pytest.fixture
def party(client_user):
    return Event.objects.create(
        client=client_user,
        title="Formatura",
        event_date=FUTURE,
        full_guests=10,
        half_guests=2,
    )


@pytest.mark.django_db
def test_save_cart_event_creates_and_updates_draft(client_user):
    event = save_cart_event(
        client_user,
        {"title": "Festa junina", "event_date": FUTURE, "full_guests": 8, "half_guests": 2, "free_guests": 1},
    )
    assert event.status == Event.Status.DRAFT
    assert event.guest_count == 11

    updated = save_cart_event(
        client_user,
        {"title": "Festa junina", "event_date": FUTURE, "full_guests": 20},
        event_id=event.pk,
    )
    assert updated.pk == event.pk
    assert updated.guest_count == 20
    assert updated.half_guests == 0


@pytest.mark.django_db
def test_only_clients_have_a_cart(provider_user):
    with pytest.raises(CartError):
        save_cart_event(provider_user, {"title": "X", "event_date": FUTURE})


@pytest.mark.django_db
def test_add_service_is_idempotent(client_user, party, service):
    line, created = add_service_to_cart(client_user, party, service)
    assert created
    assert line.booking_status == EventService.BookingStatus.PENDING_PROVIDER_APPROVAL
    assert line.price_per_guest_at_booking == Decimal("80.00")
    assert line.total_estimated_price == Decimal("880.00")
    assert line.befest_fee_at_booking == Decimal("88.00")

    again, created = add_service_to_cart(client_user, party, service)
    assert not created
    assert again.pk == line.pk
    assert EventService.objects.filter(event=party).count() == 1


@pytest.mark.django_db
def test_add_service_to_someone_elses_event(provider_user, party, service):
    other = type(party.client).objects.create_user(email="outro@example.com", password="OutroPass123")
    with pytest.raises(CartError):
        add_service_to_cart(other, party, service)


@pytest.mark.django_db
def test_line_price_uses_tier_and_minimum(party, service):
    ServiceGuestTier.objects.create(
        service=service,
        min_total_guests=20,
        max_total_guests=100,
        base_price_per_adult=Decimal("60.00"),
    )
    prices = price_line_for_event(party, service)
    # 12 guests billed as the 20 guest minimum: 20 × 60 / 12 = 100 per guest
    assert prices["price_per_guest_at_booking"] == Decimal("100.00")
    # Age breakdown still applies: 10 × 100 + 2 × 50, below the 1200 minimum
    assert prices["total_estimated_price"] == Decimal("1100.00")


@pytest.mark.django_db
def test_sync_cart_collects_item_errors(client_user, service):
    inactive = Service.objects.create(
        provider=service.provider,
        name="Mágico",
        price_per_guest=Decimal("10.00"),
        status=Service.Status.INACTIVE,
    )
    result = sync_cart(
        client_user,
        {"title": "Batizado", "event_date": FUTURE, "full_guests": 30},
        [{"service_id": service.pk}, {"service_id": inactive.pk}, {"service_id": 999999}],
    )
    assert len(result["event_services"]) == 1
    assert {error["service_id"] for error in result["errors"]} == {inactive.pk, 999999}
    assert Event.objects.get(pk=result["event_id"]).guest_count == 30


def test_duplicate_line_ids_keeps_oldest():
    base = datetime(2030, 1, 1, 12, 0)
    lines = [
        SimpleNamespace(pk=3, service_id=1, provider_id=7, created_at=base + timedelta(minutes=2)),
        SimpleNamespace(pk=1, service_id=1, provider_id=7, created_at=base),
        SimpleNamespace(pk=2, service_id=2, provider_id=7, created_at=base + timedelta(minutes=1)),
        SimpleNamespace(pk=4, service_id=1, provider_id=7, created_at=base + timedelta(minutes=3)),
    ]
    assert duplicate_line_ids(lines) == [3, 4]
    assert duplicate_line_ids([]) == []


@pytest.mark.django_db
def test_cart_api_flow(api_client, client_user, service):
    api_client.force_authenticate(client_user)
    response = api_client.post(
        reverse("cart"),
        {"title": "Aniversário", "event_date": str(FUTURE), "full_guests": 10, "half_guests": 2},
        format="json",
    )
    assert response.status_code == 201, response.data
    event_id = response.data["id"]

    add_url = reverse("cart-items")
    first = api_client.post(add_url, {"event_id": event_id, "service_id": service.pk}, format="json")
    second = api_client.post(add_url, {"event_id": event_id, "service_id": service.pk}, format="json")
    assert first.status_code == 201, first.data
    assert second.status_code == 200
    assert first.data["id"] == second.data["id"]

    cart = api_client.get(reverse("cart"))
    assert cart.status_code == 200
    assert cart.data["id"] == event_id
    assert Decimal(str(cart.data["totals"]["subtotal"])) == Decimal("880.00")
    assert Decimal(str(cart.data["totals"]["total"])) == Decimal("968.00")

    cleaned = api_client.post(reverse("cart-clean-duplicates", kwargs={"event_id": event_id}))
    assert cleaned.data == {"removed_count": 0}

    removed = api_client.delete(reverse("cart-item-detail", kwargs={"pk": first.data["id"]}))
    assert removed.status_code == 204
    assert not EventService.objects.filter(event_id=event_id).exists()


@pytest.mark.django_db
def test_cart_sync_api(api_client, client_user, service):
    api_client.force_authenticate(client_user)
    payload = {
        "party": {"title": "Casamento", "event_date": str(FUTURE), "full_guests": 50},
        "items": [{"service_id": service.pk, "quantity": 1}],
    }
    response = api_client.post(reverse("cart-sync"), payload, format="json")
    assert response.status_code == 200, response.data
    assert response.data["errors"] == []
    assert len(response.data["event_services"]) == 1


@pytest.mark.django_db
def test_cart_rejects_non_numeric_event_id(api_client, client_user, party):
    api_client.force_authenticate(client_user)
    response = api_client.get(reverse("cart"), {"event_id": "abc"})
    assert response.status_code == 400
    assert "event_id" in response.data

    assert api_client.get(reverse("cart"), {"event_id": party.pk}).data["id"] == party.pk


@pytest.mark.django_db
def test_cart_rejects_past_date(api_client, client_user):
    api_client.force_authenticate(client_user)
    response = api_client.post(
        reverse("cart"),
        {"title": "Ontem", "event_date": str(date.today() - timedelta(days=1))},
        format="json",
    )
    assert response.status_code == 400
    assert "event_date" in response.data


@pytest.mark.django_db
def test_recalculate_prices(party, service):
    wrong = EventService.objects.create(
        event=party,
        service=service,
        provider=service.provider,
        price_per_guest_at_booking=Decimal("80.00"),
        total_estimated_price=Decimal("960.00"),
    )

    preview = recalculate_prices(dry_run=True)
    assert preview["checked"] == 1
    assert preview["corrected"][0]["new"] == Decimal("880.00")
    wrong.refresh_from_db()
    assert wrong.total_estimated_price == Decimal("960.00")

    result = recalculate_prices()
    assert result["total_difference"] == Decimal("80.00")
    wrong.refresh_from_db()
    assert wrong.total_estimated_price == Decimal("880.00")


@pytest.mark.django_db
def test_fix_prices_command_dry_run(party, service):
    EventService.objects.create(
        event=party,
        service=service,
        provider=service.provider,
        price_per_guest_at_booking=Decimal("80.00"),
        total_estimated_price=Decimal("100.00"),
    )
    out = StringIO()
    call_command("fix_event_service_prices", "--dry-run", stdout=out)
    assert "R$ 100,00 -> R$ 880,00" in out.getvalue()
    assert EventService.objects.get().total_estimated_price == Decimal("100.00")


@pytest.mark.django_db
def test_periodic_tasks(client_user, party, service):
    EventService.objects.create(
        event=party,
        service=service,
        provider=service.provider,
        price_per_guest_at_booking=Decimal("80.00"),
        total_estimated_price=Decimal("1.00"),
    )
    assert reconcile_event_service_prices.delay().get() == {"checked": 1, "corrected": 1}

    past = Event.objects.create(
        client=client_user,
        title="Festa passada",
        event_date=date.today() - timedelta(days=2),
        guest_count=10,
        status=Event.Status.CONFIRMED,
    )
    assert complete_past_events.delay().get() == {"completed": 1}
    past.refresh_from_db()
    assert past.status == Event.Status.COMPLETED


@pytest.mark.django_db
def test_concurrent_duplicate_quote_request_is_rejected(monkeypatch, party, service):
    request_quote(party, service)
    # The other request already passed the existence check
    monkeypatch.setattr("apps.events.services._find_line", lambda event, svc: None)

    with pytest.raises(QuoteError):
        request_quote(party, service)
    assert EventService.objects.filter(event=party, service=service).count() == 1
