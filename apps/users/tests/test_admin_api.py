"""Integration tests for the platform admin API."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.events.models import Event, EventService
from apps.services.models import Service, ServiceGuestTier
from apps.users.models import User


class AdminAPITests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(
            email="admin@befest.com",
            password="AdminPass123",
            role=User.RoleChoices.ADMIN,
        )
        self.client_user = User.objects.create_user(
            email="joana@example.com",
            password="ClientPass123",
            full_name="Joana Lima",
        )
        self.provider = User.objects.create_user(
            email="som@example.com",
            password="ProviderPass123",
            role=User.RoleChoices.PROVIDER,
            organization_name="Som Total",
        )
        self.service = Service.objects.create(
            provider=self.provider,
            name="Sonorização",
            price_per_guest=Decimal("12.00"),
        )
        ServiceGuestTier.objects.create(
            service=self.service,
            min_total_guests=1,
            max_total_guests=100,
            base_price_per_adult=Decimal("12.00"),
        )
        future = date.today() + timedelta(days=20)
        self.event = Event.objects.create(
            client=self.client_user,
            title="Festa da firma",
            event_date=future,
            guest_count=50,
            status=Event.Status.PLANNING,
        )
        self.draft = Event.objects.create(
            client=self.client_user,
            title="Rascunho",
            event_date=future,
            guest_count=5,
        )
        self.quote = EventService.objects.create(
            event=self.event,
            service=self.service,
            provider=self.provider,
            price_per_guest_at_booking=Decimal("12.00"),
            total_estimated_price=Decimal("600.00"),
            booking_status=EventService.BookingStatus.APPROVED,
        )
        self.client.force_authenticate(self.admin)

    def test_non_admin_is_forbidden(self) -> None:
        self.client.force_authenticate(self.client_user)
        response = self.client.get(reverse("admin-event-list"))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_event_list_hides_drafts_and_counts_quotes(self) -> None:
        response = self.client.get(reverse("admin-event-list"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([e["id"] for e in response.data], [self.event.id])
        row = response.data[0]
        self.assertEqual(row["client_name"], "Joana Lima")
        self.assertEqual(row["services_count"], 1)
        self.assertEqual(row["approved_services_count"], 1)
        self.assertEqual(row["progress"], 100)
        self.assertEqual(Decimal(row["total_estimated_value"]), Decimal("600.00"))

        drafts = self.client.get(reverse("admin-event-list"), {"status": "draft"})
        self.assertEqual([e["id"] for e in drafts.data], [self.draft.id])

    def test_event_search(self) -> None:
        found = self.client.get(reverse("admin-event-list"), {"search": "joana"})
        self.assertEqual(len(found.data), 1)
        missing = self.client.get(reverse("admin-event-list"), {"search": "inexistente"})
        self.assertEqual(missing.data, [])

    def test_event_detail_includes_quotes(self) -> None:
        response = self.client.get(reverse("admin-event-detail", kwargs={"pk": self.event.id}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["event_services"][0]["service_name"], "Sonorização")

    def test_users_by_role(self) -> None:
        response = self.client.get(reverse("admin-user-list"), {"role": "provider"})
        self.assertEqual([u["email"] for u in response.data], ["som@example.com"])

    def test_services_and_quotes_listings(self) -> None:
        services = self.client.get(reverse("admin-service-list"))
        self.assertEqual(services.data[0]["provider_name"], "Som Total")

        quotes = self.client.get(reverse("admin-quote-list"), {"booking_status": "approved"})
        self.assertEqual(quotes.data[0]["event_title"], "Festa da firma")

        counts = self.client.get(reverse("admin-quote-counts"))
        self.assertEqual(counts.data, {"total": 1, "by_status": {"approved": 1}})

    def test_services_filtered_by_provider(self) -> None:
        response = self.client.get(reverse("admin-service-list"), {"provider": self.provider.id})
        self.assertEqual([s["id"] for s in response.data], [self.service.id])

        other = User.objects.create_user(
            email="outro@example.com",
            password="ProviderPass123",
            role=User.RoleChoices.PROVIDER,
        )
        response = self.client.get(reverse("admin-service-list"), {"provider": other.id})
        self.assertEqual(response.data, [])

    def test_invalid_filter_values_return_400(self) -> None:
        cases = [
            ("admin-service-list", {"provider": "abc"}),
            ("admin-service-list", {"status": "quebrado"}),
            ("admin-event-list", {"status": "publicado"}),
            ("admin-user-list", {"role": "gerente"}),
            ("admin-quote-list", {"booking_status": "talvez"}),
        ]
        for name, params in cases:
            with self.subTest(name=name, params=params):
                response = self.client.get(reverse(name), params)
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_client_cascades(self) -> None:
        response = self.client.delete(reverse("admin-user-detail", kwargs={"pk": self.client_user.id}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["removed"], {"events": 2, "event_services": 1})
        self.assertFalse(User.objects.filter(pk=self.client_user.id).exists())
        self.assertFalse(Event.objects.exists())
        self.assertFalse(EventService.objects.exists())
        self.assertTrue(Service.objects.filter(pk=self.service.id).exists())

    def test_delete_provider_cascades(self) -> None:
        response = self.client.delete(reverse("admin-user-detail", kwargs={"pk": self.provider.id}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["removed"], {"services": 1, "event_services": 1})
        self.assertFalse(Service.objects.exists())
        self.assertFalse(ServiceGuestTier.objects.exists())
        self.assertFalse(EventService.objects.exists())
        self.assertTrue(Event.objects.filter(pk=self.event.id).exists())

    def test_admin_accounts_cannot_be_deleted(self) -> None:
        other_admin = User.objects.create_user(
            email="admin2@befest.com",
            password="AdminPass123",
            role=User.RoleChoices.ADMIN,
        )
        response = self.client.delete(reverse("admin-user-detail", kwargs={"pk": other_admin.id}))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
