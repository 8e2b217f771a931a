"""Integration tests for booking API endpoints."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.events.models import Event, EventService
from apps.services.models import Service
from apps.users.models import User


class BookingAPITests(APITestCase):
    """Criação, transições e cancelamento de reservas."""

    def setUp(self) -> None:
        self.client_user = User.objects.create_user(
            email="carla@example.com",
            password="ClientPass123",
            full_name="Carla Dias",
            cpf="12312312312",
        )
        self.provider = User.objects.create_user(
            email="foto@example.com",
            password="ProviderPass123",
            role=User.RoleChoices.PROVIDER,
            organization_name="Foto & Arte",
            cnpj="99888777000166",
        )
        self.service = Service.objects.create(
            provider=self.provider,
            name="Cobertura fotográfica",
            category="Fotografia",
            base_price=Decimal("20.00"),
        )
        self.event = Event.objects.create(
            client=self.client_user,
            title="Bodas de prata",
            event_date=date.today() + timedelta(days=45),
            full_guests=40,
            half_guests=10,
            status=Event.Status.CONFIRMED,
        )
        self.quote = EventService.objects.create(
            event=self.event,
            service=self.service,
            provider=self.provider,
            price_per_guest_at_booking=Decimal("20.00"),
            total_estimated_price=Decimal("900.00"),
            booking_status=EventService.BookingStatus.APPROVED,
        )

    def _booking(self, **kwargs) -> Booking:
        values = {
            "event": self.event,
            "service": self.service,
            "client": self.client_user,
            "price": Decimal("900.00"),
            "guest_count": 50,
        }
        values.update(kwargs)
        return Booking.objects.create(**values)

    def test_client_creates_booking_from_approved_quote(self) -> None:
        self.client.force_authenticate(self.client_user)
        response = self.client.post(
            reverse("booking-list"),
            {"event": self.event.id, "service": self.service.id, "notes": "Chegar cedo"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["status"], Booking.Status.PENDING)
        self.assertEqual(response.data["guest_count"], 50)
        self.assertEqual(Decimal(response.data["price"]), Decimal("900.00"))

    def test_duplicate_booking_rejected(self) -> None:
        self._booking()
        self.client.force_authenticate(self.client_user)
        response = self.client.post(
            reverse("booking-list"),
            {"event": self.event.id, "service": self.service.id},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("non_field_errors", response.data)

    def test_booking_requires_confirmed_event(self) -> None:
        self.event.status = Event.Status.PLANNING
        self.event.save()
        self.client.force_authenticate(self.client_user)
        response = self.client.post(
            reverse("booking-list"),
            {"event": self.event.id, "service": self.service.id},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(
            response.data["non_field_errors"],
            ["Apenas festas confirmadas podem receber reservas"],
        )

    def test_booking_requires_approved_quote(self) -> None:
        self.quote.booking_status = EventService.BookingStatus.PENDING_PROVIDER_APPROVAL
        self.quote.save()
        self.client.force_authenticate(self.client_user)
        response = self.client.post(
            reverse("booking-list"),
            {"event": self.event.id, "service": self.service.id},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_guest_count_cannot_exceed_event(self) -> None:
        self.client.force_authenticate(self.client_user)
        response = self.client.post(
            reverse("booking-list"),
            {"event": self.event.id, "service": self.service.id, "guest_count": 51},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_from_quote(self) -> None:
        self.client.force_authenticate(self.client_user)
        response = self.client.post(
            reverse("booking-from-quote"),
            {"event_service": self.quote.id},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(Booking.objects.get().price, Decimal("900.00"))

    def test_provider_cannot_create_booking(self) -> None:
        self.client.force_authenticate(self.provider)
        response = self.client.post(
            reverse("booking-list"),
            {"event": self.event.id, "service": self.service.id},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_list_is_scoped_by_role(self) -> None:
        booking = self._booking()
        outsider = User.objects.create_user(email="fora@example.com", password="OutsiderPass1")

        self.client.force_authenticate(self.provider)
        self.assertEqual([b["id"] for b in self.client.get(reverse("booking-list")).data], [booking.id])

        self.client.force_authenticate(outsider)
        self.assertEqual(self.client.get(reverse("booking-list")).data, [])

    def test_provider_status_transitions(self) -> None:
        booking = self._booking()
        url = reverse("booking-detail", kwargs={"pk": booking.id})
        self.client.force_authenticate(self.provider)

        response = self.client.patch(url, {"status": "paid"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("Transições permitidas: confirmed, cancelled", response.data["detail"])

        for new_status in ("confirmed", "paid", "completed"):
            response = self.client.patch(url, {"status": new_status}, format="json")
            self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.COMPLETED)

    def test_client_cannot_change_status(self) -> None:
        booking = self._booking()
        self.client.force_authenticate(self.client_user)
        response = self.client.patch(
            reverse("booking-detail", kwargs={"pk": booking.id}),
            {"status": "confirmed"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_client_updates_notes(self) -> None:
        booking = self._booking()
        self.client.force_authenticate(self.client_user)
        response = self.client.patch(
            reverse("booking-detail", kwargs={"pk": booking.id}),
            {"notes": "Fotos no jardim", "guest_count": 45},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        booking.refresh_from_db()
        self.assertEqual(booking.notes, "Fotos no jardim")
        self.assertEqual(booking.guest_count, 45)

    def test_client_cancels_booking(self) -> None:
        booking = self._booking()
        self.client.force_authenticate(self.client_user)
        response = self.client.post(reverse("booking-cancel", kwargs={"pk": booking.id}))
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], Booking.Status.CANCELLED)

    def test_completed_booking_cannot_be_cancelled(self) -> None:
        booking = self._booking(status=Booking.Status.COMPLETED)
        self.client.force_authenticate(self.client_user)
        response = self.client.post(reverse("booking-cancel", kwargs={"pk": booking.id}))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_service_with_open_booking_cannot_be_deleted(self) -> None:
        self._booking(status=Booking.Status.PAID)
        self.client.force_authenticate(self.provider)
        response = self.client.delete(reverse("service-detail", kwargs={"pk": self.service.id}))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Service.objects.filter(pk=self.service.id).exists())
