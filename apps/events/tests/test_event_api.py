"""API tests for events and quotes."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.events.models import Event, EventService
from apps.notifications.models import Notification
from apps.services.models import Service
from apps.users.models import User


class EventAPITests(APITestCase):
    def setUp(self) -> None:
        self.client_user = User.objects.create_user(
            email="joana@example.com",
            password="ClientPass123",
            full_name="Joana Lima",
            cpf="11122233344",
        )
        self.other_client = User.objects.create_user(
            email="pedro@example.com",
            password="ClientPass123",
            full_name="Pedro Alves",
            cpf="55566677788",
        )
        self.provider = User.objects.create_user(
            email="buffet-sabor@example.com",
            password="ProviderPass123",
            role=User.RoleChoices.PROVIDER,
            organization_name="Buffet Sabor",
            cnpj="12345678000155",
        )
        self.service = Service.objects.create(
            provider=self.provider,
            name="Buffet infantil",
            price_per_guest=Decimal("50.00"),
        )
        self.future = date.today() + timedelta(days=30)
        self.event = Event.objects.create(
            client=self.client_user,
            title="Aniversário da Clara",
            event_date=self.future,
            full_guests=10,
            half_guests=4,
            free_guests=2,
        )

    def _quote(self, booking_status=EventService.BookingStatus.PENDING_PROVIDER_APPROVAL) -> EventService:
        return EventService.objects.create(
            event=self.event,
            service=self.service,
            provider=self.provider,
            price_per_guest_at_booking=Decimal("50.00"),
            total_estimated_price=Decimal("600.00"),
            booking_status=booking_status,
        )

    # ------------------------------------------------------------------ events

    def test_client_creates_event_with_guest_breakdown(self) -> None:
        self.client.force_authenticate(self.client_user)
        payload = {
            "title": "Chá de bebê",
            "event_date": str(self.future),
            "full_guests": 20,
            "half_guests": 5,
            "free_guests": 3,
            "location": "Salão do prédio",
        }
        response = self.client.post(reverse("event-list"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["guest_count"], 28)
        self.assertEqual(response.data["status"], Event.Status.DRAFT)
        self.assertEqual(response.data["guest_breakdown"], "20 inteiras, 5 meias, 3 free")

    def test_event_date_cannot_be_in_the_past(self) -> None:
        self.client.force_authenticate(self.client_user)
        payload = {
            "title": "Festa atrasada",
            "event_date": str(date.today() - timedelta(days=1)),
            "guest_count": 10,
        }
        response = self.client.post(reverse("event-list"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("event_date", response.data)

    def test_provider_cannot_create_event(self) -> None:
        self.client.force_authenticate(self.provider)
        payload = {"title": "Festa", "event_date": str(self.future), "guest_count": 10}
        response = self.client.post(reverse("event-list"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_client_lists_only_own_events(self) -> None:
        Event.objects.create(client=self.other_client, title="Outra festa", event_date=self.future, guest_count=5)
        self.client.force_authenticate(self.client_user)
        response = self.client.get(reverse("event-list"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["id"] for item in response.data], [self.event.id])

    def test_other_client_cannot_see_event(self) -> None:
        self.client.force_authenticate(self.other_client)
        response = self.client.get(reverse("event-detail", kwargs={"pk": self.event.id}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_provider_with_quote_can_read_but_not_edit(self) -> None:
        self._quote()
        self.client.force_authenticate(self.provider)
        url = reverse("event-detail", kwargs={"pk": self.event.id})
        self.assertEqual(self.client.get(url).status_code, status.HTTP_200_OK)
        response = self.client.patch(url, {"title": "Editado"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        response = self.client.get(reverse("event-provider"))
        self.assertEqual([item["id"] for item in response.data], [self.event.id])

    def test_update_recomputes_guest_count(self) -> None:
        self.client.force_authenticate(self.client_user)
        response = self.client.patch(
            reverse("event-detail", kwargs={"pk": self.event.id}),
            {"half_guests": 10},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["guest_count"], 22)

    def test_completed_event_is_not_editable(self) -> None:
        self.event.status = Event.Status.COMPLETED
        self.event.save()
        self.client.force_authenticate(self.client_user)
        response = self.client.patch(
            reverse("event-detail", kwargs={"pk": self.event.id}),
            {"title": "Novo nome"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_status_transitions(self) -> None:
        self.client.force_authenticate(self.client_user)
        url = reverse("event-change-status", kwargs={"pk": self.event.id})

        response = self.client.post(url, {"status": "confirmed"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("Transições permitidas: planning, cancelled", response.data["detail"])

        response = self.client.post(url, {"status": "planning"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.event.refresh_from_db()
        self.assertEqual(self.event.status, Event.Status.PLANNING)

    def test_cancelled_event_can_return_to_draft(self) -> None:
        self.event.status = Event.Status.CANCELLED
        self.event.save()
        self.client.force_authenticate(self.client_user)
        url = reverse("event-change-status", kwargs={"pk": self.event.id})
        response = self.client.post(url, {"status": "draft"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)

    def test_delete_blocked_by_approved_quote(self) -> None:
        self._quote(EventService.BookingStatus.APPROVED)
        self.client.force_authenticate(self.client_user)
        response = self.client.delete(reverse("event-detail", kwargs={"pk": self.event.id}))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Event.objects.filter(pk=self.event.id).exists())

    def test_delete_blocked_when_confirmed(self) -> None:
        self.event.status = Event.Status.CONFIRMED
        self.event.save()
        self.client.force_authenticate(self.client_user)
        response = self.client.delete(reverse("event-detail", kwargs={"pk": self.event.id}))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_draft_event(self) -> None:
        self.client.force_authenticate(self.client_user)
        response = self.client.delete(reverse("event-detail", kwargs={"pk": self.event.id}))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------ quotes

    def test_request_quote_notifies_provider(self) -> None:
        self.client.force_authenticate(self.client_user)
        response = self.client.post(
            reverse("event-service-list"),
            {"event": self.event.id, "service": self.service.id, "client_notes": "Sem glúten"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["booking_status"], EventService.BookingStatus.PENDING_PROVIDER_APPROVAL)
        # 10 × 50 + 4 × 25, free guests not charged
        self.assertEqual(Decimal(response.data["total_estimated_price"]), Decimal("600.00"))
        self.assertEqual(response.data["provider"], self.provider.id)
        self.assertTrue(Notification.objects.filter(user=self.provider).exists())

        duplicate = self.client.post(
            reverse("event-service-list"),
            {"event": self.event.id, "service": self.service.id},
            format="json",
        )
        self.assertEqual(duplicate.status_code, status.HTTP_400_BAD_REQUEST)

    def test_request_quote_for_inactive_service(self) -> None:
        self.service.toggle_status()
        self.client.force_authenticate(self.client_user)
        response = self.client.post(
            reverse("event-service-list"),
            {"event": self.event.id, "service": self.service.id},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["detail"], "Serviço não está disponível")

    def test_request_quote_for_foreign_event(self) -> None:
        self.client.force_authenticate(self.other_client)
        response = self.client.post(
            reverse("event-service-list"),
            {"event": self.event.id, "service": self.service.id},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("event", response.data)

    def test_provider_approves_quote(self) -> None:
        quote = self._quote()
        self.client.force_authenticate(self.provider)
        response = self.client.patch(
            reverse("event-service-detail", kwargs={"pk": quote.id}),
            {"booking_status": "approved", "provider_notes": "Inclui bolo", "total_estimated_price": "650.00"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        quote.refresh_from_db()
        self.assertEqual(quote.booking_status, EventService.BookingStatus.APPROVED)
        self.assertEqual(quote.total_estimated_price, Decimal("650.00"))
        self.assertTrue(Notification.objects.filter(user=self.client_user, title="Orçamento atualizado").exists())

    def test_provider_invalid_transition(self) -> None:
        quote = self._quote()
        self.client.force_authenticate(self.provider)
        response = self.client.post(
            reverse("event-service-change-status", kwargs={"pk": quote.id}),
            {"booking_status": "completed"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["detail"], "Transição de status inválida")

    def test_terminal_status_has_no_transitions(self) -> None:
        quote = self._quote(EventService.BookingStatus.REJECTED)
        self.client.force_authenticate(self.provider)
        response = self.client.post(
            reverse("event-service-change-status", kwargs={"pk": quote.id}),
            {"booking_status": "approved"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_client_only_updates_notes(self) -> None:
        quote = self._quote()
        self.client.force_authenticate(self.client_user)
        response = self.client.patch(
            reverse("event-service-detail", kwargs={"pk": quote.id}),
            {"client_notes": "Chegar às 14h", "booking_status": "approved"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        quote.refresh_from_db()
        self.assertEqual(quote.client_notes, "Chegar às 14h")
        self.assertEqual(quote.booking_status, EventService.BookingStatus.PENDING_PROVIDER_APPROVAL)

    def test_client_cancels_pending_quote(self) -> None:
        quote = self._quote()
        self.client.force_authenticate(self.client_user)
        response = self.client.delete(reverse("event-service-detail", kwargs={"pk": quote.id}))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(EventService.objects.filter(pk=quote.id).exists())

    def test_confirmed_quote_cannot_be_cancelled(self) -> None:
        quote = self._quote(EventService.BookingStatus.CONFIRMED)
        self.client.force_authenticate(self.client_user)
        response = self.client.delete(reverse("event-service-detail", kwargs={"pk": quote.id}))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_provider_pending_requests(self) -> None:
        quote = self._quote()
        self.client.force_authenticate(self.provider)
        response = self.client.get(reverse("event-service-pending"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["id"] for item in response.data], [quote.id])
