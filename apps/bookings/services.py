"""Domain services for booking workflows."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

import structlog
from django.db import transaction  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore

from apps.events.models import Event, EventService

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from .models import Booking

logger = structlog.get_logger(__name__)

# Quote statuses reached only after the provider approved it
APPROVED_QUOTE_STATUSES = (
    EventService.BookingStatus.APPROVED,
    EventService.BookingStatus.WAITING_PAYMENT,
    EventService.BookingStatus.IN_PROGRESS,
    EventService.BookingStatus.CONFIRMED,
)


class BookingRuleError(Exception):
    """Raised when a booking operation breaks a business rule."""


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def find_approved_quote(event: Event, service) -> Optional[EventService]:
    qs = EventService.objects.filter(
        event=event,
        service=service,
        booking_status__in=APPROVED_QUOTE_STATUSES,
    )
    return _lock_queryset_if_possible(qs).first()


@transaction.atomic
def create_booking(
    client,
    event: Event,
    service,
    *,
    price=None,
    guest_count: Optional[int] = None,
    notes: str = "",
) -> "Booking":
    """Reserva um serviço para uma festa confirmada com orçamento aprovado."""

    from .models import Booking  # Local import to prevent circular dependency

    if event.client_id != client.pk:
        raise BookingRuleError("Evento não encontrado ou acesso negado")
    if event.status != Event.Status.CONFIRMED:
        raise BookingRuleError("Apenas festas confirmadas podem receber reservas")

    quote = find_approved_quote(event, service)
    if quote is None:
        raise BookingRuleError("Não existe orçamento aprovado para este serviço nesta festa")

    existing = _lock_queryset_if_possible(Booking.objects.filter(event=event, service=service))
    if existing.exists():
        raise BookingRuleError("Este serviço já está reservado para esta festa")

    guest_count = guest_count or event.guest_count
    if guest_count < 1:
        raise BookingRuleError("Número de convidados deve ser maior que 0")
    if guest_count > event.guest_count:
        raise BookingRuleError("Número de convidados maior que o da festa")

    if price is None:
        price = quote.total_estimated_price or 0

    booking = Booking.objects.create(
        event=event,
        service=service,
        client=client,
        price=price,
        guest_count=guest_count,
        notes=notes or "",
    )
    logger.info("booking.created", booking_id=booking.pk, event_id=event.pk, service_id=service.pk)
    return booking


def create_booking_from_quote(client, event_service: EventService, notes: str = "") -> "Booking":
    return create_booking(
        client,
        event_service.event,
        event_service.service,
        price=event_service.total_estimated_price,
        notes=notes,
    )


@transaction.atomic
def update_booking(booking: "Booking", user, data: dict[str, Any]) -> "Booking":
    """
    Prestador (ou admin) altera preço e status; cliente altera observações
    e convidados enquanto a reserva está pendente.
    """
    is_provider = booking.service.provider_id == user.pk or user.is_platform_admin()
    is_client = booking.client_id == user.pk
    changed: list[str] = []

    if "status" in data and data["status"] != booking.status:
        if not is_provider:
            raise BookingRuleError("Apenas o prestador pode alterar o status da reserva")
        if not booking.can_transition_to(data["status"]):
            allowed = ", ".join(booking.allowed_transitions()) or "nenhuma"
            raise BookingRuleError(
                f'Transição inválida: "{booking.status}" -> "{data["status"]}". Transições permitidas: {allowed}'
            )
        booking.status = data["status"]
        changed.append("status")

    if "price" in data:
        if not is_provider:
            raise BookingRuleError("Apenas o prestador pode alterar o valor da reserva")
        booking.price = data["price"]
        changed.append("price")

    if "guest_count" in data:
        if data["guest_count"] > booking.event.guest_count:
            raise BookingRuleError("Número de convidados maior que o da festa")
        if is_client and booking.status != booking.Status.PENDING:
            raise BookingRuleError("Convidados só podem ser alterados em reservas pendentes")
        booking.guest_count = data["guest_count"]
        changed.append("guest_count")

    if "notes" in data:
        booking.notes = data["notes"]
        changed.append("notes")

    if changed:
        booking.save(update_fields=changed + ["updated_at"])
        logger.info("booking.updated", booking_id=booking.pk, fields=changed)
    return booking


@transaction.atomic
def cancel_booking(booking: "Booking", user) -> "Booking":
    if booking.client_id != user.pk:
        raise BookingRuleError("Apenas o cliente pode cancelar a reserva")
    if booking.status == booking.Status.COMPLETED:
        raise BookingRuleError("Não é possível cancelar uma reserva concluída")
    if booking.status == booking.Status.CANCELLED:
        raise BookingRuleError("Reserva já cancelada")
    booking.status = booking.Status.CANCELLED
    booking.save(update_fields=["status", "updated_at"])
    logger.info("booking.cancelled", booking_id=booking.pk)
    return booking
