"""Business rules for events, quotes and the client cart."""

from __future__ import annotations

from collections import OrderedDict
from decimal import Decimal
from typing import Any, Iterable, Optional

import structlog
from django.db import IntegrityError, transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.notifications.services import notify_new_quote_request, notify_quote_status_changed
from apps.services.models import Service
from apps.services.pricing import (
    PricingTotals,
    calculate_price_with_minimum_guests,
    calculate_service_value,
    calculate_totals,
    is_price_correct,
)
from .models import Event, EventService

logger = structlog.get_logger(__name__)

PAST_DATE_MESSAGE = "A data do evento não pode ser no passado"


class EventRuleError(Exception):
    """Raised when an event operation breaks a business rule."""


class EventTransitionError(EventRuleError):
    """Raised on a forbidden event status change."""


class QuoteError(Exception):
    """Raised when a quote (event service) operation is not allowed."""


class QuoteTransitionError(QuoteError):
    """Raised on a forbidden quote status change."""


class CartError(Exception):
    """Raised when the cart cannot be updated."""


# ============================================================================
# EVENTS
# ============================================================================

def ensure_date_not_in_past(event_date) -> None:
    if event_date < timezone.localdate():
        raise EventRuleError(PAST_DATE_MESSAGE)


def ensure_event_editable(event: Event) -> None:
    if not event.is_editable:
        raise EventRuleError("Não é possível editar eventos finalizados ou cancelados")


@transaction.atomic
def change_event_status(event: Event, new_status: str) -> Event:
    if new_status not in Event.Status.values:
        raise EventTransitionError(f'Status inválido: "{new_status}"')
    if not event.can_transition_to(new_status):
        allowed = ", ".join(event.allowed_transitions()) or "nenhuma"
        raise EventTransitionError(
            f'Transição inválida: "{event.status}" -> "{new_status}". Transições permitidas: {allowed}'
        )
    old_status = event.status
    event.status = new_status
    event.save(update_fields=["status", "updated_at"])
    logger.info("event.status_changed", event_id=event.pk, old=old_status, new=new_status)
    return event


@transaction.atomic
def delete_event(event: Event) -> None:
    if event.status in (Event.Status.CONFIRMED, Event.Status.COMPLETED):
        raise EventRuleError("Não é possível excluir eventos confirmados ou completos")
    if event.event_services.filter(booking_status=EventService.BookingStatus.APPROVED).exists():
        raise EventRuleError("Não é possível excluir evento com serviços aprovados")
    event_id = event.pk
    event.delete()
    logger.info("event.deleted", event_id=event_id)


def complete_past_events(today=None) -> int:
    """Mark confirmed parties whose date has passed as completed."""
    today = today or timezone.localdate()
    return Event.objects.filter(
        status=Event.Status.CONFIRMED,
        event_date__lt=today,
    ).update(status=Event.Status.COMPLETED, updated_at=timezone.now())


# ============================================================================
# QUOTES
# ============================================================================

def price_line_for_event(event: Event, service: Service) -> dict[str, Decimal]:
    """
    Prices frozen on a quote line.

    The per-guest price comes from the tier covering the event head count
    (falling back to the service price). When the party is below the tier
    minimum the per-guest price is raised to minimum total / head count.
    The line total then applies the age breakdown to that price: half
    guests pay 50% and free guests nothing, so a line with children can
    come out below the tier minimum.
    """
    minimum = calculate_price_with_minimum_guests(
        list(service.guest_tiers.all()),
        event.guest_count,
        fallback_price_per_guest=service.fallback_price_per_guest,
    )
    price = minimum.price_per_guest
    total = calculate_service_value(price, event.full_guests, event.half_guests)
    fee = calculate_totals([total]).befest_fee
    return {
        "price_per_guest_at_booking": price,
        "befest_fee_at_booking": fee,
        "total_estimated_price": total,
    }


def _find_line(event: Event, service: Service) -> Optional[EventService]:
    return EventService.objects.filter(event=event, service=service, provider_id=service.provider_id).first()


DUPLICATE_QUOTE_MESSAGE = "Já existe uma solicitação para este serviço neste evento"


@transaction.atomic
def request_quote(event: Event, service: Service, client_notes: str = "") -> EventService:
    """Cliente solicita orçamento de um serviço para a festa."""
    if not event.is_editable:
        raise QuoteError("Não é possível solicitar orçamentos para eventos finalizados")
    if not service.is_available:
        raise QuoteError("Serviço não está disponível")
    if _find_line(event, service) is not None:
        raise QuoteError(DUPLICATE_QUOTE_MESSAGE)

    try:
        with transaction.atomic():
            event_service = EventService.objects.create(
                event=event,
                service=service,
                provider_id=service.provider_id,
                client_notes=client_notes or "",
                booking_status=EventService.BookingStatus.PENDING_PROVIDER_APPROVAL,
                **price_line_for_event(event, service),
            )
    except IntegrityError:
        # Concurrent request for the same line
        raise QuoteError(DUPLICATE_QUOTE_MESSAGE)
    notify_new_quote_request(event_service)
    logger.info("quote.requested", event_service_id=event_service.pk, event_id=event.pk, service_id=service.pk)
    return event_service


PROVIDER_EDITABLE_FIELDS = (
    "price_per_guest_at_booking",
    "befest_fee_at_booking",
    "total_estimated_price",
    "provider_notes",
)


@transaction.atomic
def update_quote_as_provider(event_service: EventService, data: dict[str, Any]) -> EventService:
    """Prestador altera preços, observações e status do orçamento."""
    changed: list[str] = []
    for field in PROVIDER_EDITABLE_FIELDS:
        if field in data and data[field] != getattr(event_service, field):
            setattr(event_service, field, data[field])
            changed.append(field)

    new_status = data.get("booking_status")
    status_changed = new_status is not None and new_status != event_service.booking_status
    if status_changed:
        if not event_service.can_transition_to(new_status):
            raise QuoteTransitionError("Transição de status inválida")
        event_service.booking_status = new_status
        changed.append("booking_status")

    if not changed:
        raise QuoteError("Nenhuma alteração foi feita")

    event_service.save(update_fields=changed + ["updated_at"])
    if status_changed:
        notify_quote_status_changed(event_service)
        logger.info(
            "quote.status_changed",
            event_service_id=event_service.pk,
            status=event_service.booking_status,
        )
    return event_service


def update_quote_as_client(event_service: EventService, client_notes: str) -> EventService:
    event_service.client_notes = client_notes or ""
    event_service.save(update_fields=["client_notes", "updated_at"])
    return event_service


def change_quote_status(event_service: EventService, new_status: str) -> EventService:
    return update_quote_as_provider(event_service, {"booking_status": new_status})


@transaction.atomic
def cancel_quote(event_service: EventService, user) -> None:
    """Cliente cancela (remove) a solicitação de orçamento."""
    if event_service.event.client_id != user.pk:
        raise QuoteError("Apenas o cliente pode cancelar a solicitação")
    if event_service.booking_status in EventService.NON_CANCELLABLE_STATUSES:
        raise QuoteError("Não é possível cancelar orçamentos já confirmados")
    event_service_id = event_service.pk
    event_service.delete()
    logger.info("quote.cancelled", event_service_id=event_service_id)


def pending_requests_for_provider(provider):
    return (
        EventService.objects.filter(
            provider=provider,
            booking_status=EventService.BookingStatus.PENDING_PROVIDER_APPROVAL,
        )
        .select_related("event", "event__client", "service")
        .order_by("-created_at")
    )


# ============================================================================
# CART
# ============================================================================

CART_EVENT_FIELDS = ("title", "event_date", "start_time", "location", "full_guests", "half_guests", "free_guests")


@transaction.atomic
def save_cart_event(client, data: dict[str, Any], event_id: Optional[int] = None) -> Event:
    """Cria ou atualiza a festa em rascunho usada pelo carrinho."""
    if not client.is_client():
        raise CartError("Apenas clientes podem criar eventos")

    values = {field: data.get(field) for field in CART_EVENT_FIELDS if field in data}
    for field in ("full_guests", "half_guests", "free_guests"):
        values[field] = values.get(field) or 0
    values["location"] = values.get("location") or ""

    if event_id is not None:
        event = Event.objects.select_for_update().filter(pk=event_id, client=client).first()
        if event is None:
            raise CartError("Evento não encontrado ou acesso negado")
        for field, value in values.items():
            setattr(event, field, value)
        event.guest_count = 0
        event.status = Event.Status.DRAFT
        event.save()
    else:
        event = Event.objects.create(client=client, status=Event.Status.DRAFT, **values)
    logger.info("cart.event_saved", event_id=event.pk, client_id=client.pk, guests=event.guest_count)
    return event


def add_service_to_cart(client, event: Event, service: Service, client_notes: str = "") -> tuple[EventService, bool]:
    """
    Adiciona um serviço ao carrinho da festa.

    Idempotent: an existing line for the same (event, service, provider)
    is returned untouched. Returns ``(line, created)``.
    """
    if event.client_id != client.pk:
        raise CartError("Evento não encontrado ou acesso negado")
    if not service.is_available:
        raise CartError("Serviço não está disponível")

    existing = _find_line(event, service)
    if existing is not None:
        return existing, False

    try:
        with transaction.atomic():
            line = EventService.objects.create(
                event=event,
                service=service,
                provider_id=service.provider_id,
                client_notes=client_notes or "",
                booking_status=EventService.BookingStatus.PENDING_PROVIDER_APPROVAL,
                **price_line_for_event(event, service),
            )
    except IntegrityError:
        # Concurrent insert of the same line
        existing = _find_line(event, service)
        if existing is None:
            raise
        return existing, False

    notify_new_quote_request(line)
    logger.info("cart.service_added", event_id=event.pk, service_id=service.pk, event_service_id=line.pk)
    return line, True


def remove_service_from_cart(client, event_service: EventService) -> None:
    if event_service.event.client_id != client.pk:
        raise CartError("Serviço não encontrado ou acesso negado")
    event_service_id = event_service.pk
    event_service.delete()
    logger.info("cart.service_removed", event_service_id=event_service_id)


def get_cart_event(client, event_id: Optional[int] = None) -> Optional[Event]:
    """The requested cart event, or the client's most recent draft."""
    qs = Event.objects.filter(client=client).prefetch_related(
        "event_services__service__provider",
    )
    if event_id is not None:
        return qs.filter(pk=event_id).first()
    return qs.filter(status=Event.Status.DRAFT).order_by("-created_at").first()


def cart_totals(event: Event) -> PricingTotals:
    return calculate_totals(line.total_estimated_price or Decimal("0") for line in event.event_services.all())


def sync_cart(client, party_data: dict[str, Any], items: Iterable[dict[str, Any]], event_id: Optional[int] = None) -> dict:
    """
    Persist the browser cart: save the party, then add every item.

    A failing item is reported in ``errors`` and does not abort the others.
    """
    event = save_cart_event(client, party_data, event_id=event_id)
    added: list[int] = []
    errors: list[dict[str, Any]] = []
    for item in items:
        service_id = item.get("service_id")
        service = Service.objects.filter(pk=service_id).first()
        if service is None:
            errors.append({"service_id": service_id, "error": "Serviço não encontrado"})
            continue
        try:
            line, _ = add_service_to_cart(client, event, service, item.get("client_notes") or "")
        except CartError as exc:
            errors.append({"service_id": service_id, "error": str(exc)})
            continue
        added.append(line.pk)
    if errors:
        logger.warning("cart.sync_partial", event_id=event.pk, errors=len(errors))
    return {"event_id": event.pk, "event_services": added, "errors": errors}


def duplicate_line_ids(lines: Iterable[Any]) -> list[int]:
    """
    Ids of repeated lines: grouped by (service, provider), oldest kept.
    """
    groups: "OrderedDict[tuple, list]" = OrderedDict()
    for line in sorted(lines, key=lambda item: (item.created_at, item.pk)):
        groups.setdefault((line.service_id, line.provider_id), []).append(line)
    duplicates: list[int] = []
    for group in groups.values():
        duplicates.extend(line.pk for line in group[1:])
    return duplicates


@transaction.atomic
def clean_duplicate_services(event: Event) -> int:
    ids = duplicate_line_ids(event.event_services.all())
    if not ids:
        return 0
    EventService.objects.filter(pk__in=ids).delete()
    logger.info("cart.duplicates_removed", event_id=event.pk, removed=len(ids))
    return len(ids)


# ============================================================================
# PRICE RECONCILIATION
# ============================================================================

def recalculate_prices(dry_run: bool = False) -> dict[str, Any]:
    """
    Recompute ``total_estimated_price`` of every priced quote from its
    per-guest price and the party's guest breakdown.
    """
    lines = EventService.objects.select_related("event").filter(
        price_per_guest_at_booking__isnull=False,
        total_estimated_price__isnull=False,
    )
    checked = 0
    corrected: list[dict[str, Any]] = []
    total_difference = Decimal("0.00")
    for line in lines.iterator():
        checked += 1
        expected = calculate_service_value(
            line.price_per_guest_at_booking,
            line.event.full_guests,
            line.event.half_guests,
        )
        if is_price_correct(expected, line.total_estimated_price):
            continue
        difference = line.total_estimated_price - expected
        total_difference += difference
        corrected.append(
            {
                "id": line.pk,
                "old": line.total_estimated_price,
                "new": expected,
                "difference": difference,
            }
        )
        if not dry_run:
            line.total_estimated_price = expected
            line.save(update_fields=["total_estimated_price", "updated_at"])

    logger.info(
        "quotes.prices_recalculated",
        checked=checked,
        corrected=len(corrected),
        dry_run=dry_run,
    )
    return {
        "checked": checked,
        "corrected": corrected,
        "total_difference": total_difference,
        "dry_run": dry_run,
    }
