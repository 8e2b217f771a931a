"""Business rules for the service catalogue."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

import structlog
from django.db import transaction  # type: ignore
from django.db.models import Sum  # type: ignore

from shared.domain.value_objects import GuestRange
from .models import Service, ServiceGuestTier

logger = structlog.get_logger(__name__)

TIER_OVERLAP_MESSAGE = "Esta faixa de convidados se sobrepõe a uma faixa existente"


class TierOverlapError(Exception):
    """Raised when a guest tier overlaps another tier of the same service."""


class ServiceDeletionError(Exception):
    """Raised when a service still has open bookings."""


def ensure_tier_does_not_overlap(
    service: Service,
    min_total_guests: int,
    max_total_guests: Optional[int],
    exclude_id: Optional[int] = None,
) -> None:
    candidate = GuestRange(min_total_guests, max_total_guests)
    others = ServiceGuestTier.objects.filter(service=service)
    if exclude_id is not None:
        others = others.exclude(pk=exclude_id)
    for tier in others:
        if candidate.overlaps_with(tier.guest_range):
            raise TierOverlapError(TIER_OVERLAP_MESSAGE)


def has_open_bookings(service: Service) -> bool:
    from apps.bookings.models import Booking  # local import to avoid circular

    return Booking.objects.filter(service=service, status__in=Booking.OPEN_STATUSES).exists()


@transaction.atomic
def delete_service(service: Service) -> None:
    if has_open_bookings(service):
        raise ServiceDeletionError(
            "Não é possível excluir um serviço com reservas pendentes, confirmadas ou pagas."
        )
    service_id = service.pk
    service.delete()
    logger.info("service.deleted", service_id=service_id)


def provider_stats(provider) -> dict:
    """Dashboard numbers for a provider."""
    from apps.events.models import EventService

    quotes = EventService.objects.filter(provider=provider)
    approved = quotes.filter(booking_status=EventService.BookingStatus.APPROVED)
    revenue = approved.aggregate(total=Sum("total_estimated_price"))["total"] or Decimal("0.00")
    return {
        "approved_quotes": approved.count(),
        "active_services": Service.objects.filter(provider=provider, status=Service.Status.ACTIVE).count(),
        "pending_requests": quotes.filter(
            booking_status=EventService.BookingStatus.PENDING_PROVIDER_APPROVAL
        ).count(),
        "approved_revenue": revenue,
    }
