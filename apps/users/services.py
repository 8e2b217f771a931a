"""Account lifecycle services."""

from __future__ import annotations

import structlog
from django.db import transaction  # type: ignore

logger = structlog.get_logger(__name__)


class AccountDeletionError(Exception):
    """Raised when an account still has commitments that block deletion."""


def has_active_events(user) -> bool:
    from apps.events.models import Event  # local import to avoid circular

    return Event.objects.filter(client=user, status__in=Event.ACTIVE_STATUSES).exists()


@transaction.atomic
def delete_account(user) -> None:
    """Soft-delete the account; blocked while the user has active parties."""
    if has_active_events(user):
        raise AccountDeletionError(
            "Você possui festas ativas. Cancele ou conclua suas festas antes de excluir a conta."
        )
    user_id = user.pk
    user.anonymize()
    logger.info("account.deleted", user_id=user_id)


class AdminDeletionError(Exception):
    """Raised when an administrator tries to remove the wrong kind of account."""


@transaction.atomic
def delete_client(user) -> dict[str, int]:
    """Remove o cliente com suas festas e os orçamentos dessas festas."""
    from apps.events.models import Event, EventService

    if not user.is_client():
        raise AdminDeletionError("O usuário informado não é um cliente")

    events = Event.objects.filter(client=user)
    quotes = EventService.objects.filter(event__in=events)
    removed_quotes = quotes.count()
    quotes.delete()
    removed_events = events.count()
    user_id = user.pk
    user.delete()
    logger.info("admin.client_deleted", user_id=user_id, events=removed_events, quotes=removed_quotes)
    return {"events": removed_events, "event_services": removed_quotes}


@transaction.atomic
def delete_provider(user) -> dict[str, int]:
    """Remove o prestador com seus serviços, faixas de preço e orçamentos."""
    from apps.events.models import EventService
    from apps.services.models import Service, ServiceGuestTier

    if not user.is_provider():
        raise AdminDeletionError("O usuário informado não é um prestador")

    services = Service.objects.filter(provider=user)
    ServiceGuestTier.objects.filter(service__in=services).delete()
    quotes = EventService.objects.filter(service__in=services)
    removed_quotes = quotes.count()
    quotes.delete()
    removed_services = services.count()
    user_id = user.pk
    user.delete()
    logger.info("admin.provider_deleted", user_id=user_id, services=removed_services, quotes=removed_quotes)
    return {"services": removed_services, "event_services": removed_quotes}
