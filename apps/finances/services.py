"""Payment link generation through the external payments API."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Iterable, Optional

import requests
from django.conf import settings  # type: ignore

from apps.events.models import Event, EventService
from apps.services.pricing import calculate_totals

logger = logging.getLogger(__name__)


class PaymentLinkError(Exception):
    """Raised when the payments API does not return a usable link."""


class PaymentRuleError(Exception):
    """Raised when the selected quotes cannot be paid."""


def payable_quotes(client, event: Event, quote_ids: Optional[Iterable[int]] = None):
    """
    Orçamentos da festa que podem ser pagos.

    Sem ``quote_ids`` todos os orçamentos aprovados ou aguardando pagamento
    entram; com ids, cada um precisa existir na festa e estar pagável.
    """
    if event.client_id != client.pk:
        raise PaymentRuleError("Evento não encontrado ou acesso negado")

    qs = event.event_services.select_related("service", "provider").filter(
        booking_status__in=EventService.PAYABLE_STATUSES
    )
    ids = list(quote_ids or [])
    if ids:
        qs = qs.filter(pk__in=ids)
        missing = set(ids) - set(qs.values_list("pk", flat=True))
        if missing:
            raise PaymentRuleError("Alguns serviços selecionados não estão disponíveis para pagamento")

    quotes = list(qs.order_by("created_at", "id"))
    if not quotes:
        raise PaymentRuleError("Nenhum serviço aprovado para pagamento")
    return quotes


def payment_summary(event: Event, quotes: list[EventService]) -> dict[str, Any]:
    totals = calculate_totals(quote.total_estimated_price or Decimal("0") for quote in quotes)
    return {
        "event_id": event.pk,
        "event_title": event.title,
        "event_date": event.event_date,
        "services": [
            {
                "event_service_id": quote.pk,
                "service_name": quote.service.name,
                "provider_name": quote.provider.display_name,
                "amount": quote.total_estimated_price or Decimal("0.00"),
            }
            for quote in quotes
        ],
        "services_count": len(quotes),
        **totals.as_dict(),
    }


def request_payment_link(event: Event, quotes: list[EventService]) -> dict[str, Any]:
    """POST to ``PAYMENT_API_URL/generate-link`` and return the checkout url."""
    url = f"{settings.PAYMENT_API_URL.rstrip('/')}/generate-link"
    payload = {
        "event_id": event.pk,
        "service_ids": [quote.pk for quote in quotes],
    }
    logger.info(f"Requesting payment link for event {event.pk} ({len(quotes)} services)")
    try:
        response = requests.post(
            url,
            json=payload,
            headers={"Accept": "application/json"},
            timeout=settings.PAYMENT_API_TIMEOUT,
        )
        response.raise_for_status()
        data = response.json()
    except requests.exceptions.HTTPError as e:
        logger.error(f"Payment API returned an error for event {event.pk}: {e}", exc_info=True)
        raise PaymentLinkError("Erro ao gerar link de pagamento") from e
    except requests.exceptions.RequestException as e:
        logger.error(f"Payment API unreachable for event {event.pk}: {e}", exc_info=True)
        raise PaymentLinkError("Serviço de pagamento indisponível") from e
    except ValueError as e:
        logger.error(f"Payment API returned invalid JSON for event {event.pk}: {e}")
        raise PaymentLinkError("Resposta inválida do serviço de pagamento") from e

    if not isinstance(data, dict):
        logger.error(f"Payment API returned an unexpected body for event {event.pk}: {data!r}")
        raise PaymentLinkError("Resposta inválida do serviço de pagamento")

    link = data.get("init_point") or data.get("url")
    if not link:
        raise PaymentLinkError("Resposta inválida do serviço de pagamento")
    return {"url": link, "preference_id": data.get("preference_id")}


def generate_payment_link(client, event: Event, quote_ids: Optional[Iterable[int]] = None) -> dict[str, Any]:
    quotes = payable_quotes(client, event, quote_ids)
    link = request_payment_link(event, quotes)
    return {**link, "summary": payment_summary(event, quotes)}
