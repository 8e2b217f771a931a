"""Celery tasks for events and quotes."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .services import complete_past_events as complete_past_events_service
from .services import recalculate_prices

logger = logging.getLogger(__name__)


# ============================================================================
# PERIODIC TASKS (executadas pelo Celery Beat)
# ============================================================================

@shared_task(name="events.reconcile_event_service_prices")
def reconcile_event_service_prices() -> dict[str, int]:
    """
    Corrige o valor total dos orçamentos.

    Recalcula `total_estimated_price` a partir do preço por convidado e da
    divisão de convidados da festa. Roda diariamente às 03:00.

    Returns:
        dict: {"checked": orçamentos verificados, "corrected": corrigidos}
    """
    result = recalculate_prices(dry_run=False)
    corrected = len(result["corrected"])
    if corrected:
        logger.warning(f"Corrected {corrected} quote totals (difference {result['total_difference']})")
    else:
        logger.info(f"All {result['checked']} quote totals are correct")
    return {"checked": result["checked"], "corrected": corrected}


@shared_task(name="events.complete_past_events")
def complete_past_events() -> dict[str, int]:
    """Marca como concluídas as festas confirmadas cuja data já passou."""
    completed = complete_past_events_service()
    if completed:
        logger.info(f"Marked {completed} past events as completed")
    return {"completed": completed}
