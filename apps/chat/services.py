"""Chat access rules and message handling."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

import structlog
from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.events.models import EventService
from apps.notifications.services import notify_new_chat_message
from .models import MESSAGE_MAX_LENGTH, ChatMessage

logger = structlog.get_logger(__name__)

NO_PERMISSION_REASON = "Você não tem permissão para acessar este chat"
NOT_APPROVED_REASON = "Este serviço ainda não foi aprovado"
EVENT_PASSED_REASON = "O chat foi desativado pois a data do evento já passou"


class ChatAccessError(Exception):
    """Raised when a user may not read or write in a chat."""


def can_access(event_service: EventService, user, *, today: Optional[date] = None) -> dict[str, Any]:
    """
    Verifica se o usuário pode usar o chat do orçamento.

    O usuário precisa ser o prestador do orçamento ou o cliente da festa,
    o orçamento precisa estar aprovado (ou aguardando pagamento / em
    andamento) e a data da festa não pode ter passado.
    """
    is_provider = event_service.provider_id == user.pk
    is_client = event_service.event.client_id == user.pk
    if not is_provider and not is_client:
        return {"can_access": False, "reason": NO_PERMISSION_REASON}

    if event_service.booking_status not in EventService.CHAT_STATUSES:
        return {"can_access": False, "reason": NOT_APPROVED_REASON}

    today = today or timezone.localdate()
    if event_service.event.event_date < today:
        return {"can_access": False, "reason": EVENT_PASSED_REASON}

    return {"can_access": True, "reason": None}


def _ensure_access(event_service: EventService, user) -> None:
    access = can_access(event_service, user)
    if not access["can_access"]:
        raise ChatAccessError(access["reason"])


def list_messages(event_service: EventService, user):
    _ensure_access(event_service, user)
    return (
        ChatMessage.objects.filter(event_service=event_service)
        .select_related("sender")
        .order_by("created_at", "id")
    )


@transaction.atomic
def send_message(event_service: EventService, user, message: str) -> ChatMessage:
    _ensure_access(event_service, user)

    text = (message or "").strip()
    if not text:
        raise ChatAccessError("Mensagem não pode estar vazia")
    if len(text) > MESSAGE_MAX_LENGTH:
        raise ChatAccessError("Mensagem muito longa")

    chat_message = ChatMessage.objects.create(event_service=event_service, sender=user, message=text)
    notify_new_chat_message(chat_message)
    logger.info("chat.message_sent", event_service_id=event_service.pk, sender_id=user.pk)
    return chat_message


def chat_info(event_service: EventService, user) -> dict[str, Any]:
    """Resumo da conversa: festa, serviço, participantes e total de mensagens."""
    event = event_service.event
    access = can_access(event_service, user)
    if event_service.provider_id == user.pk:
        counterpart = event.client
    else:
        counterpart = event_service.provider
    return {
        "event_title": event.title,
        "event_date": event.event_date,
        "service_name": event_service.service.name,
        "provider_name": event_service.provider.display_name,
        "client_name": event.client.display_name,
        "counterpart_name": counterpart.display_name,
        "message_count": event_service.chat_messages.count(),
        "can_chat": access["can_access"],
        "reason": access["reason"],
    }
