"""Celery tasks for outgoing notifications."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore
from django.contrib.auth import get_user_model  # type: ignore

from .services import send_welcome_email

logger = logging.getLogger(__name__)


@shared_task(name="notifications.send_welcome_email")
def send_welcome_email_task(user_id: int) -> bool:
    """Boas-vindas enviadas fora do ciclo da requisição de cadastro."""
    User = get_user_model()
    try:
        user = User.objects.get(pk=user_id)
    except User.DoesNotExist:
        logger.warning(f"Welcome email skipped: user {user_id} not found")
        return False
    return send_welcome_email(user)
