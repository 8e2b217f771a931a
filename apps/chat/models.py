"""Chat domain models for Be Fest.

Each conversation belongs to a single quote (``EventService``): the
client who owns the event talks to the provider of the quoted service.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

MESSAGE_MAX_LENGTH = 1000


class ChatMessage(models.Model):
    """Mensagem trocada entre cliente e prestador."""

    event_service = models.ForeignKey(
        "events.EventService",
        on_delete=models.CASCADE,
        related_name="chat_messages",
        help_text=_("Orçamento da conversa"),
    )
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_messages",
        help_text=_("Remetente"),
    )
    message = models.TextField(_("Mensagem"), max_length=MESSAGE_MAX_LENGTH)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Mensagem")
        verbose_name_plural = _("Mensagens")
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["event_service", "created_at"]),
        ]

    def __str__(self) -> str:
        preview = self.message[:50] + "..." if len(self.message) > 50 else self.message
        return f"Message from {self.sender_id} at {self.created_at}: {preview}"
