"""Notification services: transactional email and in-app notifications."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.conf import settings  # type: ignore
from django.core.mail import send_mail  # type: ignore
from django.template.loader import render_to_string  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.html import strip_tags  # type: ignore

from .models import EmailTemplate, Notification

if TYPE_CHECKING:  # pragma: no cover
    from apps.chat.models import ChatMessage
    from apps.events.models import EventService
    from apps.users.models import CustomUser

logger = logging.getLogger(__name__)

TEST_RECIPIENT_NAME = "Usuário Teste"


class EmailTemplateError(Exception):
    """Raised when an email template cannot be saved."""


# ============================================================================
# EMAIL NOTIFICATIONS
# ============================================================================

def send_email_notification(
    recipient_email: str,
    subject: str,
    template_name: str | None,
    context: dict,
    *,
    html_message: str | None = None,
) -> bool:
    """
    Envio genérico de email.

    Args:
        recipient_email: Email do destinatário
        subject: Assunto
        template_name: Template Django (opcional)
        context: Contexto para o template
        html_message: Versão HTML já pronta (opcional)

    Returns:
        bool: True se o email foi enviado
    """
    try:
        if html_message:
            text_message = strip_tags(html_message)
        elif template_name:
            html_message = render_to_string(template_name, context)
            text_message = strip_tags(html_message)
        else:
            text_message = context.get("message", "")
            html_message = None

        send_mail(
            subject=subject,
            message=text_message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient_email],
            html_message=html_message,
            fail_silently=False,
        )

        logger.info(f"Email sent successfully to {recipient_email}: {subject}")
        return True

    except Exception as e:
        logger.error(f"Failed to send email to {recipient_email}: {e}", exc_info=True)
        return False


def build_welcome_variables(name: str, email: str, joined_at=None) -> dict[str, str]:
    joined_at = joined_at or timezone.now()
    return {
        "nome": name,
        "email": email,
        "data_cadastro": timezone.localtime(joined_at).strftime("%d/%m/%Y"),
    }


def send_templated_email(template_type: str, recipient_email: str, variables: dict[str, str]) -> bool:
    """
    Envia um email a partir de um `EmailTemplate`.

    Um modelo inexistente ou inativo não é erro: o envio é ignorado e
    tratado como sucesso para não bloquear o cadastro.
    """
    template = EmailTemplate.objects.filter(template_type=template_type, is_active=True).first()
    if template is None:
        logger.info(f"Email template {template_type} not found or inactive, skipping email")
        return True

    subject, html_message = template.render(variables)
    return send_email_notification(
        recipient_email=recipient_email,
        subject=subject,
        template_name=None,
        context=variables,
        html_message=html_message,
    )


def send_welcome_email(user: "CustomUser") -> bool:
    """Boas-vindas para cliente ou prestador recém-cadastrado."""
    if user.is_provider():
        template_type = EmailTemplate.TemplateType.WELCOME_PROVIDER
    else:
        template_type = EmailTemplate.TemplateType.WELCOME_CLIENT
    variables = build_welcome_variables(user.display_name, user.email, user.date_joined)
    return send_templated_email(template_type, user.email, variables)


def send_test_email(template_type: str, recipient_email: str) -> bool:
    variables = build_welcome_variables(TEST_RECIPIENT_NAME, recipient_email)
    return send_templated_email(template_type, recipient_email, variables)


def update_email_template(template: EmailTemplate, subject: str, content: str) -> EmailTemplate:
    subject = (subject or "").strip()
    content = (content or "").strip()
    if not subject or not content:
        raise EmailTemplateError("Assunto e conteúdo são obrigatórios.")
    template.subject = subject
    template.content = content
    template.save(update_fields=["subject", "content", "updated_at"])
    return template


def toggle_email_template(template: EmailTemplate) -> EmailTemplate:
    template.is_active = not template.is_active
    template.save(update_fields=["is_active", "updated_at"])
    return template


# ============================================================================
# IN-APP NOTIFICATIONS
# ============================================================================

def create_in_app_notification(user: "CustomUser", title: str, message: str, link: str = "") -> Notification:
    return Notification.objects.create(user=user, title=title, message=message, link=link)


def notify_quote_status_changed(event_service: "EventService") -> Notification:
    """Avisa o cliente de que o prestador respondeu ao orçamento."""
    event = event_service.event
    return create_in_app_notification(
        event.client,
        title="Orçamento atualizado",
        message=(
            f"{event_service.provider.display_name} atualizou o orçamento de "
            f"{event_service.service.name} para a festa {event.title}: "
            f"{event_service.get_booking_status_display()}."
        ),
        link=f"/minhas-festas/{event.pk}",
    )


def notify_new_quote_request(event_service: "EventService") -> Notification:
    """Avisa o prestador sobre uma nova solicitação de orçamento."""
    event = event_service.event
    return create_in_app_notification(
        event_service.provider,
        title="Nova solicitação de orçamento",
        message=(
            f"{event.client.display_name} solicitou {event_service.service.name} "
            f"para {event.event_date.strftime('%d/%m/%Y')} ({event.guest_count} convidados)."
        ),
        link="/dashboard/prestador",
    )


def notify_new_chat_message(chat_message: "ChatMessage") -> Notification:
    event_service = chat_message.event_service
    if chat_message.sender_id == event_service.provider_id:
        recipient = event_service.event.client
    else:
        recipient = event_service.provider
    return create_in_app_notification(
        recipient,
        title="Nova mensagem",
        message=f"{chat_message.sender.display_name}: {chat_message.message[:100]}",
        link=f"/dashboard/chat/{event_service.pk}",
    )
