"""Notification models.

`Notification` is an in-app message shown in the user's dashboard
(quote status changes, new chat messages). `EmailTemplate` stores the
admin-editable transactional emails; content uses ``{{variavel}}``
placeholders that are filled when the email is sent.
"""

from __future__ import annotations

import re

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*(\w+)\s*\}\}")


class Notification(models.Model):
    """A message sent to a user about some event."""

    user = models.ForeignKey(
        'users.CustomUser', on_delete=models.CASCADE, related_name='notifications'
    )
    title = models.CharField(max_length=255)
    message = models.TextField()
    link = models.CharField(max_length=255, blank=True)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self) -> str:
        return f"Notification to {self.user_id}: {self.title}"


class EmailTemplate(models.Model):
    """Modelo de email transacional editável pelo administrador."""

    class TemplateType(models.TextChoices):
        WELCOME_CLIENT = "welcome_client", _("Boas-vindas Cliente")
        WELCOME_PROVIDER = "welcome_provider", _("Boas-vindas Prestador")

    template_type = models.CharField(
        _("Tipo"),
        max_length=50,
        choices=TemplateType.choices,
        unique=True,
    )
    subject = models.CharField(_("Assunto"), max_length=255)
    content = models.TextField(
        _("Conteúdo HTML"),
        help_text=_("Use {{nome}}, {{email}} e {{data_cadastro}} para substituição."),
    )
    is_active = models.BooleanField(_("Ativo"), default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Modelo de email")
        verbose_name_plural = _("Modelos de email")
        ordering = ["template_type"]

    def __str__(self) -> str:
        return f"{self.get_template_type_display()} ({'ativo' if self.is_active else 'inativo'})"

    def render(self, variables: dict[str, str]) -> tuple[str, str]:
        """Return (subject, html) with placeholders replaced."""
        return render_placeholders(self.subject, variables), render_placeholders(self.content, variables)


def render_placeholders(text: str, variables: dict[str, str]) -> str:
    """Replace ``{{ name }}`` tokens; unknown names are left untouched."""

    def _replace(match: re.Match) -> str:
        key = match.group(1)
        if key in variables:
            return str(variables[key])
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(_replace, text)
