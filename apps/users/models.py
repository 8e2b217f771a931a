"""User domain models for Be Fest.

The marketplace distinguishes three roles: clients who organise parties,
providers who sell party services and platform administrators. Clients
are identified by CPF, providers by CNPJ and organisation name. Accounts
are never physically removed by their owners: deleting an account
anonymises personal data and deactivates the login.
"""

from __future__ import annotations

from typing import Any

from django.contrib.auth.models import AbstractUser, BaseUserManager  # type: ignore
from django.core.validators import RegexValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from .formatters import remove_mask


PHONE_VALIDATOR = RegexValidator(
    regex=r"^\d{10,11}$",
    message=_("Telefone inválido. Informe DDD e número, apenas dígitos."),
)
CPF_VALIDATOR = RegexValidator(regex=r"^\d{11}$", message=_("CPF deve ter 11 dígitos."))
CNPJ_VALIDATOR = RegexValidator(regex=r"^\d{14}$", message=_("CNPJ deve ter 14 dígitos."))
POSTAL_CODE_VALIDATOR = RegexValidator(regex=r"^\d{8}$", message=_("CEP deve ter 8 dígitos."))

DELETED_ACCOUNT_NAME = "Conta Excluída"


class CustomUserManager(BaseUserManager):
    """Gerenciador de usuários que usa o email como login."""

    use_in_migrations = True

    def _create_user(self, email: str, password: str | None, **extra_fields: Any):
        if not email:
            raise ValueError("Email é obrigatório.")
        email = self.normalize_email(email).lower()

        for field in ("phone", "whatsapp_number", "cpf", "cnpj", "postal_code"):
            if extra_fields.get(field):
                extra_fields[field] = remove_mask(extra_fields[field])

        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        extra_fields.setdefault("role", CustomUser.RoleChoices.CLIENT)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", CustomUser.RoleChoices.ADMIN)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superusuário deve ter is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superusuário deve ter is_superuser=True.")

        return self._create_user(email, password, **extra_fields)


class CustomUser(AbstractUser):
    """Usuário da plataforma: cliente, prestador ou administrador."""

    class RoleChoices(models.TextChoices):
        CLIENT = "client", _("Cliente")
        PROVIDER = "provider", _("Prestador")
        ADMIN = "admin", _("Administrador")

    username = models.CharField(max_length=150, blank=True)
    email = models.EmailField(_("Email"), unique=True)
    full_name = models.CharField(_("Nome completo"), max_length=255, blank=True)
    role = models.CharField(
        _("Perfil"),
        max_length=20,
        choices=RoleChoices.choices,
        default=RoleChoices.CLIENT,
    )
    phone = models.CharField(_("Telefone"), max_length=11, blank=True, validators=[PHONE_VALIDATOR])
    whatsapp_number = models.CharField(
        _("WhatsApp"), max_length=11, blank=True, validators=[PHONE_VALIDATOR]
    )
    cpf = models.CharField(_("CPF"), max_length=11, blank=True, validators=[CPF_VALIDATOR])
    organization_name = models.CharField(_("Nome da empresa"), max_length=255, blank=True)
    cnpj = models.CharField(_("CNPJ"), max_length=14, blank=True, validators=[CNPJ_VALIDATOR])
    area_of_operation = models.CharField(_("Área de atuação"), max_length=255, blank=True)
    logo_url = models.URLField(_("Logo"), blank=True)
    profile_image = models.URLField(_("Foto de perfil"), blank=True)
    city = models.CharField(_("Cidade"), max_length=100, blank=True)
    state = models.CharField(_("UF"), max_length=2, blank=True)
    postal_code = models.CharField(
        _("CEP"), max_length=8, blank=True, validators=[POSTAL_CODE_VALIDATOR]
    )
    is_deleted = models.BooleanField(_("Conta excluída"), default=False)
    failed_login_attempts = models.PositiveIntegerField(default=0)
    locked_until = models.DateTimeField(_("Bloqueado até"), null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomUserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS: list[str] = []

    class Meta:
        verbose_name = _("Usuário")
        verbose_name_plural = _("Usuários")
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["role", "created_at"])]

    def __str__(self) -> str:
        return f"{self.email} ({self.get_role_display()})"

    @property
    def display_name(self) -> str:
        if self.is_provider() and self.organization_name:
            return self.organization_name
        return self.full_name or self.email

    def is_client(self) -> bool:
        return self.role == self.RoleChoices.CLIENT

    def is_provider(self) -> bool:
        return self.role == self.RoleChoices.PROVIDER

    def is_platform_admin(self) -> bool:
        return self.role == self.RoleChoices.ADMIN or self.is_staff or self.is_superuser

    @property
    def is_locked(self) -> bool:
        return bool(self.locked_until and self.locked_until > timezone.now())

    def lock(self, minutes: int = 15) -> None:
        self.locked_until = timezone.now() + timezone.timedelta(minutes=minutes)
        self.failed_login_attempts = 0
        self.save(update_fields=["locked_until", "failed_login_attempts"])

    def unlock(self) -> None:
        self.locked_until = None
        self.failed_login_attempts = 0
        self.save(update_fields=["locked_until", "failed_login_attempts"])

    def register_failed_attempt(self, threshold: int = 5) -> None:
        self.failed_login_attempts += 1
        if self.failed_login_attempts >= threshold:
            self.lock()
            return
        self.save(update_fields=["failed_login_attempts"])

    def anonymize(self) -> None:
        """Soft delete: keeps the row for history, drops personal data."""
        self.email = f"deleted_{self.pk}@befest.com"
        self.full_name = DELETED_ACCOUNT_NAME
        self.phone = ""
        self.whatsapp_number = ""
        self.cpf = ""
        self.cnpj = ""
        self.organization_name = ""
        self.logo_url = ""
        self.profile_image = ""
        self.city = ""
        self.state = ""
        self.postal_code = ""
        self.is_active = False
        self.is_deleted = True
        self.set_unusable_password()
        self.save()


class PasswordResetToken(models.Model):
    """Código de recuperação de senha com validade e tentativas limitadas."""

    user = models.ForeignKey(
        CustomUser,
        on_delete=models.CASCADE,
        related_name="password_reset_tokens",
    )
    code = models.CharField(max_length=6)
    expires_at = models.DateTimeField()
    attempts_left = models.PositiveSmallIntegerField(default=3)
    is_used = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Código de recuperação de senha")
        verbose_name_plural = _("Códigos de recuperação de senha")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["code", "expires_at"]),
        ]

    def __str__(self) -> str:
        return f"Reset token for {self.user_id}"

    @property
    def is_expired(self) -> bool:
        return timezone.now() >= self.expires_at

    def mark_used(self) -> None:
        self.is_used = True
        self.save(update_fields=["is_used"])

    def decrement_attempt(self) -> None:
        if self.attempts_left > 0:
            self.attempts_left -= 1
            self.save(update_fields=["attempts_left"])


User = CustomUser
