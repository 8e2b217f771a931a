"""Service catalogue models for Be Fest.

A provider publishes services (buffet, decoração, DJ...). Prices are
defined per guest and refined by guest-count tiers, age rules and date
surcharges.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.exceptions import ValidationError  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.value_objects import GuestRange


class ServiceCategory(models.TextChoices):
    FOOD_AND_DRINKS = "Comida e Bebida", _("Comida e Bebida")
    DECORATION = "Decoração", _("Decoração")
    ENTERTAINMENT = "Entretenimento", _("Entretenimento")
    VENUE = "Espaço", _("Espaço")
    PHOTOGRAPHY = "Fotografia", _("Fotografia")
    SOUND_AND_MUSIC = "Som e Música", _("Som e Música")
    OTHERS = "Outros", _("Outros")


class Service(models.Model):
    """Serviço oferecido por um prestador."""

    class Status(models.TextChoices):
        ACTIVE = "active", _("Ativo")
        INACTIVE = "inactive", _("Inativo")
        PENDING_APPROVAL = "pending_approval", _("Aguardando aprovação")

    provider = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="services",
    )
    name = models.CharField(_("Nome"), max_length=255)
    description = models.TextField(_("Descrição"), blank=True)
    category = models.CharField(
        _("Categoria"),
        max_length=50,
        choices=ServiceCategory.choices,
        default=ServiceCategory.OTHERS,
    )
    images_urls = models.JSONField(_("Imagens"), default=list, blank=True)
    price_per_guest = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0"))],
    )
    base_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0"))],
    )
    min_guests = models.PositiveIntegerField(default=1)
    max_guests = models.PositiveIntegerField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.ACTIVE,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Serviço")
        verbose_name_plural = _("Serviços")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["category", "status"]),
            models.Index(fields=["provider", "status"]),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.provider_id})"

    def clean(self) -> None:
        if self.max_guests is not None and self.max_guests < self.min_guests:
            raise ValidationError(_("Máximo de convidados deve ser maior ou igual ao mínimo."))

    def save(self, *args, **kwargs):  # type: ignore
        self.is_active = self.status == self.Status.ACTIVE
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "status" in update_fields and "is_active" not in update_fields:
            kwargs["update_fields"] = list(update_fields) + ["is_active"]
        super().save(*args, **kwargs)

    @property
    def is_available(self) -> bool:
        return self.status == self.Status.ACTIVE

    @property
    def fallback_price_per_guest(self) -> Decimal:
        """Price used when no tier covers the guest count."""
        if self.price_per_guest:
            return self.price_per_guest
        return self.base_price or Decimal("0.00")

    def toggle_status(self) -> str:
        if self.status == self.Status.ACTIVE:
            self.status = self.Status.INACTIVE
        else:
            self.status = self.Status.ACTIVE
        self.save(update_fields=["status", "is_active", "updated_at"])
        return self.status


class ServiceGuestTier(models.Model):
    """Faixa de preço por quantidade total de convidados."""

    service = models.ForeignKey(Service, on_delete=models.CASCADE, related_name="guest_tiers")
    min_total_guests = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    max_total_guests = models.PositiveIntegerField(null=True, blank=True)
    base_price_per_adult = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    tier_description = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Faixa de convidados")
        verbose_name_plural = _("Faixas de convidados")
        ordering = ["service", "min_total_guests"]

    def __str__(self) -> str:
        return f"{self.guest_range} convidados: {self.base_price_per_adult}"

    @property
    def guest_range(self) -> GuestRange:
        return GuestRange(self.min_total_guests, self.max_total_guests)


class ServiceAgePricingRule(models.Model):
    """Regra de preço por faixa etária (ex.: crianças de 6 a 12 pagam 50%)."""

    class PricingMethod(models.TextChoices):
        FIXED = "fixed", _("Valor fixo")
        PERCENTAGE = "percentage", _("Percentual")

    service = models.ForeignKey(Service, on_delete=models.CASCADE, related_name="age_pricing_rules")
    rule_description = models.CharField(max_length=255)
    age_min_years = models.PositiveIntegerField(default=0)
    age_max_years = models.PositiveIntegerField(null=True, blank=True)
    pricing_method = models.CharField(max_length=20, choices=PricingMethod.choices)
    value = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Regra de preço por idade")
        verbose_name_plural = _("Regras de preço por idade")
        ordering = ["service", "age_min_years"]

    def __str__(self) -> str:
        return self.rule_description


class ServiceDateSurcharge(models.Model):
    """Sobretaxa aplicada a festas em um período (feriados, alta temporada)."""

    class SurchargeType(models.TextChoices):
        FIXED = "fixed", _("Valor fixo por convidado")
        PERCENTAGE = "percentage", _("Percentual")

    service = models.ForeignKey(Service, on_delete=models.CASCADE, related_name="date_surcharges")
    surcharge_description = models.CharField(max_length=255)
    start_date = models.DateField()
    end_date = models.DateField()
    surcharge_type = models.CharField(max_length=20, choices=SurchargeType.choices)
    surcharge_value = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Sobretaxa por data")
        verbose_name_plural = _("Sobretaxas por data")
        ordering = ["service", "start_date"]
        constraints = [
            models.CheckConstraint(
                check=models.Q(end_date__gte=models.F("start_date")),
                name="surcharge_valid_dates",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.surcharge_description} ({self.start_date} - {self.end_date})"

    def applies_to(self, event_date) -> bool:
        return self.start_date <= event_date <= self.end_date
