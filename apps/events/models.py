"""Event (party) and quote models for Be Fest."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.value_objects import GuestBreakdown


class Event(models.Model):
    """Festa organizada por um cliente."""

    class Status(models.TextChoices):
        DRAFT = "draft", _("Rascunho")
        PLANNING = "planning", _("Planejamento")
        CONFIRMED = "confirmed", _("Confirmada")
        COMPLETED = "completed", _("Concluída")
        CANCELLED = "cancelled", _("Cancelada")

    ACTIVE_STATUSES = (Status.DRAFT, Status.PLANNING, Status.CONFIRMED)
    LOCKED_STATUSES = (Status.COMPLETED, Status.CANCELLED)
    TRANSITIONS = {
        Status.DRAFT: (Status.PLANNING, Status.CANCELLED),
        Status.PLANNING: (Status.CONFIRMED, Status.CANCELLED, Status.DRAFT),
        Status.CONFIRMED: (Status.COMPLETED, Status.CANCELLED),
        Status.COMPLETED: (),
        Status.CANCELLED: (Status.DRAFT,),
    }

    client = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="events",
    )
    title = models.CharField(_("Nome da festa"), max_length=100)
    description = models.TextField(_("Descrição"), max_length=1000, blank=True)
    event_date = models.DateField(_("Data"))
    start_time = models.TimeField(_("Horário"), null=True, blank=True)
    location = models.CharField(_("Local"), max_length=200, blank=True)
    full_guests = models.PositiveIntegerField(default=0)
    half_guests = models.PositiveIntegerField(default=0)
    free_guests = models.PositiveIntegerField(default=0)
    guest_count = models.PositiveIntegerField(default=0)
    budget = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0"))],
    )
    observations = models.TextField(blank=True)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.DRAFT,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Festa")
        verbose_name_plural = _("Festas")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["client", "status"]),
            models.Index(fields=["event_date"]),
        ]

    def __str__(self) -> str:
        return f"{self.title} ({self.event_date})"

    def save(self, *args, **kwargs):  # type: ignore
        total = self.full_guests + self.half_guests + self.free_guests
        if total:
            self.guest_count = total
        elif self.guest_count:
            # Only a head count was given: everybody pays full price
            self.full_guests = self.guest_count
        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            guest_fields = {"full_guests", "half_guests", "free_guests", "guest_count"}
            if guest_fields & set(update_fields):
                kwargs["update_fields"] = list(set(update_fields) | guest_fields)
        super().save(*args, **kwargs)

    @property
    def breakdown(self) -> GuestBreakdown:
        return GuestBreakdown(self.full_guests, self.half_guests, self.free_guests)

    @property
    def is_editable(self) -> bool:
        return self.status not in self.LOCKED_STATUSES

    def allowed_transitions(self) -> tuple[str, ...]:
        return tuple(str(s) for s in self.TRANSITIONS.get(self.status, ()))

    def can_transition_to(self, new_status: str) -> bool:
        return new_status in self.allowed_transitions()


class EventService(models.Model):
    """Serviço solicitado para uma festa (linha do carrinho / orçamento)."""

    class BookingStatus(models.TextChoices):
        PENDING_PROVIDER_APPROVAL = "pending_provider_approval", _("Aguardando aprovação do prestador")
        APPROVED = "approved", _("Aprovado")
        WAITING_PAYMENT = "waiting_payment", _("Aguardando pagamento")
        IN_PROGRESS = "in_progress", _("Em andamento")
        CONFIRMED = "confirmed", _("Confirmado")
        REJECTED = "rejected", _("Rejeitado")
        CANCELLED = "cancelled", _("Cancelado")
        COMPLETED = "completed", _("Concluído")

    PROVIDER_TRANSITIONS = {
        BookingStatus.PENDING_PROVIDER_APPROVAL: (
            BookingStatus.APPROVED,
            BookingStatus.WAITING_PAYMENT,
            BookingStatus.REJECTED,
        ),
        BookingStatus.APPROVED: (
            BookingStatus.WAITING_PAYMENT,
            BookingStatus.IN_PROGRESS,
            BookingStatus.CANCELLED,
        ),
        BookingStatus.WAITING_PAYMENT: (
            BookingStatus.CONFIRMED,
            BookingStatus.IN_PROGRESS,
            BookingStatus.CANCELLED,
        ),
        BookingStatus.IN_PROGRESS: (BookingStatus.COMPLETED,),
        BookingStatus.CONFIRMED: (BookingStatus.COMPLETED, BookingStatus.CANCELLED),
        BookingStatus.REJECTED: (),
        BookingStatus.CANCELLED: (),
        BookingStatus.COMPLETED: (),
    }
    CHAT_STATUSES = (
        BookingStatus.APPROVED,
        BookingStatus.WAITING_PAYMENT,
        BookingStatus.IN_PROGRESS,
    )
    PAYABLE_STATUSES = (BookingStatus.APPROVED, BookingStatus.WAITING_PAYMENT)
    NON_CANCELLABLE_STATUSES = (BookingStatus.CONFIRMED, BookingStatus.COMPLETED)

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="event_services")
    service = models.ForeignKey(
        "services.Service",
        on_delete=models.CASCADE,
        related_name="event_services",
    )
    provider = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="provider_event_services",
    )
    price_per_guest_at_booking = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0"))],
    )
    befest_fee_at_booking = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0"))],
    )
    total_estimated_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0"))],
    )
    booking_status = models.CharField(
        max_length=32,
        choices=BookingStatus.choices,
        default=BookingStatus.PENDING_PROVIDER_APPROVAL,
    )
    provider_notes = models.TextField(blank=True)
    client_notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Orçamento")
        verbose_name_plural = _("Orçamentos")
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "service", "provider"],
                name="unique_event_service_provider",
            ),
        ]
        indexes = [
            models.Index(fields=["provider", "booking_status"]),
        ]

    def __str__(self) -> str:
        return f"{self.service_id} @ {self.event_id} [{self.booking_status}]"

    def allowed_transitions(self) -> tuple[str, ...]:
        return tuple(str(s) for s in self.PROVIDER_TRANSITIONS.get(self.booking_status, ()))

    def can_transition_to(self, new_status: str) -> bool:
        return new_status in self.allowed_transitions()
