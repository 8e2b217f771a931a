"""Booking models for Be Fest.

A booking is the firm reservation of a service for a confirmed party,
made from a quote the provider approved.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MaxLengthValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Booking(models.Model):
    """Reserva de um serviço para uma festa."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pendente")
        CONFIRMED = "confirmed", _("Confirmada")
        PAID = "paid", _("Paga")
        COMPLETED = "completed", _("Concluída")
        CANCELLED = "cancelled", _("Cancelada")

    OPEN_STATUSES = (Status.PENDING, Status.CONFIRMED, Status.PAID)
    TRANSITIONS = {
        Status.PENDING: (Status.CONFIRMED, Status.CANCELLED),
        Status.CONFIRMED: (Status.PAID, Status.COMPLETED, Status.CANCELLED),
        Status.PAID: (Status.COMPLETED, Status.CANCELLED),
        Status.COMPLETED: (),
        Status.CANCELLED: (),
    }

    event = models.ForeignKey(
        "events.Event",
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    service = models.ForeignKey(
        "services.Service",
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    client = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0"))],
        help_text=_("Valor acordado no momento da reserva."),
    )
    guest_count = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    notes = models.TextField(blank=True, validators=[MaxLengthValidator(500)])
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Reserva")
        verbose_name_plural = _("Reservas")
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["event", "service"], name="unique_booking_event_service"),
            models.CheckConstraint(check=models.Q(guest_count__gte=1), name="booking_guest_count_positive"),
        ]
        indexes = [
            models.Index(fields=["status"]),
            models.Index(fields=["client", "status"]),
        ]

    def __str__(self) -> str:
        return f"Booking #{self.pk} {self.service_id} @ {self.event_id}"

    def allowed_transitions(self) -> tuple[str, ...]:
        return tuple(str(s) for s in self.TRANSITIONS.get(self.status, ()))

    def can_transition_to(self, new_status: str) -> bool:
        return new_status in self.allowed_transitions()
