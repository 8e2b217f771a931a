"""Price calculations for services, quotes and the cart.

Everything here is pure arithmetic on ``Decimal`` so it can be shared by
serializers, services, the management command and Celery tasks.

Guest categories:
- full ("inteira"): pays the per-guest price
- half ("meia", children 6-12): pays half of the per-guest price
- free (children 0-5): not charged
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Protocol, Sequence

from django.conf import settings  # type: ignore

from shared.domain.value_objects import GuestBreakdown, Money

CENTS = Decimal("0.01")
HALF = Decimal("0.5")
PRICE_TOLERANCE = Decimal("0.01")
PRICE_ON_REQUEST = "Preço sob consulta"


class TierLike(Protocol):
    min_total_guests: int
    max_total_guests: Optional[int]
    base_price_per_adult: Decimal


def _dec(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value or 0))


def _round(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def platform_fee_percent() -> Decimal:
    return Decimal(settings.BEFEST_PLATFORM_FEE_PERCENT)


def display_fee_percent() -> Decimal:
    return Decimal(settings.BEFEST_DISPLAY_FEE_PERCENT)


# ============================================================================
# GUESTS AND SERVICE VALUE
# ============================================================================

def calculate_guest_count(full_guests: int, half_guests: int, free_guests: int) -> int:
    return GuestBreakdown(full_guests, half_guests, free_guests).total


def calculate_service_value(price_per_guest, full_guests: int, half_guests: int) -> Decimal:
    """full × price + half × price/2; free guests are not charged."""
    price = _dec(price_per_guest)
    return _round(price * full_guests + price * HALF * half_guests)


def format_guest_breakdown(full_guests: int, half_guests: int, free_guests: int) -> str:
    return str(GuestBreakdown(full_guests, half_guests, free_guests))


@dataclass(frozen=True)
class PricingTotals:
    subtotal: Decimal
    befest_fee: Decimal
    total: Decimal
    fee_percentage: Decimal

    def as_dict(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "befest_fee": self.befest_fee,
            "total": self.total,
            "fee_percentage": self.fee_percentage,
        }


def calculate_totals(values: Iterable, fee_percent=None) -> PricingTotals:
    """Sum service values and add the BeFest platform fee."""
    percent = platform_fee_percent() if fee_percent is None else _dec(fee_percent)
    subtotal = _round(sum((_dec(v) for v in values), Decimal("0")))
    fee = _round(subtotal * percent / 100)
    return PricingTotals(subtotal=subtotal, befest_fee=fee, total=subtotal + fee, fee_percentage=percent)


def is_price_correct(expected, actual) -> bool:
    return abs(_dec(expected) - _dec(actual)) <= PRICE_TOLERANCE


# ============================================================================
# GUEST TIERS
# ============================================================================

def sort_tiers(tiers: Iterable[TierLike]) -> list[TierLike]:
    return sorted(tiers, key=lambda tier: tier.min_total_guests)


def select_tier(tiers: Iterable[TierLike], guests: int) -> Optional[TierLike]:
    """
    Pick the tier covering ``guests``.

    Below every tier the first (smallest) tier applies, above every bounded
    tier the last one applies. No tiers gives None.
    """
    ordered = sort_tiers(tiers)
    if not ordered:
        return None
    for tier in ordered:
        if guests >= tier.min_total_guests and (
            tier.max_total_guests is None or guests <= tier.max_total_guests
        ):
            return tier
    if guests < ordered[0].min_total_guests:
        return ordered[0]
    return ordered[-1]


@dataclass(frozen=True)
class MinimumGuestsPrice:
    total_price: Decimal
    price_per_guest: Decimal
    minimum_guests: int
    applied_guests: int
    minimum_applied: bool
    explanation: str


def calculate_price_with_minimum_guests(
    tiers: Sequence[TierLike],
    guests: int,
    fallback_price_per_guest=None,
) -> MinimumGuestsPrice:
    """
    Price for ``guests`` honouring the tier's minimum.

    When the party is smaller than the tier minimum the client pays for
    the minimum: total = minimum × price, spread over the real guests.
    """
    tier = select_tier(tiers, guests)
    if tier is None:
        price = _dec(fallback_price_per_guest)
        total = _round(price * guests)
        return MinimumGuestsPrice(
            total_price=total,
            price_per_guest=price,
            minimum_guests=guests,
            applied_guests=guests,
            minimum_applied=False,
            explanation=f"{guests} convidados × {format_price(price)}",
        )

    price = _dec(tier.base_price_per_adult)
    minimum = tier.min_total_guests
    if 0 < guests < minimum:
        total = _round(price * minimum)
        adjusted = _round(total / guests)
        return MinimumGuestsPrice(
            total_price=total,
            price_per_guest=adjusted,
            minimum_guests=minimum,
            applied_guests=minimum,
            minimum_applied=True,
            explanation=(
                f"Mínimo {minimum} convidados: ({minimum} × {format_price(price)}) ÷ {guests} "
                f"= {format_price(adjusted)}/convidado"
            ),
        )

    return MinimumGuestsPrice(
        total_price=_round(price * guests),
        price_per_guest=price,
        minimum_guests=minimum,
        applied_guests=guests,
        minimum_applied=False,
        explanation=f"{guests} convidados × {format_price(price)}",
    )


# ============================================================================
# CLIENT-FACING FORMATTING
# ============================================================================

def format_price(value) -> str:
    return Money(_dec(value)).format()


def calculate_price_with_fee(price, fee_percent=None) -> Decimal:
    """Display price for clients: price plus the display fee, rounded up to whole reais."""
    percent = display_fee_percent() if fee_percent is None else _dec(fee_percent)
    with_fee = _dec(price) * (1 + percent / 100)
    return Decimal(math.ceil(with_fee))


def format_minimum_price_with_fee(tiers: Iterable[TierLike]) -> str:
    ordered = sort_tiers(tiers)
    if not ordered:
        return PRICE_ON_REQUEST
    return format_price(calculate_price_with_fee(ordered[0].base_price_per_adult))


def format_tiers(tiers: Iterable[TierLike]) -> list[str]:
    formatted = []
    for tier in sort_tiers(tiers):
        if tier.max_total_guests:
            guest_range = f"{tier.min_total_guests}-{tier.max_total_guests}"
        else:
            guest_range = f"{tier.min_total_guests}+"
        formatted.append(f"{guest_range} convidados: {format_price(tier.base_price_per_adult)}/adulto")
    return formatted


# ============================================================================
# BUDGET (QUOTE SIMULATION)
# ============================================================================

@dataclass(frozen=True)
class AgeAdjustment:
    age_group: str
    count: int
    price_per_person: Decimal
    total: Decimal


@dataclass(frozen=True)
class AppliedSurcharge:
    description: str
    surcharge_type: str
    value: Decimal
    applied_amount: Decimal


@dataclass(frozen=True)
class BudgetCalculation:
    service_id: int
    service_name: str
    base_price_per_guest: Decimal
    tier_id: Optional[int]
    age_adjustments: list[AgeAdjustment] = field(default_factory=list)
    date_surcharges: list[AppliedSurcharge] = field(default_factory=list)
    subtotal: Decimal = Decimal("0.00")
    befest_fee: Decimal = Decimal("0.00")
    total: Decimal = Decimal("0.00")


def calculate_budget(service, breakdown: GuestBreakdown, event_date: Optional[date] = None) -> BudgetCalculation:
    """
    Full quote simulation for one service.

    Tier price for the total guest count (falling back to the service's own
    price), age lines, date surcharges active on ``event_date`` and the
    platform fee.
    """
    tiers = list(service.guest_tiers.all())
    tier = select_tier(tiers, breakdown.total)
    base_price = _dec(tier.base_price_per_adult) if tier else service.fallback_price_per_guest

    full_total = _round(base_price * breakdown.full)
    half_price = _round(base_price * HALF)
    half_total = _round(half_price * breakdown.half)
    adjustments = [
        AgeAdjustment("Adultos", breakdown.full, base_price, full_total),
        AgeAdjustment("Crianças 6-12 anos", breakdown.half, half_price, half_total),
        AgeAdjustment("Crianças 0-5 anos", breakdown.free, Decimal("0.00"), Decimal("0.00")),
    ]

    surcharges: list[AppliedSurcharge] = []
    if event_date is not None:
        for surcharge in service.date_surcharges.all():
            if not surcharge.applies_to(event_date):
                continue
            value = _dec(surcharge.surcharge_value)
            if surcharge.surcharge_type == surcharge.SurchargeType.FIXED:
                amount = _round(value * breakdown.total)
            else:
                amount = _round((full_total + half_total) * value / 100)
            surcharges.append(
                AppliedSurcharge(surcharge.surcharge_description, surcharge.surcharge_type, value, amount)
            )

    subtotal = full_total + half_total + sum((s.applied_amount for s in surcharges), Decimal("0"))
    totals = calculate_totals([subtotal])
    return BudgetCalculation(
        service_id=service.pk,
        service_name=service.name,
        base_price_per_guest=base_price,
        tier_id=tier.pk if tier else None,
        age_adjustments=adjustments,
        date_surcharges=surcharges,
        subtotal=totals.subtotal,
        befest_fee=totals.befest_fee,
        total=totals.total,
    )


# ============================================================================
# CART
# ============================================================================

@dataclass(frozen=True)
class CartItem:
    service_id: int
    price: Decimal
    full_guests: int = 0
    half_guests: int = 0
    quantity: int = 1


def cart_total(items: Iterable[CartItem]) -> Decimal:
    total = Decimal("0")
    for item in items:
        price = _dec(item.price)
        line = price * item.full_guests + price * HALF * item.half_guests
        total += line * item.quantity
    return _round(total)
