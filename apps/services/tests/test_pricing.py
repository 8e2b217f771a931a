"""Tests for the pricing helpers."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from apps.services.models import Service, ServiceDateSurcharge, ServiceGuestTier
from apps.services.pricing import (
    PRICE_ON_REQUEST,
    CartItem,
    calculate_budget,
    calculate_guest_count,
    calculate_price_with_fee,
    calculate_price_with_minimum_guests,
    calculate_service_value,
    calculate_totals,
    cart_total,
    format_guest_breakdown,
    format_minimum_price_with_fee,
    format_price,
    format_tiers,
    is_price_correct,
    select_tier,
)
from shared.domain.value_objects import GuestBreakdown, GuestRange


def _tier(minimum, maximum, price, pk=None):
    return SimpleNamespace(
        pk=pk,
        min_total_guests=minimum,
        max_total_guests=maximum,
        base_price_per_adult=Decimal(price),
    )


TIERS = [
    _tier(101, None, "80.00"),
    _tier(1, 50, "100.00"),
    _tier(51, 100, "90.00"),
]


def test_guest_count_and_service_value():
    assert calculate_guest_count(10, 4, 2) == 16
    # Free guests are not charged, half guests pay half
    assert calculate_service_value(Decimal("100"), 10, 4) == Decimal("1200.00")
    assert calculate_service_value(Decimal("75.50"), 0, 3) == Decimal("113.25")


def test_totals_apply_platform_fee():
    totals = calculate_totals([Decimal("1000"), Decimal("200")])
    assert totals.subtotal == Decimal("1200.00")
    assert totals.befest_fee == Decimal("120.00")
    assert totals.total == Decimal("1320.00")
    assert totals.fee_percentage == Decimal("10")


def test_totals_with_custom_fee():
    totals = calculate_totals([Decimal("50")], fee_percent=20)
    assert totals.befest_fee == Decimal("10.00")
    assert totals.total == Decimal("60.00")


def test_price_tolerance():
    assert is_price_correct(Decimal("100.00"), Decimal("100.01"))
    assert not is_price_correct(Decimal("100.00"), Decimal("100.02"))


def test_guest_breakdown_text_omits_zero_parts():
    assert format_guest_breakdown(2, 1, 0) == "2 inteiras, 1 meia"
    assert format_guest_breakdown(1, 0, 3) == "1 inteira, 3 free"
    assert format_guest_breakdown(0, 0, 0) == ""


def test_select_tier_matches_range():
    assert select_tier(TIERS, 75).base_price_per_adult == Decimal("90.00")
    assert select_tier(TIERS, 50).base_price_per_adult == Decimal("100.00")
    assert select_tier(TIERS, 500).base_price_per_adult == Decimal("80.00")


def test_select_tier_fallbacks():
    bounded = [_tier(10, 50, "100.00"), _tier(51, 100, "90.00")]
    assert select_tier(bounded, 5).min_total_guests == 10
    assert select_tier(bounded, 200).min_total_guests == 51
    assert select_tier([], 10) is None


def test_minimum_guests_applied_below_tier_minimum():
    result = calculate_price_with_minimum_guests([_tier(20, 50, "100.00")], 10)
    assert result.minimum_applied
    assert result.applied_guests == 20
    assert result.total_price == Decimal("2000.00")
    assert result.price_per_guest == Decimal("200.00")
    assert "Mínimo 20 convidados" in result.explanation


def test_minimum_guests_not_applied_inside_tier():
    result = calculate_price_with_minimum_guests([_tier(20, 50, "100.00")], 30)
    assert not result.minimum_applied
    assert result.total_price == Decimal("3000.00")
    assert result.price_per_guest == Decimal("100.00")


def test_minimum_guests_without_tiers_uses_fallback_price():
    result = calculate_price_with_minimum_guests([], 10, fallback_price_per_guest=Decimal("45"))
    assert result.total_price == Decimal("450.00")
    assert not result.minimum_applied


def test_display_price_rounds_up_with_fee():
    assert calculate_price_with_fee(Decimal("100")) == Decimal("105")
    assert calculate_price_with_fee(Decimal("99.99")) == Decimal("105")
    assert calculate_price_with_fee(Decimal("10"), fee_percent=0) == Decimal("10")


def test_price_formatting():
    assert format_price(Decimal("1234.56")) == "R$ 1.234,56"
    assert format_price(Decimal("0")) == "R$ 0,00"
    assert format_price(Decimal("1000000")) == "R$ 1.000.000,00"


def test_minimum_price_with_fee_and_tier_lines():
    assert format_minimum_price_with_fee([]) == PRICE_ON_REQUEST
    assert format_minimum_price_with_fee(TIERS) == "R$ 105,00"
    assert format_tiers(TIERS) == [
        "1-50 convidados: R$ 100,00/adulto",
        "51-100 convidados: R$ 90,00/adulto",
        "101+ convidados: R$ 80,00/adulto",
    ]


def test_cart_total():
    items = [
        CartItem(service_id=1, price=Decimal("100"), full_guests=2, half_guests=2),
        CartItem(service_id=2, price=Decimal("50"), full_guests=1, quantity=2),
    ]
    assert cart_total(items) == Decimal("400.00")
    assert cart_total([]) == Decimal("0.00")


def test_guest_range_overlap_is_inclusive():
    assert GuestRange(1, 50).overlaps_with(GuestRange(50, 100))
    assert not GuestRange(1, 50).overlaps_with(GuestRange(51))
    assert GuestRange(100).overlaps_with(GuestRange(200, 300))
    with pytest.raises(ValueError):
        GuestRange(10, 10)


def test_guest_breakdown_rejects_negative_counts():
    with pytest.raises(ValueError):
        GuestBreakdown(-1, 0, 0)


@pytest.mark.django_db
def test_budget_with_tier_and_surcharges(provider_user):
    service = Service.objects.create(
        provider=provider_user,
        name="Buffet completo",
        price_per_guest=Decimal("120.00"),
    )
    tier = ServiceGuestTier.objects.create(
        service=service,
        min_total_guests=1,
        max_total_guests=50,
        base_price_per_adult=Decimal("100.00"),
    )
    ServiceDateSurcharge.objects.create(
        service=service,
        surcharge_description="Réveillon",
        start_date=date(2030, 12, 30),
        end_date=date(2030, 12, 31),
        surcharge_type=ServiceDateSurcharge.SurchargeType.FIXED,
        surcharge_value=Decimal("10.00"),
    )
    ServiceDateSurcharge.objects.create(
        service=service,
        surcharge_description="Alta temporada",
        start_date=date(2030, 12, 1),
        end_date=date(2030, 12, 31),
        surcharge_type=ServiceDateSurcharge.SurchargeType.PERCENTAGE,
        surcharge_value=Decimal("20.00"),
    )

    budget = calculate_budget(service, GuestBreakdown(10, 4, 2), event_date=date(2030, 12, 31))

    assert budget.tier_id == tier.pk
    assert budget.base_price_per_guest == Decimal("100.00")
    assert [a.total for a in budget.age_adjustments] == [
        Decimal("1000.00"),
        Decimal("200.00"),
        Decimal("0.00"),
    ]
    amounts = sorted(s.applied_amount for s in budget.date_surcharges)
    assert amounts == [Decimal("160.00"), Decimal("240.00")]
    assert budget.subtotal == Decimal("1600.00")
    assert budget.befest_fee == Decimal("160.00")
    assert budget.total == Decimal("1760.00")


@pytest.mark.django_db
def test_budget_without_tiers_uses_service_price(provider_user):
    service = Service.objects.create(
        provider=provider_user,
        name="DJ",
        price_per_guest=None,
        base_price=Decimal("30.00"),
    )
    budget = calculate_budget(service, GuestBreakdown(10, 0, 0), event_date=date(2030, 6, 1))
    assert budget.tier_id is None
    assert budget.base_price_per_guest == Decimal("30.00")
    assert budget.date_surcharges == []
    assert budget.total == Decimal("330.00")
