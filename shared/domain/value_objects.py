"""
Common Value Objects

Value objects used across multiple domains:
- Money: Monetary amounts in Brazilian reais with pt-BR formatting
- GuestBreakdown: Guests split into full price, half price and free
- GuestRange: Inclusive range of total guests covered by a price tier
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from shared.domain.base import ValueObject

CENTS = Decimal('0.01')


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Represents a monetary amount with currency.
    Immutable and supports arithmetic operations.
    """
    amount: Decimal
    currency: str = 'BRL'

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")
        if self.currency != 'BRL':
            raise ValueError(f"Unsupported currency: {self.currency}")

    def __add__(self, other: 'Money') -> 'Money':
        """Add two money objects"""
        if not isinstance(other, Money):
            raise TypeError("Can only add Money to Money")
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor) -> 'Money':
        """Multiply money by a factor"""
        if not isinstance(factor, (int, Decimal)):
            raise TypeError("Can only multiply Money by int or Decimal")
        return Money(self.amount * Decimal(factor), self.currency)

    def quantize(self) -> 'Money':
        """Round to cents (half up)."""
        return Money(self.amount.quantize(CENTS, rounding=ROUND_HALF_UP), self.currency)

    def format(self) -> str:
        """
        Format in the pt-BR convention.

        Examples:
            - Money(Decimal("1234.5")).format() -> "R$ 1.234,50"
            - Money(Decimal("0")).format() -> "R$ 0,00"
        """
        value = self.amount.quantize(CENTS, rounding=ROUND_HALF_UP)
        integer, _, cents = f"{value:,.2f}".partition('.')
        return f"R$ {integer.replace(',', '.')},{cents}"

    def __str__(self):
        return self.format()

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"


@dataclass(frozen=True)
class GuestBreakdown(ValueObject):
    """
    Guest breakdown value object

    full: adults and children paying the full price ("inteira")
    half: children 6-12 years paying half price ("meia")
    free: children 0-5 years, not charged
    """
    full: int = 0
    half: int = 0
    free: int = 0

    def __post_init__(self):
        if min(self.full, self.half, self.free) < 0:
            raise ValueError("Guest counts cannot be negative")

    @property
    def total(self) -> int:
        return self.full + self.half + self.free

    @property
    def paying(self) -> int:
        return self.full + self.half

    def __str__(self):
        parts = []
        if self.full:
            parts.append(f"{self.full} inteira" if self.full == 1 else f"{self.full} inteiras")
        if self.half:
            parts.append(f"{self.half} meia" if self.half == 1 else f"{self.half} meias")
        if self.free:
            parts.append(f"{self.free} free")
        return ", ".join(parts)


@dataclass(frozen=True)
class GuestRange(ValueObject):
    """
    Guest range value object

    Both bounds are inclusive; maximum=None means the range is open-ended.
    """
    minimum: int
    maximum: Optional[int] = None

    def __post_init__(self):
        if self.minimum < 1:
            raise ValueError("Minimum guests must be at least 1")
        if self.maximum is not None and self.maximum <= self.minimum:
            raise ValueError("Maximum guests must be greater than minimum guests")

    def contains(self, guests: int) -> bool:
        if guests < self.minimum:
            return False
        return self.maximum is None or guests <= self.maximum

    def overlaps_with(self, other: 'GuestRange') -> bool:
        """
        Check if two ranges share at least one guest count

        Examples:
            - GuestRange(1, 50) overlaps with GuestRange(50, 100) -> True
            - GuestRange(1, 50) overlaps with GuestRange(51) -> False
        """
        if not isinstance(other, GuestRange):
            raise TypeError("Can only check overlap with another GuestRange")
        self_below_other_end = other.maximum is None or self.minimum <= other.maximum
        other_below_self_end = self.maximum is None or other.minimum <= self.maximum
        return self_below_other_end and other_below_self_end

    def __str__(self):
        if self.maximum is None:
            return f"{self.minimum}+"
        return f"{self.minimum}-{self.maximum}"
