"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Self

# Number of decimal places an amount is rounded to, per supported currency.
# INR is charged in whole rupees.
ROUNDING_EXPONENTS = {
    "INR": 0,
    "JPY": 0,
    "USD": 2,
    "EUR": 2,
    "GBP": 2,
    "AUD": 2,
    "CAD": 2,
    "SGD": 2,
    "AED": 2,
    "KWD": 3,
    "BHD": 3,
    "OMR": 3,
}


class RoomType(Enum):
    """Accommodation room types."""

    SINGLE = "single"
    SHARING = "sharing"


class DiscountKind(Enum):
    """How a discount code's value is interpreted."""

    PERCENTAGE = "percentage"
    FIXED = "fixed"


@dataclass(frozen=True)
class Money:
    """Non-negative amount in a single currency."""

    amount: Decimal
    currency: str

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", Decimal(str(self.amount)))
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")
        if not self.currency:
            raise ValueError("Money currency is required")
        if self.currency not in ROUNDING_EXPONENTS:
            raise ValueError(f"Unsupported currency: {self.currency!r}")

    @classmethod
    def zero(cls, currency: str) -> Self:
        return cls(amount=Decimal("0"), currency=currency)

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    def _check_currency(self, other: "Money") -> None:
        if other.currency != self.currency:
            raise ValueError(
                f"Currency mismatch: {self.currency} and {other.currency}"
            )

    def __add__(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(self.amount - other.amount, self.currency)

    def __lt__(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount < other.amount

    def __le__(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount <= other.amount

    def times(self, count: int) -> "Money":
        """Multiply by a non-negative whole count."""
        return Money(self.amount * count, self.currency)

    def percent(self, rate: Decimal) -> "Money":
        """Return rate percent of this amount, rounded."""
        return Money(self.amount * rate / Decimal(100), self.currency).rounded()

    def minus_floored(self, other: "Money") -> "Money":
        """Subtract, flooring the result at zero."""
        self._check_currency(other)
        return Money(max(Decimal("0"), self.amount - other.amount), self.currency)

    def clamp(self, upper: "Money") -> "Money":
        """Limit this amount to at most `upper`."""
        self._check_currency(upper)
        return self if self.amount <= upper.amount else upper

    def rounded(self) -> "Money":
        """Round half-up to the currency's precision."""
        exponent = ROUNDING_EXPONENTS[self.currency]
        quantum = Decimal(1).scaleb(-exponent)
        return Money(self.amount.quantize(quantum, rounding=ROUND_HALF_UP), self.currency)

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"


@dataclass(frozen=True)
class DateWindow:
    """Inclusive range of calendar days."""

    starts_on: date
    ends_on: date

    def __post_init__(self) -> None:
        if self.ends_on < self.starts_on:
            raise ValueError("Date window cannot end before it starts")

    def contains(self, day: date) -> bool:
        return self.starts_on <= day <= self.ends_on

    def is_upcoming(self, day: date) -> bool:
        return day < self.starts_on

    def has_ended(self, day: date) -> bool:
        return day > self.ends_on
