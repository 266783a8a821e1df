"""Domain models for rule tables, requests and results.

These are pure domain objects with no API input rules.
Django ORM models are in pricing/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from pricing.domain.value_objects import DateWindow, DiscountKind, Money, RoomType

DEFAULT_FALLBACK_TIER_ID = "regular"
DEFAULT_EXEMPTION_AGE = 10
DEFAULT_ACCOMMODATION_TAX_PERCENT = Decimal("18")


# Rule tables


@dataclass(frozen=True)
class AgeExemption:
    """Waives a category fee for registrants at or above `min_age`."""

    min_age: int
    applicable_category_keys: frozenset[str]

    def applies_to(self, category_key: str, age: int) -> bool:
        return category_key in self.applicable_category_keys and age >= self.min_age


@dataclass(frozen=True)
class CategoryRule:
    """Fee for one registration category within a tier."""

    key: str
    label: str
    amount: Money
    description: str = ""
    age_exemption: AgeExemption | None = None


@dataclass(frozen=True)
class PricingTier:
    """Date-windowed fee schedule."""

    id: str
    name: str
    window: DateWindow
    active: bool
    categories: tuple[CategoryRule, ...]
    description: str = ""
    accompanying_person_fee: Money | None = None

    def category(self, key: str) -> CategoryRule | None:
        for rule in self.categories:
            if rule.key == key:
                return rule
        return None

    def is_open_on(self, day: date) -> bool:
        return self.active and self.window.contains(day)


@dataclass(frozen=True)
class Workshop:
    """Optional paid add-on session."""

    id: str
    name: str
    amount: Money
    description: str = ""
    capacity: int | None = None
    seats_taken: int = 0


@dataclass(frozen=True)
class DiscountCode:
    """Time- and usage-bounded reduction of a subtotal."""

    code: str
    kind: DiscountKind
    value: Decimal
    window: DateWindow
    active: bool = True
    description: str = ""
    max_uses: int | None = None
    uses_so_far: int = 0
    applicable_category_keys: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Discount value cannot be negative")
        if self.kind is DiscountKind.PERCENTAGE and self.value > 100:
            raise ValueError("Percentage discount cannot exceed 100")
        if self.uses_so_far < 0:
            raise ValueError("Discount usage count cannot be negative")

    @property
    def usage_exhausted(self) -> bool:
        return self.max_uses is not None and self.uses_so_far >= self.max_uses

    def applies_to_category(self, category_key: str) -> bool:
        # An empty restriction set means every category qualifies.
        return not self.applicable_category_keys or category_key in self.applicable_category_keys


@dataclass(frozen=True)
class AccompanyingPersonPolicy:
    """Default accompanying-person fee and the child exemption age."""

    fee: Money
    exemption_age: int = DEFAULT_EXEMPTION_AGE


@dataclass(frozen=True)
class AccommodationPolicy:
    """Nightly room rates and the tax charged on lodging."""

    nightly_rates: tuple[tuple[RoomType, Money], ...]
    tax_rate_percent: Decimal = DEFAULT_ACCOMMODATION_TAX_PERCENT

    def __post_init__(self) -> None:
        # Accept a mapping; keep hashable pairs ordered by room type.
        rates = dict(self.nightly_rates)
        object.__setattr__(
            self,
            "nightly_rates",
            tuple(sorted(rates.items(), key=lambda pair: pair[0].value)),
        )

    def rates(self) -> dict[RoomType, Money]:
        """Return a fresh room type to nightly rate mapping."""
        return dict(self.nightly_rates)


@dataclass(frozen=True)
class RegistrationLimits:
    """Per-registration caps; None means unlimited."""

    max_workshops: int | None = None
    max_accompanying_persons: int | None = None


@dataclass(frozen=True)
class RuleTableSnapshot:
    """Immutable view of every rule table a calculation reads."""

    currency: str
    tiers: tuple[PricingTier, ...]
    workshops: tuple[Workshop, ...]
    discount_codes: tuple[DiscountCode, ...]
    accompanying_persons: AccompanyingPersonPolicy
    accommodation: AccommodationPolicy
    limits: RegistrationLimits = field(default_factory=RegistrationLimits)
    fallback_tier_id: str = DEFAULT_FALLBACK_TIER_ID


# Requests


@dataclass(frozen=True)
class AccompanyingPerson:
    """Person attending with the registrant."""

    name: str
    age: int
    relationship: str = ""
    dietary_requirements: str = ""

    def __post_init__(self) -> None:
        if self.age < 0:
            raise ValueError("Age cannot be negative")


@dataclass(frozen=True)
class AccommodationSelection:
    """Requested room type and stay dates."""

    room_type: RoomType
    check_in: date
    check_out: date

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days


@dataclass(frozen=True)
class PriceCalculationRequest:
    """Input to a single price calculation."""

    category_key: str
    age: int = 0
    workshop_ids: tuple[str, ...] = ()
    accompanying_persons: tuple[AccompanyingPerson, ...] = ()
    discount_code: str | None = None
    accommodation: AccommodationSelection | None = None


# Component results


@dataclass(frozen=True)
class CategoryPrice:
    key: str
    label: str
    amount: Money
    age_exempt: bool = False

    @property
    def currency(self) -> str:
        return self.amount.currency


@dataclass(frozen=True)
class WorkshopLine:
    id: str
    name: str
    amount: Money


@dataclass(frozen=True)
class WorkshopCharges:
    total: Money
    lines: tuple[WorkshopLine, ...] = ()


@dataclass(frozen=True)
class AccompanyingPersonCharges:
    liable_count: int
    exempt_count: int
    fee_per_person: Money
    total: Money


@dataclass(frozen=True)
class AccommodationCharge:
    room_type: RoomType
    nights: int
    rate: Money
    subtotal: Money
    tax: Money
    tax_rate_percent: Decimal

    @property
    def total(self) -> Money:
        return self.subtotal + self.tax


@dataclass(frozen=True)
class DiscountResult:
    """Outcome of validating a discount code against a subtotal."""

    valid: bool
    amount: Money
    code: str | None = None
    kind: DiscountKind | None = None
    value: Decimal | None = None
    reason: str | None = None
    message: str | None = None


# Breakdown


@dataclass(frozen=True)
class PerLineBreakdown:
    registration: CategoryPrice
    workshops: tuple[WorkshopLine, ...]
    accompanying_persons: AccompanyingPersonCharges
    accommodation: AccommodationCharge | None = None
    discount: DiscountResult | None = None


def _amount(money: Money) -> str:
    return str(money.amount)


@dataclass(frozen=True)
class PriceBreakdown:
    """Itemized, auditable result of one price calculation."""

    tier_id: str
    tier_name: str
    currency: str
    base_amount: Money
    workshop_fees: Money
    accompanying_person_fees: Money
    liable_accompanying_person_count: int
    free_accompanying_person_count: int
    accommodation_fees: Money
    accommodation_nights: int
    subtotal: Money
    discount_amount: Money
    tax: Money
    total: Money
    per_line: PerLineBreakdown
    discount_code_applied: str | None = None
    discount_rejection: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Canonical payload shape handed to display, payment and invoicing."""
        lines = self.per_line
        per_line: dict[str, Any] = {
            "registration": {
                "key": lines.registration.key,
                "label": lines.registration.label,
                "amount": _amount(lines.registration.amount),
                "ageExempt": lines.registration.age_exempt,
            },
            "workshops": [
                {"id": line.id, "name": line.name, "amount": _amount(line.amount)}
                for line in lines.workshops
            ],
            "accompanyingPersons": {
                "count": lines.accompanying_persons.liable_count,
                "exemptCount": lines.accompanying_persons.exempt_count,
                "feePerPerson": _amount(lines.accompanying_persons.fee_per_person),
                "amount": _amount(lines.accompanying_persons.total),
            },
        }
        if lines.accommodation is not None:
            stay = lines.accommodation
            per_line["accommodation"] = {
                "roomType": stay.room_type.value,
                "nights": stay.nights,
                "rate": _amount(stay.rate),
                "amount": _amount(stay.subtotal),
                "tax": _amount(stay.tax),
                "taxRatePercent": str(stay.tax_rate_percent),
            }
        if lines.discount is not None and lines.discount.valid:
            per_line["discount"] = {
                "code": lines.discount.code,
                "kind": lines.discount.kind.value,
                "value": str(lines.discount.value),
                "amount": _amount(lines.discount.amount),
            }
        return {
            "tier": {"id": self.tier_id, "name": self.tier_name},
            "currency": self.currency,
            "baseAmount": _amount(self.base_amount),
            "workshopFees": _amount(self.workshop_fees),
            "accompanyingPersonFees": _amount(self.accompanying_person_fees),
            "accompanyingPersonCount": self.liable_accompanying_person_count,
            "freeAccompanyingPersonCount": self.free_accompanying_person_count,
            "accommodationFees": _amount(self.accommodation_fees),
            "accommodationNights": self.accommodation_nights,
            "subtotal": _amount(self.subtotal),
            "discountAmount": _amount(self.discount_amount),
            "discountCodeApplied": self.discount_code_applied,
            "discountRejection": self.discount_rejection,
            "tax": _amount(self.tax),
            "total": _amount(self.total),
            "perLine": per_line,
        }


@dataclass(frozen=True)
class CurrentPricing:
    """Tier in force today plus the add-on catalog, for display."""

    tier: PricingTier
    tiers: tuple[PricingTier, ...]
    workshops: tuple[Workshop, ...]
    accompanying_person_fee: Money
    accompanying_person_exemption_age: int
    accommodation: AccommodationPolicy
    currency: str


@dataclass(frozen=True)
class PaymentAmountCheck:
    """Comparison of a claimed payment amount with an authoritative quote."""

    expected: Money
    claimed: Decimal
    breakdown: PriceBreakdown

    @property
    def matches(self) -> bool:
        return self.claimed == self.expected.amount

    @property
    def difference(self) -> Decimal:
        return self.claimed - self.expected.amount
