"""Unit tests for composing a price breakdown.

Run with: pytest tests/test_aggregator.py -v
"""

from decimal import Decimal

import pytest

from pricing.domain import (
    AccommodationCharge,
    AccompanyingPersonCharges,
    CategoryPrice,
    DiscountKind,
    DiscountResult,
    Money,
    RoomType,
    WorkshopCharges,
)
from pricing.domain.errors import ConfigurationError
from pricing.services.aggregator import aggregate_price


def inr(amount) -> Money:
    return Money(Decimal(str(amount)), "INR")


BASE = CategoryPrice("postgraduate", "Postgraduate / Resident", inr(2500))
NO_WORKSHOPS = WorkshopCharges(total=inr(0))
ONE_ADULT = AccompanyingPersonCharges(liable_count=1, exempt_count=0, fee_per_person=inr(3000), total=inr(3000))
STAY = AccommodationCharge(
    room_type=RoomType.SINGLE,
    nights=2,
    rate=inr(10000),
    subtotal=inr(20000),
    tax=inr(3600),
    tax_rate_percent=Decimal("18"),
)


def _discount(amount, valid=True) -> DiscountResult:
    if not valid:
        return DiscountResult(valid=False, amount=inr(0), code="NOPE", reason="not found")
    return DiscountResult(
        valid=True, amount=inr(amount), code="SAVE", kind=DiscountKind.FIXED, value=Decimal(amount)
    )


class TestAggregatePrice:
    """Tests for aggregate_price."""

    def test_plain_total(self, tiers):
        """Base plus one accompanying adult totals 5500."""
        breakdown = aggregate_price(tiers[1], BASE, NO_WORKSHOPS, ONE_ADULT, None, None, "INR")
        assert breakdown.subtotal.amount == Decimal("5500")
        assert breakdown.total.amount == Decimal("5500")
        assert breakdown.tax.is_zero
        assert breakdown.discount_code_applied is None
        assert breakdown.per_line.accommodation is None

    def test_tax_added_after_discount(self, tiers):
        """Accommodation tax is not reduced by the discount."""
        breakdown = aggregate_price(tiers[1], BASE, NO_WORKSHOPS, ONE_ADULT, STAY, _discount(1000), "INR")
        assert breakdown.subtotal.amount == Decimal("25500")
        assert breakdown.discount_amount.amount == Decimal("1000")
        assert breakdown.tax.amount == Decimal("3600")
        assert breakdown.total.amount == Decimal("28100")
        assert breakdown.accommodation_nights == 2

    def test_discount_clamped_again(self, tiers):
        """An oversized discount result cannot push the total below tax."""
        breakdown = aggregate_price(tiers[1], BASE, NO_WORKSHOPS, ONE_ADULT, STAY, _discount(999999), "INR")
        assert breakdown.discount_amount == breakdown.subtotal
        assert breakdown.total.amount == Decimal("3600")

    def test_rejected_discount_is_recorded_not_applied(self, tiers):
        """An ineligible code leaves the total untouched and notes why."""
        breakdown = aggregate_price(
            tiers[1], BASE, NO_WORKSHOPS, ONE_ADULT, None, _discount(0, valid=False), "INR"
        )
        assert breakdown.total.amount == Decimal("5500")
        assert breakdown.discount_rejection == "not found"
        assert breakdown.per_line.discount is None

    def test_currency_mismatch_is_configuration_error(self, tiers):
        """Lines in different currencies cannot be combined."""
        foreign = CategoryPrice("international", "International", Money(Decimal("100"), "USD"))
        with pytest.raises(ConfigurationError):
            aggregate_price(tiers[1], foreign, NO_WORKSHOPS, ONE_ADULT, None, None, "INR")

    def test_as_dict_shape(self, tiers):
        """The payload carries every line with string amounts."""
        payload = aggregate_price(
            tiers[1], BASE, NO_WORKSHOPS, ONE_ADULT, STAY, _discount(1000), "INR"
        ).as_dict()
        assert payload["tier"] == {"id": "regular", "name": "Regular"}
        assert payload["total"] == "28100"
        assert payload["perLine"]["registration"]["label"] == "Postgraduate / Resident"
        assert payload["perLine"]["accommodation"]["nights"] == 2
        assert payload["perLine"]["discount"]["code"] == "SAVE"
        assert payload["perLine"]["accompanyingPersons"]["count"] == 1
