"""Compose component charges into a single breakdown."""

from pricing.domain.errors import ConfigurationError
from pricing.domain.models import (
    AccommodationCharge,
    AccompanyingPersonCharges,
    CategoryPrice,
    DiscountResult,
    PerLineBreakdown,
    PriceBreakdown,
    PricingTier,
    WorkshopCharges,
)
from pricing.domain.value_objects import Money


def pre_discount_subtotal(
    base: CategoryPrice,
    workshops: WorkshopCharges,
    accompanying: AccompanyingPersonCharges,
    accommodation: AccommodationCharge | None,
    currency: str,
) -> Money:
    """Sum of every line a discount can reduce.

    Raises:
        ConfigurationError: If the lines are priced in different currencies.
    """
    accommodation_fees = accommodation.subtotal if accommodation else Money.zero(currency)
    try:
        return base.amount + workshops.total + accompanying.total + accommodation_fees
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc


def aggregate_price(
    tier: PricingTier,
    base: CategoryPrice,
    workshops: WorkshopCharges,
    accompanying: AccompanyingPersonCharges,
    accommodation: AccommodationCharge | None,
    discount: DiscountResult | None,
    currency: str,
) -> PriceBreakdown:
    """Build the breakdown.

    The discount comes off the subtotal and accommodation tax is added
    afterwards, so tax is never discounted. The discount is clamped here
    again so the total can never go negative.

    Raises:
        ConfigurationError: If the lines are priced in different currencies.
    """
    zero = Money.zero(currency)
    accommodation_fees = accommodation.subtotal if accommodation else zero
    tax = accommodation.tax if accommodation else zero
    subtotal = pre_discount_subtotal(base, workshops, accompanying, accommodation, currency)

    try:
        discount_amount = zero
        if discount is not None and discount.valid:
            discount_amount = discount.amount.clamp(subtotal)
        total = subtotal.minus_floored(discount_amount) + tax
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc

    applied = discount if discount is not None and discount.valid else None
    return PriceBreakdown(
        tier_id=tier.id,
        tier_name=tier.name,
        currency=currency,
        base_amount=base.amount,
        workshop_fees=workshops.total,
        accompanying_person_fees=accompanying.total,
        liable_accompanying_person_count=accompanying.liable_count,
        free_accompanying_person_count=accompanying.exempt_count,
        accommodation_fees=accommodation_fees,
        accommodation_nights=accommodation.nights if accommodation else 0,
        subtotal=subtotal,
        discount_amount=discount_amount,
        tax=tax,
        total=total,
        per_line=PerLineBreakdown(
            registration=base,
            workshops=workshops.lines,
            accompanying_persons=accompanying,
            accommodation=accommodation,
            discount=applied,
        ),
        discount_code_applied=applied.code if applied else None,
        discount_rejection=discount.reason if discount is not None and not discount.valid else None,
    )
