"""Pricing service - all business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
from collections.abc import Callable
from datetime import date
from decimal import Decimal

from django.utils import timezone

from pricing.domain.errors import RequestValidationError
from pricing.domain.models import (
    CurrentPricing,
    DiscountResult,
    PaymentAmountCheck,
    PriceBreakdown,
    PriceCalculationRequest,
    PricingTier,
    RuleTableSnapshot,
)
from pricing.domain.value_objects import Money
from pricing.services.accommodation import calculate_accommodation
from pricing.services.add_ons import aggregate_workshops, calculate_accompanying_persons
from pricing.services.aggregator import aggregate_price, pre_discount_subtotal
from pricing.services.discounts import resolve_discount
from pricing.services.tiers import lookup_category_price, resolve_tier
from pricing.stores.interfaces import RuleTableStore

logger = logging.getLogger(__name__)


def accompanying_person_fee(snapshot: RuleTableSnapshot, tier: PricingTier) -> Money:
    """Tier-specific accompanying-person fee, else the policy default."""
    if tier.accompanying_person_fee is not None:
        return tier.accompanying_person_fee
    return snapshot.accompanying_persons.fee


def check_limits(snapshot: RuleTableSnapshot, request: PriceCalculationRequest) -> None:
    limits = snapshot.limits
    workshop_count = len(set(request.workshop_ids))
    if limits.max_workshops is not None and workshop_count > limits.max_workshops:
        raise RequestValidationError(
            "workshopIds", f"At most {limits.max_workshops} workshops can be selected"
        )
    person_count = len(request.accompanying_persons)
    if (
        limits.max_accompanying_persons is not None
        and person_count > limits.max_accompanying_persons
    ):
        raise RequestValidationError(
            "accompanyingPersons",
            f"At most {limits.max_accompanying_persons} accompanying persons are allowed",
        )


def calculate_price(
    snapshot: RuleTableSnapshot, request: PriceCalculationRequest, today: date
) -> PriceBreakdown:
    """Price `request` against `snapshot` as of `today`.

    Pure: identical inputs give identical breakdowns.
    """
    currency = snapshot.currency
    tier = resolve_tier(today, snapshot.tiers, snapshot.fallback_tier_id)
    base = lookup_category_price(tier, request.category_key, request.age)

    workshops = aggregate_workshops(request.workshop_ids, snapshot.workshops, currency)
    accompanying = calculate_accompanying_persons(
        request.accompanying_persons,
        accompanying_person_fee(snapshot, tier),
        snapshot.accompanying_persons.exemption_age,
    )
    accommodation = None
    if request.accommodation is not None:
        accommodation = calculate_accommodation(
            request.accommodation,
            snapshot.accommodation.rates(),
            snapshot.accommodation.tax_rate_percent,
        )

    discount = None
    if request.discount_code:
        discount = resolve_discount(
            request.discount_code,
            request.category_key,
            today,
            pre_discount_subtotal(base, workshops, accompanying, accommodation, currency),
            snapshot.discount_codes,
        )

    return aggregate_price(tier, base, workshops, accompanying, accommodation, discount, currency)


class PricingService:
    """Service for registration price quotes."""

    def __init__(self, store: RuleTableStore, clock: Callable[[], date] = timezone.localdate) -> None:
        self._store = store
        self._clock = clock

    def quote(self, request: PriceCalculationRequest) -> PriceBreakdown:
        """Return the price breakdown for a registration request.

        Raises:
            ConfigurationError: If the rule tables cannot price the request.
            UnknownCategoryError: If the category is not priced by the tier.
            UnknownWorkshopError: If a workshop id is not in the catalog.
            InvalidDateRangeError: If the accommodation dates are reversed.
            RequestValidationError: If a registration limit is exceeded.
        """
        return self._quote(request, self._store.load_snapshot())

    def _quote(
        self, request: PriceCalculationRequest, snapshot: RuleTableSnapshot
    ) -> PriceBreakdown:
        check_limits(snapshot, request)
        breakdown = calculate_price(snapshot, request, self._clock())
        logger.info(
            "Quoted %s in tier %s: %s",
            request.category_key,
            breakdown.tier_id,
            breakdown.total,
        )
        return breakdown

    def current_pricing(self) -> CurrentPricing:
        """Return the tier in force today and the add-on catalog."""
        snapshot = self._store.load_snapshot()
        tier = resolve_tier(self._clock(), snapshot.tiers, snapshot.fallback_tier_id)
        return CurrentPricing(
            tier=tier,
            tiers=snapshot.tiers,
            workshops=snapshot.workshops,
            accompanying_person_fee=accompanying_person_fee(snapshot, tier),
            accompanying_person_exemption_age=snapshot.accompanying_persons.exemption_age,
            accommodation=snapshot.accommodation,
            currency=snapshot.currency,
        )

    def check_discount(
        self, code: str, category_key: str = "", subtotal: Decimal = Decimal("0")
    ) -> DiscountResult:
        """Validate a discount code on its own, without a full quote.

        Without a category the category restriction is not checked.
        """
        snapshot = self._store.load_snapshot()
        return resolve_discount(
            code,
            category_key or None,
            self._clock(),
            Money(subtotal, snapshot.currency),
            snapshot.discount_codes,
        )

    def verify_amount(
        self, request: PriceCalculationRequest, claimed_amount: Decimal
    ) -> PaymentAmountCheck:
        """Re-quote `request` and compare the total with a claimed payment.

        Used right before charging, and when matching a bank-transfer amount,
        so the rule tables are read fresh and discount eligibility is
        checked again against current usage.
        """
        breakdown = self._quote(request, self._store.load_snapshot(fresh=True))
        check = PaymentAmountCheck(
            expected=breakdown.total, claimed=claimed_amount, breakdown=breakdown
        )
        if not check.matches:
            logger.warning(
                "Payment amount %s does not match quoted total %s",
                claimed_amount,
                breakdown.total,
            )
        return check
