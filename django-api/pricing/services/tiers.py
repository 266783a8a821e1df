"""Tier resolution and category price lookup."""

import logging
from collections.abc import Sequence
from datetime import date

from pricing.domain.errors import ConfigurationError, UnknownCategoryError
from pricing.domain.models import CategoryPrice, PricingTier
from pricing.domain.value_objects import Money

logger = logging.getLogger(__name__)


def resolve_tier(
    today: date, tiers: Sequence[PricingTier], fallback_tier_id: str
) -> PricingTier:
    """Return the tier in force on `today`.

    Tiers are checked in declaration order and the first active tier whose
    window contains `today` wins, so overlapping windows resolve to the
    earlier declaration. When nothing matches, the fallback tier is used
    whatever its own window says.

    Raises:
        ConfigurationError: If no tier matches and the fallback is missing.
    """
    for tier in tiers:
        if tier.is_open_on(today):
            return tier

    for tier in tiers:
        if tier.id == fallback_tier_id:
            logger.info("No tier open on %s, falling back to %r", today, tier.id)
            return tier

    raise ConfigurationError(
        f"No pricing tier open on {today} and fallback tier {fallback_tier_id!r} is missing"
    )


def lookup_category_price(tier: PricingTier, category_key: str, age: int) -> CategoryPrice:
    """Return the registrant's base fee for `category_key` in `tier`.

    Raises:
        UnknownCategoryError: If the tier does not price the category.
    """
    rule = tier.category(category_key)
    if rule is None:
        raise UnknownCategoryError(category_key)

    exemption = rule.age_exemption
    if exemption is not None and exemption.applies_to(category_key, age):
        return CategoryPrice(
            key=rule.key,
            label=rule.label,
            amount=Money.zero(rule.amount.currency),
            age_exempt=True,
        )
    return CategoryPrice(key=rule.key, label=rule.label, amount=rule.amount.rounded())
