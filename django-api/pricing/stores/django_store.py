"""Django ORM implementation of the RuleTableStore."""

import logging

from django.conf import settings
from django.core.cache import cache
from django.db.models import F, Q

from pricing import models
from pricing.domain import (
    AccommodationPolicy,
    AccompanyingPersonPolicy,
    AgeExemption,
    CategoryRule,
    DateWindow,
    DiscountCode,
    DiscountKind,
    Money,
    PricingTier,
    RegistrationLimits,
    RoomType,
    RuleTableSnapshot,
    Workshop,
)
from pricing.domain.errors import ConfigurationError
from pricing.stores.interfaces import RuleTableStore

logger = logging.getLogger(__name__)

SNAPSHOT_CACHE_KEY = "pricing:snapshot"


def _category_from_row(row: models.CategoryRule, currency: str) -> CategoryRule:
    exemption = None
    if row.exemption_min_age is not None:
        exemption = AgeExemption(
            min_age=row.exemption_min_age,
            applicable_category_keys=frozenset(row.exemption_category_keys or [row.key]),
        )
    return CategoryRule(
        key=row.key,
        label=row.label,
        amount=Money(row.amount, currency),
        description=row.description,
        age_exemption=exemption,
    )


def _tier_from_row(row: models.PricingTier, currency: str) -> PricingTier:
    fee = row.accompanying_person_fee
    return PricingTier(
        id=row.slug,
        name=row.name,
        description=row.description,
        window=DateWindow(row.starts_on, row.ends_on),
        active=row.is_active,
        categories=tuple(_category_from_row(c, currency) for c in row.categories.all()),
        accompanying_person_fee=Money(fee, currency) if fee is not None else None,
    )


def _workshop_from_row(row: models.Workshop, currency: str) -> Workshop:
    return Workshop(
        id=row.slug,
        name=row.name,
        description=row.description,
        amount=Money(row.amount, currency),
        capacity=row.capacity,
        seats_taken=row.seats_taken,
    )


def _discount_from_row(row: models.DiscountCode) -> DiscountCode:
    return DiscountCode(
        code=row.code,
        kind=DiscountKind(row.kind),
        value=row.value,
        window=DateWindow(row.valid_from, row.valid_to),
        active=row.is_active,
        description=row.description,
        max_uses=row.max_uses,
        uses_so_far=row.uses_so_far,
        applicable_category_keys=frozenset(row.applicable_category_keys or []),
    )


class DjangoRuleTableStore(RuleTableStore):
    """Database-backed rule tables, cached as a single snapshot."""

    def __init__(self, cache_timeout: int | None = None) -> None:
        if cache_timeout is None:
            cache_timeout = settings.PRICING_SNAPSHOT_CACHE_TIMEOUT
        self._cache_timeout = cache_timeout

    def load_snapshot(self, fresh: bool = False) -> RuleTableSnapshot:
        snapshot = None if fresh else cache.get(SNAPSHOT_CACHE_KEY)
        if snapshot is None:
            snapshot = self._build_snapshot()
            cache.set(SNAPSHOT_CACHE_KEY, snapshot, self._cache_timeout)
        return snapshot

    def _build_snapshot(self) -> RuleTableSnapshot:
        policy = models.PricingPolicy.objects.order_by("-updated_at").first()
        if policy is None:
            raise ConfigurationError("Pricing policy is not configured")

        currency = policy.currency
        tiers = models.PricingTier.objects.prefetch_related("categories")
        workshops = models.Workshop.objects.filter(is_active=True)
        try:
            snapshot = RuleTableSnapshot(
                currency=currency,
                fallback_tier_id=policy.fallback_tier_slug,
                tiers=tuple(_tier_from_row(row, currency) for row in tiers),
                workshops=tuple(_workshop_from_row(row, currency) for row in workshops),
                discount_codes=tuple(
                    _discount_from_row(row) for row in models.DiscountCode.objects.all()
                ),
                accompanying_persons=AccompanyingPersonPolicy(
                    fee=Money(policy.accompanying_person_fee, currency),
                    exemption_age=policy.accompanying_person_exemption_age,
                ),
                accommodation=AccommodationPolicy(
                    nightly_rates={
                        RoomType.SINGLE: Money(policy.single_room_rate, currency),
                        RoomType.SHARING: Money(policy.sharing_room_rate, currency),
                    },
                    tax_rate_percent=policy.accommodation_tax_percent,
                ),
                limits=RegistrationLimits(
                    max_workshops=policy.max_workshops,
                    max_accompanying_persons=policy.max_accompanying_persons,
                ),
            )
        except ValueError as exc:
            logger.error("Stored pricing rules are invalid: %s", exc)
            raise ConfigurationError(f"Stored pricing rules are invalid: {exc}") from exc

        logger.debug(
            "Built pricing snapshot: %d tiers, %d workshops, %d discount codes",
            len(snapshot.tiers),
            len(snapshot.workshops),
            len(snapshot.discount_codes),
        )
        return snapshot

    def claim_discount_use(self, code: str) -> bool:
        updated = (
            models.DiscountCode.objects.filter(code=code.strip().upper())
            .filter(Q(max_uses__isnull=True) | Q(uses_so_far__lt=F("max_uses")))
            .update(uses_so_far=F("uses_so_far") + 1)
        )
        if updated:
            invalidate_snapshot()
        return bool(updated)


def invalidate_snapshot() -> None:
    cache.delete(SNAPSHOT_CACHE_KEY)
