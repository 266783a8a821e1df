"""Tests for snapshot caching and discount usage claims.

Run with: pytest tests/test_cache.py -v
"""

from datetime import date
from decimal import Decimal

import pytest
from django.core.cache import cache

from pricing import models
from pricing.domain import PriceCalculationRequest
from pricing.domain.errors import ConfigurationError
from pricing.services import PricingService
from pricing.stores import DjangoRuleTableStore
from pricing.stores.django_store import SNAPSHOT_CACHE_KEY


@pytest.fixture
def policy(db):
    return models.PricingPolicy.objects.create(
        accompanying_person_fee=Decimal("3000"),
        single_room_rate=Decimal("10000"),
        sharing_room_rate=Decimal("6000"),
    )


@pytest.fixture
def tier(policy):
    tier = models.PricingTier.objects.create(
        slug="regular", name="Regular", starts_on=date(2026, 2, 1), ends_on=date(2026, 4, 20)
    )
    models.CategoryRule.objects.create(tier=tier, key="postgraduate", label="Postgraduate", amount=Decimal("2500"))
    return tier


@pytest.fixture
def capped_code(policy):
    return models.DiscountCode.objects.create(
        code="LAST1",
        kind=models.DiscountCode.Kind.FIXED,
        value=Decimal("500"),
        valid_from=date(2026, 1, 1),
        valid_to=date(2026, 12, 31),
        max_uses=1,
    )


@pytest.mark.django_db
class TestSnapshotCache:
    """Tests for snapshot caching and invalidation on model changes."""

    def test_snapshot_is_cached(self, tier):
        """Loading the snapshot stores it under the snapshot cache key."""
        snapshot = DjangoRuleTableStore().load_snapshot()
        assert cache.get(SNAPSHOT_CACHE_KEY) == snapshot

    def test_tier_save_invalidates_snapshot(self, tier):
        """Saving a tier drops the cached snapshot."""
        DjangoRuleTableStore().load_snapshot()
        tier.name = "Regular (extended)"
        tier.save()
        assert cache.get(SNAPSHOT_CACHE_KEY) is None
        assert DjangoRuleTableStore().load_snapshot().tiers[0].name == "Regular (extended)"

    def test_category_save_invalidates_snapshot(self, tier):
        """Saving a category fee drops the cached snapshot."""
        DjangoRuleTableStore().load_snapshot()
        models.CategoryRule.objects.filter(tier=tier).first().delete()
        assert cache.get(SNAPSHOT_CACHE_KEY) is None

    def test_workshop_save_invalidates_snapshot(self, tier):
        """Saving a workshop drops the cached snapshot."""
        DjangoRuleTableStore().load_snapshot()
        models.Workshop.objects.create(slug="nerve-repair", name="Nerve Repair", amount=Decimal("3000"))
        assert cache.get(SNAPSHOT_CACHE_KEY) is None

    def test_discount_save_invalidates_snapshot(self, tier, capped_code):
        """Saving a discount code drops the cached snapshot."""
        DjangoRuleTableStore().load_snapshot()
        capped_code.is_active = False
        capped_code.save()
        assert cache.get(SNAPSHOT_CACHE_KEY) is None

    def test_missing_policy_is_configuration_error(self, db):
        """Without a pricing policy no snapshot can be built."""
        with pytest.raises(ConfigurationError):
            DjangoRuleTableStore().load_snapshot()

    def test_unsupported_currency_is_configuration_error(self, tier):
        """A policy in a currency without known precision cannot form a snapshot."""
        models.PricingPolicy.objects.update(currency="XYZ")
        with pytest.raises(ConfigurationError):
            DjangoRuleTableStore().load_snapshot()

    def test_invalid_stored_rule_is_configuration_error(self, tier):
        """A stored percentage above 100 cannot form a snapshot."""
        models.DiscountCode.objects.create(
            code="BROKEN",
            kind=models.DiscountCode.Kind.PERCENTAGE,
            value=Decimal("150"),
            valid_from=date(2026, 1, 1),
            valid_to=date(2026, 12, 31),
        )
        with pytest.raises(ConfigurationError):
            DjangoRuleTableStore().load_snapshot()


@pytest.mark.django_db
class TestClaimDiscountUse:
    """Tests for the atomic usage counter."""

    def test_claims_until_cap(self, capped_code):
        """The last use can be claimed exactly once."""
        store = DjangoRuleTableStore()
        assert store.claim_discount_use("last1") is True
        assert store.claim_discount_use("LAST1") is False
        capped_code.refresh_from_db()
        assert capped_code.uses_so_far == 1

    def test_claim_invalidates_snapshot(self, tier, capped_code):
        """A successful claim is visible in the next snapshot."""
        store = DjangoRuleTableStore()
        store.load_snapshot()
        store.claim_discount_use("LAST1")
        code = store.load_snapshot().discount_codes[0]
        assert code.usage_exhausted

    def test_unknown_code_cannot_be_claimed(self, policy):
        """Claiming an unknown code changes nothing."""
        assert DjangoRuleTableStore().claim_discount_use("NOPE") is False


@pytest.mark.django_db
class TestFreshSnapshot:
    """Tests for reading the rule tables past the cache."""

    def test_fresh_load_sees_updates_that_skip_signals(self, tier, capped_code):
        """A queryset update is visible to a fresh load and refreshes the cache."""
        store = DjangoRuleTableStore()
        store.load_snapshot()
        models.DiscountCode.objects.filter(code="LAST1").update(uses_so_far=1)
        assert not store.load_snapshot().discount_codes[0].usage_exhausted
        assert store.load_snapshot(fresh=True).discount_codes[0].usage_exhausted
        assert cache.get(SNAPSHOT_CACHE_KEY).discount_codes[0].usage_exhausted

    def test_verify_amount_rejects_code_used_up_elsewhere(self, tier, capped_code):
        """The pre-charge check drops a discount whose last use went to another registration."""
        service = PricingService(DjangoRuleTableStore(), clock=lambda: date(2026, 3, 1))
        request = PriceCalculationRequest(category_key="postgraduate", age=28, discount_code="LAST1")
        preview = service.quote(request)
        assert preview.discount_code_applied == "LAST1"
        assert preview.total.amount == Decimal("2000")

        models.DiscountCode.objects.filter(code="LAST1").update(uses_so_far=1)

        check = service.verify_amount(request, preview.total.amount)
        assert check.breakdown.discount_code_applied is None
        assert check.breakdown.discount_rejection == "usage limit reached"
        assert check.breakdown.total.amount == Decimal("2500")
        assert not check.matches
