"""Pytest configuration and shared fixtures."""

from datetime import date
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

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
from pricing.stores.interfaces import RuleTableStore


def inr(amount) -> Money:
    return Money(Decimal(str(amount)), "INR")


def _categories(member: int, consultant: int, postgraduate: int, international: int):
    return (
        CategoryRule("issh-member", "ISSH Member", inr(member)),
        CategoryRule(
            "consultant",
            "Consultant / Practicing Surgeon",
            inr(consultant),
            age_exemption=AgeExemption(min_age=70, applicable_category_keys=frozenset({"consultant"})),
        ),
        CategoryRule("postgraduate", "Postgraduate / Resident", inr(postgraduate)),
        CategoryRule("international", "International Delegate", inr(international)),
        CategoryRule("complimentary", "Complimentary", inr(0)),
    )


class InMemoryRuleTableStore(RuleTableStore):
    """Store double holding a fixed snapshot."""

    def __init__(self, snapshot: RuleTableSnapshot) -> None:
        self.snapshot = snapshot
        self.loads = 0
        self.fresh_loads = 0

    def load_snapshot(self, fresh: bool = False) -> RuleTableSnapshot:
        self.loads += 1
        if fresh:
            self.fresh_loads += 1
        return self.snapshot

    def claim_discount_use(self, code: str) -> bool:
        return False


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def tiers() -> tuple[PricingTier, ...]:
    return (
        PricingTier(
            id="early-bird",
            name="Early Bird",
            window=DateWindow(date(2025, 10, 1), date(2026, 1, 31)),
            active=True,
            categories=_categories(4000, 5000, 2500, 10000),
        ),
        PricingTier(
            id="regular",
            name="Regular",
            window=DateWindow(date(2026, 2, 1), date(2026, 4, 20)),
            active=True,
            categories=_categories(4500, 5000, 2500, 12000),
        ),
        PricingTier(
            id="onsite",
            name="Late / Spot Registration",
            window=DateWindow(date(2026, 4, 21), date(2026, 4, 26)),
            active=True,
            categories=_categories(5500, 6000, 3000, 15000),
            accompanying_person_fee=inr(3500),
        ),
    )


@pytest.fixture
def workshops() -> tuple[Workshop, ...]:
    return (
        Workshop("hand-surgery-live", "Live Hand Surgery Workshop", inr(3500), capacity=50),
        Workshop("microsurgery-basics", "Microsurgery Basics", inr(2500), capacity=40),
        Workshop("nerve-repair", "Nerve Repair Techniques", inr(3000), capacity=30),
    )


@pytest.fixture
def discount_codes() -> tuple[DiscountCode, ...]:
    window = DateWindow(date(2025, 10, 1), date(2026, 4, 20))
    return (
        DiscountCode("SAVE15", DiscountKind.PERCENTAGE, Decimal("15"), window),
        DiscountCode(
            "PGSTUDENT2026",
            DiscountKind.PERCENTAGE,
            Decimal("10"),
            window,
            applicable_category_keys=frozenset({"postgraduate"}),
        ),
        DiscountCode("FLAT10000", DiscountKind.FIXED, Decimal("10000"), window),
        DiscountCode(
            "EARLYBIRD2026",
            DiscountKind.PERCENTAGE,
            Decimal("15"),
            DateWindow(date(2025, 10, 1), date(2026, 1, 31)),
        ),
        DiscountCode("FUTURE", DiscountKind.FIXED, Decimal("500"), DateWindow(date(2026, 6, 1), date(2026, 6, 30))),
        DiscountCode("RETIRED", DiscountKind.FIXED, Decimal("500"), window, active=False),
        DiscountCode(
            "ISSH2026",
            DiscountKind.PERCENTAGE,
            Decimal("10"),
            window,
            max_uses=200,
            uses_so_far=200,
            applicable_category_keys=frozenset({"issh-member"}),
        ),
    )


@pytest.fixture
def snapshot(tiers, workshops, discount_codes) -> RuleTableSnapshot:
    return RuleTableSnapshot(
        currency="INR",
        tiers=tiers,
        workshops=workshops,
        discount_codes=discount_codes,
        accompanying_persons=AccompanyingPersonPolicy(fee=inr(3000), exemption_age=10),
        accommodation=AccommodationPolicy(
            nightly_rates={RoomType.SINGLE: inr(10000), RoomType.SHARING: inr(6000)},
            tax_rate_percent=Decimal("18"),
        ),
        limits=RegistrationLimits(max_workshops=3, max_accompanying_persons=2),
    )


@pytest.fixture
def store(snapshot) -> InMemoryRuleTableStore:
    return InMemoryRuleTableStore(snapshot)
