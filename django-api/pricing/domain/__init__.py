from pricing.domain.models import (
    AccommodationCharge,
    AccommodationPolicy,
    AccommodationSelection,
    AccompanyingPerson,
    AccompanyingPersonCharges,
    AccompanyingPersonPolicy,
    AgeExemption,
    CategoryPrice,
    CategoryRule,
    CurrentPricing,
    DiscountCode,
    DiscountResult,
    PaymentAmountCheck,
    PerLineBreakdown,
    PriceBreakdown,
    PriceCalculationRequest,
    PricingTier,
    RegistrationLimits,
    RuleTableSnapshot,
    Workshop,
    WorkshopCharges,
    WorkshopLine,
)
from pricing.domain.value_objects import DateWindow, DiscountKind, Money, RoomType

__all__ = [
    "AccommodationCharge",
    "AccommodationPolicy",
    "AccommodationSelection",
    "AccompanyingPerson",
    "AccompanyingPersonCharges",
    "AccompanyingPersonPolicy",
    "AgeExemption",
    "CategoryPrice",
    "CategoryRule",
    "CurrentPricing",
    "DiscountCode",
    "DiscountResult",
    "PaymentAmountCheck",
    "PerLineBreakdown",
    "PriceBreakdown",
    "PriceCalculationRequest",
    "PricingTier",
    "RegistrationLimits",
    "RuleTableSnapshot",
    "Workshop",
    "WorkshopCharges",
    "WorkshopLine",
    "DateWindow",
    "DiscountKind",
    "Money",
    "RoomType",
]
