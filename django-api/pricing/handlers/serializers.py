"""Serializers for parsing quote requests and rendering pricing responses."""

from rest_framework import serializers

from pricing.domain import (
    AccommodationSelection,
    AccompanyingPerson,
    PriceCalculationRequest,
    RoomType,
)
from pricing.handlers.adapters import apply_request_aliases


class AccompanyingPersonSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    age = serializers.IntegerField(min_value=0, max_value=150)
    relationship = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    dietaryRequirements = serializers.CharField(
        max_length=255, required=False, allow_blank=True, default=""
    )


class AccommodationSelectionSerializer(serializers.Serializer):
    roomType = serializers.ChoiceField(choices=[room.value for room in RoomType])
    checkIn = serializers.DateField()
    checkOut = serializers.DateField()


class PriceQuoteRequestSerializer(serializers.Serializer):
    """Validates a quote payload and builds a PriceCalculationRequest."""

    categoryKey = serializers.CharField(max_length=50)
    age = serializers.IntegerField(min_value=0, max_value=150, required=False, default=0)
    workshopIds = serializers.ListField(
        child=serializers.CharField(max_length=50), required=False, default=list
    )
    accompanyingPersons = AccompanyingPersonSerializer(many=True, required=False, default=list)
    discountCode = serializers.CharField(
        max_length=50, required=False, allow_blank=True, allow_null=True, default=None
    )
    accommodation = AccommodationSelectionSerializer(required=False, allow_null=True, default=None)

    def to_internal_value(self, data):
        return super().to_internal_value(apply_request_aliases(data))

    def to_request(self) -> PriceCalculationRequest:
        data = self.validated_data
        stay = data.get("accommodation")
        return PriceCalculationRequest(
            category_key=data["categoryKey"],
            age=data["age"],
            workshop_ids=tuple(data["workshopIds"]),
            accompanying_persons=tuple(
                AccompanyingPerson(
                    name=person["name"],
                    age=person["age"],
                    relationship=person["relationship"],
                    dietary_requirements=person["dietaryRequirements"],
                )
                for person in data["accompanyingPersons"]
            ),
            discount_code=data.get("discountCode") or None,
            accommodation=(
                AccommodationSelection(
                    room_type=RoomType(stay["roomType"]),
                    check_in=stay["checkIn"],
                    check_out=stay["checkOut"],
                )
                if stay
                else None
            ),
        )


class VerifyAmountRequestSerializer(PriceQuoteRequestSerializer):
    claimedAmount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)


class DiscountCheckRequestSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=50)
    categoryKey = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    subtotal = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, default=0
    )


def _amount(money) -> str:
    return str(money.amount)


class DiscountResultSerializer(serializers.Serializer):
    """Serializer for DiscountResult domain model."""

    def to_representation(self, instance):
        return {
            "valid": instance.valid,
            "code": instance.code,
            "kind": instance.kind.value if instance.kind else None,
            "value": str(instance.value) if instance.value is not None else None,
            "amount": _amount(instance.amount),
            "reason": instance.reason,
            "message": instance.message,
        }


class PricingTierSerializer(serializers.Serializer):
    """Serializer for PricingTier domain model."""

    def to_representation(self, instance):
        return {
            "id": instance.id,
            "name": instance.name,
            "description": instance.description,
            "startDate": instance.window.starts_on.isoformat(),
            "endDate": instance.window.ends_on.isoformat(),
            "isActive": instance.active,
            "categories": {
                rule.key: {
                    "key": rule.key,
                    "label": rule.label,
                    "amount": _amount(rule.amount),
                    "currency": rule.amount.currency,
                    "description": rule.description,
                }
                for rule in instance.categories
            },
        }


class CurrentPricingSerializer(serializers.Serializer):
    """Serializer for CurrentPricing domain model."""

    def to_representation(self, instance):
        tier_serializer = PricingTierSerializer()
        return {
            "currentTier": instance.tier.id,
            "currentTierDetails": tier_serializer.to_representation(instance.tier),
            "allTiers": [tier_serializer.to_representation(tier) for tier in instance.tiers],
            "currency": instance.currency,
            "workshops": [
                {
                    "id": workshop.id,
                    "name": workshop.name,
                    "description": workshop.description,
                    "amount": _amount(workshop.amount),
                    "capacity": workshop.capacity,
                    "seatsTaken": workshop.seats_taken,
                }
                for workshop in instance.workshops
            ],
            "accompanyingPerson": {
                "amount": _amount(instance.accompanying_person_fee),
                "currency": instance.accompanying_person_fee.currency,
                "exemptionAge": instance.accompanying_person_exemption_age,
            },
            "accommodation": {
                "rates": {
                    room.value: _amount(rate)
                    for room, rate in instance.accommodation.nightly_rates
                },
                "taxRatePercent": str(instance.accommodation.tax_rate_percent),
            },
        }
