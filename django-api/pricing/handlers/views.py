"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import logging

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from pricing.domain.errors import ConfigurationError, DomainError
from pricing.handlers.adapters import with_legacy_aliases
from pricing.handlers.serializers import (
    CurrentPricingSerializer,
    DiscountCheckRequestSerializer,
    DiscountResultSerializer,
    PriceQuoteRequestSerializer,
    VerifyAmountRequestSerializer,
)
from pricing.services import PricingService
from pricing.stores import DjangoRuleTableStore

logger = logging.getLogger(__name__)


def get_pricing_service() -> PricingService:
    return PricingService(DjangoRuleTableStore())


def domain_error_response(error: DomainError) -> Response:
    if isinstance(error, ConfigurationError):
        logger.error("Pricing configuration error: %s", error.detail)
        return Response(
            {"code": error.code.value, "message": error.message},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return Response(
        {
            "code": error.code.value,
            "message": error.message,
            "field": getattr(error, "field", None),
        },
        status=status.HTTP_400_BAD_REQUEST,
    )


class PricingView(APIView):
    """Handler for GET /api/pricing"""

    def get(self, request: Request) -> Response:
        try:
            pricing = get_pricing_service().current_pricing()
        except DomainError as error:
            return domain_error_response(error)
        return Response(CurrentPricingSerializer(pricing).data)


class PriceQuoteView(APIView):
    """Handler for POST /api/pricing/quote"""

    def post(self, request: Request) -> Response:
        serializer = PriceQuoteRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            breakdown = get_pricing_service().quote(serializer.to_request())
        except DomainError as error:
            return domain_error_response(error)

        payload = breakdown.as_dict()
        if request.query_params.get("legacy") in ("1", "true"):
            payload = with_legacy_aliases(payload)
        return Response(payload)


class DiscountCheckView(APIView):
    """Handler for POST /api/pricing/discount-codes/validate"""

    def post(self, request: Request) -> Response:
        serializer = DiscountCheckRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            result = get_pricing_service().check_discount(
                data["code"], data["categoryKey"], data["subtotal"]
            )
        except DomainError as error:
            return domain_error_response(error)
        return Response(DiscountResultSerializer(result).data)


class VerifyAmountView(APIView):
    """Handler for POST /api/pricing/verify-amount"""

    def post(self, request: Request) -> Response:
        serializer = VerifyAmountRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            check = get_pricing_service().verify_amount(
                serializer.to_request(), serializer.validated_data["claimedAmount"]
            )
        except DomainError as error:
            return domain_error_response(error)
        return Response(
            {
                "matches": check.matches,
                "expected": str(check.expected.amount),
                "claimed": str(check.claimed),
                "difference": str(check.difference),
                "currency": check.expected.currency,
            }
        )
