from django.urls import path

from pricing.handlers import DiscountCheckView, PriceQuoteView, PricingView, VerifyAmountView

urlpatterns = [
    path("pricing", PricingView.as_view(), name="pricing"),
    path("pricing/quote", PriceQuoteView.as_view(), name="pricing-quote"),
    path(
        "pricing/discount-codes/validate",
        DiscountCheckView.as_view(),
        name="discount-code-validate",
    ),
    path("pricing/verify-amount", VerifyAmountView.as_view(), name="pricing-verify-amount"),
]
