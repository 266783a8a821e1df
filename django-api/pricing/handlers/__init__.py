from pricing.handlers.views import DiscountCheckView, PriceQuoteView, PricingView, VerifyAmountView

__all__ = ["DiscountCheckView", "PriceQuoteView", "PricingView", "VerifyAmountView"]
