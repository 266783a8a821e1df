from pricing.services.pricing_service import PricingService, calculate_price

__all__ = ["PricingService", "calculate_price"]
