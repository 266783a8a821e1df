"""Django signals for cache invalidation.

Any change to a rule table drops the cached pricing snapshot.
"""

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from pricing.models import CategoryRule, DiscountCode, PricingPolicy, PricingTier, Workshop
from pricing.stores.django_store import invalidate_snapshot


@receiver([post_save, post_delete], sender=PricingPolicy)
def invalidate_policy_cache(sender, instance, **kwargs):
    """Invalidate the snapshot when the pricing policy is saved or deleted."""
    invalidate_snapshot()


@receiver([post_save, post_delete], sender=PricingTier)
@receiver([post_save, post_delete], sender=CategoryRule)
def invalidate_tier_cache(sender, instance, **kwargs):
    """Invalidate the snapshot when a tier or category fee changes."""
    invalidate_snapshot()


@receiver([post_save, post_delete], sender=Workshop)
def invalidate_workshop_cache(sender, instance, **kwargs):
    """Invalidate the snapshot when a workshop is saved or deleted."""
    invalidate_snapshot()


@receiver([post_save, post_delete], sender=DiscountCode)
def invalidate_discount_cache(sender, instance, **kwargs):
    """Invalidate the snapshot when a discount code is saved or deleted."""
    invalidate_snapshot()
