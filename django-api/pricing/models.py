"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class PricingPolicy(models.Model):
    """Conference-wide pricing settings. A single row is expected."""

    currency = models.CharField(max_length=3, default="INR")
    fallback_tier_slug = models.SlugField(max_length=50, default="regular")
    accompanying_person_fee = models.DecimalField(
        max_digits=10, decimal_places=2, validators=[MinValueValidator(0)]
    )
    accompanying_person_exemption_age = models.PositiveIntegerField(default=10)
    single_room_rate = models.DecimalField(
        max_digits=10, decimal_places=2, validators=[MinValueValidator(0)]
    )
    sharing_room_rate = models.DecimalField(
        max_digits=10, decimal_places=2, validators=[MinValueValidator(0)]
    )
    accommodation_tax_percent = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=18,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    max_workshops = models.PositiveIntegerField(null=True, blank=True)
    max_accompanying_persons = models.PositiveIntegerField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "pricing policies"

    def __str__(self) -> str:
        return f"Pricing policy ({self.currency})"


class PricingTier(models.Model):
    """Persistence model for date-windowed fee schedules."""

    slug = models.SlugField(max_length=50, unique=True)
    name = models.CharField(max_length=100)
    description = models.CharField(max_length=255, blank=True)
    starts_on = models.DateField()
    ends_on = models.DateField()
    is_active = models.BooleanField(default=True)
    position = models.PositiveIntegerField(default=0)
    accompanying_person_fee = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
    )

    class Meta:
        ordering = ["position", "id"]

    def __str__(self) -> str:
        return self.name


class CategoryRule(models.Model):
    """Persistence model for a category's fee within a tier."""

    tier = models.ForeignKey(PricingTier, on_delete=models.CASCADE, related_name="categories")
    key = models.SlugField(max_length=50)
    label = models.CharField(max_length=100)
    description = models.CharField(max_length=255, blank=True)
    amount = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    exemption_min_age = models.PositiveIntegerField(null=True, blank=True)
    exemption_category_keys = models.JSONField(default=list, blank=True)

    class Meta:
        ordering = ["tier", "id"]
        constraints = [
            models.UniqueConstraint(fields=["tier", "key"], name="unique_category_per_tier"),
        ]

    def __str__(self) -> str:
        return f"{self.tier.name} - {self.label}"


class Workshop(models.Model):
    """Persistence model for workshop add-ons."""

    slug = models.SlugField(max_length=50, unique=True)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    amount = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    capacity = models.PositiveIntegerField(null=True, blank=True)
    seats_taken = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["is_active"], name="pricing_workshop_active_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} - {self.amount}"


class DiscountCode(models.Model):
    """Persistence model for discount codes."""

    class Kind(models.TextChoices):
        PERCENTAGE = "percentage", "Percentage"
        FIXED = "fixed", "Fixed amount"

    code = models.CharField(max_length=50, unique=True)
    kind = models.CharField(max_length=20, choices=Kind.choices)
    value = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    description = models.CharField(max_length=255, blank=True)
    valid_from = models.DateField()
    valid_to = models.DateField()
    is_active = models.BooleanField(default=True)
    max_uses = models.PositiveIntegerField(null=True, blank=True)
    uses_so_far = models.PositiveIntegerField(default=0)
    applicable_category_keys = models.JSONField(default=list, blank=True)

    class Meta:
        ordering = ["code"]

    def save(self, *args, **kwargs):
        self.code = self.code.strip().upper()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.code
