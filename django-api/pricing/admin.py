from django.contrib import admin

from pricing.models import CategoryRule, DiscountCode, PricingPolicy, PricingTier, Workshop


class CategoryRuleInline(admin.TabularInline):
    model = CategoryRule
    extra = 1


@admin.register(PricingPolicy)
class PricingPolicyAdmin(admin.ModelAdmin):
    list_display = ["currency", "fallback_tier_slug", "accompanying_person_fee", "updated_at"]


@admin.register(PricingTier)
class PricingTierAdmin(admin.ModelAdmin):
    list_display = ["name", "slug", "starts_on", "ends_on", "is_active", "position"]
    list_editable = ["position"]
    inlines = [CategoryRuleInline]


@admin.register(Workshop)
class WorkshopAdmin(admin.ModelAdmin):
    list_display = ["name", "slug", "amount", "capacity", "seats_taken", "is_active"]
    list_filter = ["is_active"]
    search_fields = ["name", "slug"]


@admin.register(DiscountCode)
class DiscountCodeAdmin(admin.ModelAdmin):
    list_display = ["code", "kind", "value", "valid_from", "valid_to", "is_active", "uses_so_far", "max_uses"]
    list_filter = ["kind", "is_active"]
    search_fields = ["code"]
    readonly_fields = ["uses_so_far"]
