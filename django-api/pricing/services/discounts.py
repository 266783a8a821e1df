"""Discount code eligibility and amount."""

import logging
from collections.abc import Sequence
from datetime import date
from enum import Enum

from pricing.domain.models import DiscountCode, DiscountResult
from pricing.domain.value_objects import DiscountKind, Money

logger = logging.getLogger(__name__)


class DiscountRejection(Enum):
    """Why a discount code was not applied, in validation order."""

    NOT_FOUND = "not found"
    INACTIVE = "inactive"
    NOT_YET_VALID = "not yet valid"
    EXPIRED = "expired"
    USAGE_LIMIT_REACHED = "usage limit reached"
    NOT_APPLICABLE = "not applicable to category"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    DiscountRejection.NOT_FOUND: "Invalid discount code",
    DiscountRejection.INACTIVE: "This discount code is no longer active",
    DiscountRejection.NOT_YET_VALID: "This discount code is not yet valid",
    DiscountRejection.EXPIRED: "This discount code has expired",
    DiscountRejection.USAGE_LIMIT_REACHED: "This discount code has reached its maximum usage limit",
    DiscountRejection.NOT_APPLICABLE: "This discount code is not applicable to your registration type",
}


def normalize_code(code: str) -> str:
    return code.strip().upper()


def find_discount(code: str, registry: Sequence[DiscountCode]) -> DiscountCode | None:
    wanted = normalize_code(code)
    for discount in registry:
        if normalize_code(discount.code) == wanted:
            return discount
    return None


def check_eligibility(
    discount: DiscountCode | None, category_key: str | None, today: date
) -> DiscountRejection | None:
    """Return the first rule the code fails, or None if it is usable.

    A None category skips the category restriction.
    """
    if discount is None:
        return DiscountRejection.NOT_FOUND
    if not discount.active:
        return DiscountRejection.INACTIVE
    if discount.window.is_upcoming(today):
        return DiscountRejection.NOT_YET_VALID
    if discount.window.has_ended(today):
        return DiscountRejection.EXPIRED
    if discount.usage_exhausted:
        return DiscountRejection.USAGE_LIMIT_REACHED
    if category_key is not None and not discount.applies_to_category(category_key):
        return DiscountRejection.NOT_APPLICABLE
    return None


def discount_amount(discount: DiscountCode, subtotal: Money) -> Money:
    """Amount taken off `subtotal`, clamped to [0, subtotal]."""
    if discount.kind is DiscountKind.PERCENTAGE:
        amount = subtotal.percent(discount.value)
    else:
        amount = Money(discount.value, subtotal.currency).rounded()
    return amount.clamp(subtotal)


def resolve_discount(
    code: str,
    category_key: str | None,
    today: date,
    subtotal: Money,
    registry: Sequence[DiscountCode],
) -> DiscountResult:
    """Validate `code` and compute its amount against `subtotal`.

    Ineligibility is reported in the result, never raised. Reads only,
    so callers can repeat it right before charging.
    """
    discount = find_discount(code, registry)
    rejection = check_eligibility(discount, category_key, today)
    if rejection is not None:
        logger.info("Discount code %r rejected: %s", code, rejection.value)
        return DiscountResult(
            valid=False,
            amount=Money.zero(subtotal.currency),
            code=discount.code if discount else normalize_code(code),
            reason=rejection.value,
            message=rejection.message,
        )

    return DiscountResult(
        valid=True,
        amount=discount_amount(discount, subtotal),
        code=discount.code,
        kind=discount.kind,
        value=discount.value,
    )
