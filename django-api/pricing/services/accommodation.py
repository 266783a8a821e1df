"""Lodging add-on: nights, room subtotal and tax."""

from collections.abc import Mapping
from decimal import Decimal

from pricing.domain.errors import ConfigurationError, InvalidDateRangeError
from pricing.domain.models import AccommodationCharge, AccommodationSelection
from pricing.domain.value_objects import Money, RoomType


def calculate_accommodation(
    selection: AccommodationSelection,
    nightly_rates: Mapping[RoomType, Money],
    tax_rate_percent: Decimal,
) -> AccommodationCharge:
    """Price a stay.

    Tax is charged on the room subtotal and rounded once.

    Raises:
        ConfigurationError: If the room type has no nightly rate.
        InvalidDateRangeError: If check-out is not after check-in. The
            error carries a zeroed charge; it is never returned silently.
    """
    rate = nightly_rates.get(selection.room_type)
    if rate is None:
        raise ConfigurationError(f"No nightly rate configured for {selection.room_type.value!r} rooms")
    rate = rate.rounded()

    nights = selection.nights
    if nights <= 0:
        zero = Money.zero(rate.currency)
        raise InvalidDateRangeError(
            AccommodationCharge(
                room_type=selection.room_type,
                nights=0,
                rate=rate,
                subtotal=zero,
                tax=zero,
                tax_rate_percent=tax_rate_percent,
            )
        )

    subtotal = rate.times(nights)
    return AccommodationCharge(
        room_type=selection.room_type,
        nights=nights,
        rate=rate,
        subtotal=subtotal,
        tax=subtotal.percent(tax_rate_percent),
        tax_rate_percent=tax_rate_percent,
    )
