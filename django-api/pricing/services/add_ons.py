"""Workshop and accompanying-person charges."""

from collections.abc import Iterable, Sequence

from pricing.domain.errors import ConfigurationError, UnknownWorkshopError
from pricing.domain.models import (
    AccompanyingPerson,
    AccompanyingPersonCharges,
    Workshop,
    WorkshopCharges,
    WorkshopLine,
)
from pricing.domain.value_objects import Money


def aggregate_workshops(
    workshop_ids: Iterable[str], catalog: Sequence[Workshop], currency: str
) -> WorkshopCharges:
    """Sum the fees of the selected workshops.

    Repeated ids are charged once. Capacity is not checked here.

    Raises:
        UnknownWorkshopError: If any id is missing from the catalog.
        ConfigurationError: If a workshop is priced in another currency.
    """
    by_id = {workshop.id: workshop for workshop in catalog}
    lines: list[WorkshopLine] = []
    seen: set[str] = set()
    total = Money.zero(currency)

    for workshop_id in workshop_ids:
        if workshop_id in seen:
            continue
        seen.add(workshop_id)

        workshop = by_id.get(workshop_id)
        if workshop is None:
            raise UnknownWorkshopError(workshop_id)
        if workshop.amount.currency != currency:
            raise ConfigurationError(
                f"Workshop {workshop.id!r} is priced in {workshop.amount.currency}, expected {currency}"
            )

        amount = workshop.amount.rounded()
        lines.append(WorkshopLine(id=workshop.id, name=workshop.name, amount=amount))
        total = total + amount

    return WorkshopCharges(total=total, lines=tuple(lines))


def calculate_accompanying_persons(
    persons: Sequence[AccompanyingPerson], fee_per_person: Money, exemption_age: int
) -> AccompanyingPersonCharges:
    """Charge every accompanying person aged `exemption_age` or older.

    Only age matters; relationship and dietary requirements are display fields.
    """
    exempt_count = sum(1 for person in persons if person.age < exemption_age)
    liable_count = len(persons) - exempt_count
    fee = fee_per_person.rounded()
    return AccompanyingPersonCharges(
        liable_count=liable_count,
        exempt_count=exempt_count,
        fee_per_person=fee,
        total=fee.times(liable_count),
    )
