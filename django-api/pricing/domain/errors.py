"""Domain error codes for the pricing module."""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pricing.domain.models import AccommodationCharge


class ErrorCode(Enum):
    """Domain error codes."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    UNKNOWN_CATEGORY = "UNKNOWN_CATEGORY"
    UNKNOWN_WORKSHOP = "UNKNOWN_WORKSHOP"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
    REQUEST_VALIDATION = "REQUEST_VALIDATION"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ConfigurationError(DomainError):
    """Raised when the rule tables cannot price a request."""

    def __init__(self, detail: str) -> None:
        super().__init__(
            code=ErrorCode.CONFIGURATION_ERROR,
            message="Pricing is temporarily unavailable",
        )
        object.__setattr__(self, "detail", detail)

    def __str__(self) -> str:
        return f"{self.code.value}: {self.detail}"


class UnknownCategoryError(DomainError):
    """Raised when a registration category is not priced by the tier."""

    field = "categoryKey"

    def __init__(self, category_key: str) -> None:
        super().__init__(
            code=ErrorCode.UNKNOWN_CATEGORY,
            message=f"Unknown registration category: {category_key}",
        )
        object.__setattr__(self, "category_key", category_key)


class UnknownWorkshopError(DomainError):
    """Raised when a workshop id is not in the catalog."""

    field = "workshopIds"

    def __init__(self, workshop_id: str) -> None:
        super().__init__(
            code=ErrorCode.UNKNOWN_WORKSHOP,
            message=f"Unknown workshop: {workshop_id}",
        )
        object.__setattr__(self, "workshop_id", workshop_id)


class InvalidDateRangeError(DomainError):
    """Raised when check-out is not after check-in.

    The zeroed accommodation charge is attached so the caller can decide
    whether to drop the accommodation line or reject the request.
    """

    field = "accommodation"

    def __init__(self, charge: "AccommodationCharge") -> None:
        super().__init__(
            code=ErrorCode.INVALID_DATE_RANGE,
            message="Check-out date must be after check-in date",
        )
        object.__setattr__(self, "charge", charge)


class RequestValidationError(DomainError):
    """Raised when a request breaks a registration limit."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(code=ErrorCode.REQUEST_VALIDATION, message=message)
        object.__setattr__(self, "field", field)
