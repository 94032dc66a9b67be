"""Domain exceptions raised by the fare engine and its collaborators."""

from typing import Optional


class FareError(Exception):
    """Base class for fare-engine errors."""


class InvalidInput(FareError):
    """Raised for malformed request values (negative weight, NaN, ...)."""


class InvalidCoordinate(InvalidInput):
    """Raised when a latitude / longitude falls outside its valid range."""


class CategoryNotFound(FareError):
    """No active truck category exists for the requested truck type or id."""

    def __init__(self, truck_type=None, category_id: Optional[int] = None):
        self.truck_type = getattr(truck_type, "value", truck_type)
        self.category_id = category_id
        if category_id is not None:
            target = f"id {category_id}"
        else:
            target = self.truck_type
        super().__init__(f"Truck category not found for {target}")


class MappingProviderError(FareError):
    """The external routing provider failed or returned an unusable answer.

    Only ever raised by routing clients; the fare calculator recovers from
    it by falling back to Haversine estimates.
    """
