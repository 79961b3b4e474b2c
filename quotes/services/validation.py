import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Union

from .fare import FareService
from .geo import Location, is_valid_location
from .vehicles import VehicleType

logger = logging.getLogger(__name__)


class QuoteValidationError(ValueError):
    """Input rejected before it reached a pricing function."""


class InvalidLocationError(QuoteValidationError):
    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")


@dataclass(frozen=True)
class Ok:
    value: Any

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: QuoteValidationError

    @property
    def is_ok(self) -> bool:
        return False


Result = Union[Ok, Err]


def validate_location(location: Optional[Location], field: str) -> Result:
    if location is None:
        return Err(InvalidLocationError(field, "location is required"))
    if not is_valid_location(location):
        return Err(InvalidLocationError(
            field,
            f"coordinates ({location.latitude}, {location.longitude}) must be finite, "
            "latitude within [-90, 90] and longitude within [-180, 180]",
        ))
    return Ok(location)


def quote_fare(
    origin: Optional[Location],
    destination: Optional[Location],
    currency: Optional[str] = None,
    at: Optional[datetime] = None,
    vehicle_type=VehicleType.CAR,
    service: Optional[FareService] = None,
) -> Result:
    """Validate both ends of the trip and only then price it.

    Returns Ok(FareCalculation) or Err(InvalidLocationError); the fare
    composer itself is never handed bad geometry.
    """
    for checked in (validate_location(origin, "origin"), validate_location(destination, "destination")):
        if not checked.is_ok:
            logger.warning("Rejected fare quote: %s", checked.error)
            return checked

    service = service or FareService()
    return Ok(service.calculate(origin, destination, currency=currency, at=at, vehicle_type=vehicle_type))
