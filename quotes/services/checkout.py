import logging
import math
from datetime import date, datetime
from decimal import Decimal
from typing import Mapping, Optional, Union

from .fare import FareService, fare_breakdown_text, format_fare
from .geo import Location
from .pricing import PricingService, SystemSettingsService
from .validation import InvalidLocationError, quote_fare
from .vehicles import VehicleType

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


def nights_between(check_in: Union[date, datetime], check_out: Union[date, datetime]) -> int:
    """Billable nights for a stay; partial days round up and every stay is at least one night."""
    if not isinstance(check_in, datetime):
        check_in = datetime(check_in.year, check_in.month, check_in.day)
    if not isinstance(check_out, datetime):
        check_out = datetime(check_out.year, check_out.month, check_out.day)

    seconds = (check_out - check_in).total_seconds()
    if seconds < 0:
        raise ValueError("check_out cannot be before check_in")
    return max(1, math.ceil(seconds / SECONDS_PER_DAY))


def _destination(prop: Mapping) -> Optional[Location]:
    lat, lng = prop.get("latitude"), prop.get("longitude")
    if lat is None or lng is None:
        return None
    return Location.from_dict(prop)


class CheckoutService:
    """Single upfront total for a stay, optionally with a transfer to the property.

    The accommodation part goes through PricingService; the transport part is
    a FareService quote from the guest's pickup point to the property's
    coordinates, in the property's currency.
    """

    def __init__(self, fare_service: Optional[FareService] = None):
        self.fare_service = fare_service or FareService()

    def quote(
        self,
        prop: Mapping,
        check_in,
        check_out,
        origin: Optional[Location] = None,
        vehicle_type=VehicleType.CAR,
        at: Optional[datetime] = None,
        system_commission: Optional[float] = None,
    ) -> dict:
        nights = nights_between(check_in, check_out)
        currency = prop.get("currency") or "TZS"
        if system_commission is None:
            system_commission = SystemSettingsService.default_commission_percent()

        nightly = prop.get("base_price")
        nightly = float(nightly) if nightly is not None else 0
        accommodation = PricingService.compose_booking_price(nightly, nights, prop, system_commission)

        transport = None
        transport_total = Decimal("0")
        if origin is not None:
            destination = _destination(prop)
            if destination is None:
                raise InvalidLocationError("destination", "property location is required for transport calculation")

            result = quote_fare(origin, destination, currency=currency, at=at, vehicle_type=vehicle_type, service=self.fare_service)
            if not result.is_ok:
                raise result.error

            fare = result.value
            transport = dict(fare.to_dict(), formatted=format_fare(fare), breakdown=fare_breakdown_text(fare))
            transport_total = fare.total

        total = Decimal(str(accommodation["final_price"])) + transport_total
        logger.debug("Checkout for %s nights: accommodation %s + transport %s", nights, accommodation["final_price"], transport_total)

        return {
            "nights": nights,
            "currency": currency,
            "accommodation": accommodation,
            "transport": transport,
            "transport_fare": float(transport_total),
            "total": float(total),
        }
