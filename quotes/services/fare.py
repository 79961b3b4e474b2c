"""Upfront transport fare estimation.

The fare is computed once, before the trip, and shown to the guest as a fixed
price that is paid together with the accommodation. It is never re-metered
against live distance or traffic; callers that need the price locked must keep
the returned FareCalculation (re-running at a different time may pick up a
different surge).

    fare = FareService().calculate(origin, destination, at=pickup_time, vehicle_type="BODA")
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_CEILING, ROUND_HALF_UP
from typing import Mapping, Optional

from django.conf import settings

from .geo import Location, distance_km, travel_time_minutes
from .surge import surge_multiplier_at
from .vehicles import VehicleType, pricing_for, pricing_table_from_settings

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "TZS"


def default_currency() -> str:
    cfg = getattr(settings, "TRANSPORT_FARES", {}) or {}
    return cfg.get("DEFAULT_CURRENCY") or DEFAULT_CURRENCY


def _round_whole(value: Decimal) -> Decimal:
    return value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class FareCalculation:
    base_fare: Decimal
    distance_fare: Decimal
    time_fare: Decimal
    subtotal: Decimal
    surge_multiplier: Decimal
    total: Decimal
    distance: float
    estimated_time: int
    currency: str
    vehicle_type: VehicleType

    def to_dict(self) -> dict:
        return {
            "base_fare": float(self.base_fare),
            "distance_fare": float(self.distance_fare),
            "time_fare": float(self.time_fare),
            "subtotal": float(self.subtotal),
            "surge_multiplier": float(self.surge_multiplier),
            "total": float(self.total),
            "distance_km": self.distance,
            "estimated_time_minutes": self.estimated_time,
            "currency": self.currency,
            "vehicle_type": self.vehicle_type.value,
        }


class FareService:
    """Composes an upfront fare from distance, travel time, surge and the
    vehicle's pricing row.

    The pricing table is injected so tests and deployments can swap rates
    without touching module state; when omitted it is read from settings.
    """

    def __init__(self, pricing_table: Optional[Mapping] = None):
        self.pricing_table = pricing_table if pricing_table is not None else pricing_table_from_settings()

    def calculate(
        self,
        origin: Location,
        destination: Location,
        currency: Optional[str] = None,
        at: Optional[datetime] = None,
        vehicle_type=VehicleType.CAR,
    ) -> FareCalculation:
        vehicle = VehicleType.parse(vehicle_type)
        cfg = pricing_for(vehicle, self.pricing_table)

        distance = distance_km(origin, destination)
        estimated_time = travel_time_minutes(distance, cfg.average_speed_kmh)
        surge = surge_multiplier_at(at)

        distance_fare = _round_whole(Decimal(str(distance)) * cfg.per_km_rate)
        time_fare = _round_whole(Decimal(estimated_time) * cfg.per_minute_rate)
        subtotal = cfg.base_fare + distance_fare + time_fare

        total = (subtotal * surge).to_integral_value(rounding=ROUND_CEILING)
        # never charge less than the vehicle's base fare
        total = max(total, cfg.base_fare)

        logger.debug(
            "Fare %s: %s km, %s min, surge %s -> %s",
            vehicle.value, distance, estimated_time, surge, total,
        )

        return FareCalculation(
            base_fare=cfg.base_fare,
            distance_fare=distance_fare,
            time_fare=time_fare,
            subtotal=subtotal,
            surge_multiplier=surge,
            total=total,
            distance=distance,
            estimated_time=estimated_time,
            currency=currency or default_currency(),
            vehicle_type=vehicle,
        )


def _money(value) -> str:
    value = Decimal(value)
    if value == value.to_integral_value():
        return f"{value:,.0f}"
    return f"{value:,.2f}"


def format_fare(fare: FareCalculation) -> str:
    return f"{_money(fare.total)} {fare.currency}"


def fare_breakdown_text(fare: FareCalculation) -> str:
    """One-line itemised receipt, e.g. for the checkout summary."""
    cur = fare.currency
    distance = f"Distance ({fare.distance:.1f} km): {_money(fare.distance_fare)} {cur}"

    if fare.surge_multiplier > 1:
        uplift = fare.subtotal * fare.surge_multiplier - fare.subtotal
        parts = [
            f"Base: {_money(fare.base_fare)} {cur}",
            distance,
            f"Time ({fare.estimated_time} min): {_money(fare.time_fare)} {cur}",
            f"Surge ({fare.surge_multiplier * 100:.0f}%): +{_money(uplift)} {cur}",
        ]
    else:
        parts = [
            f"Base fare: {_money(fare.base_fare)} {cur}",
            distance,
            f"Estimated time ({fare.estimated_time} min): {_money(fare.time_fare)} {cur}",
        ]
    return " • ".join(parts)
