import logging
from dataclasses import dataclass, fields
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from django.conf import settings

logger = logging.getLogger(__name__)


class VehicleType(str, Enum):
    BODA = "BODA"
    BAJAJI = "BAJAJI"
    CAR = "CAR"
    XL = "XL"
    PREMIUM = "PREMIUM"

    @classmethod
    def parse(cls, value) -> "VehicleType":
        """Resolve a vehicle type leniently. Unknown or empty values price as a CAR."""
        if isinstance(value, cls):
            return value
        key = str(value or "").strip().upper()
        if key == "VIP":
            return cls.PREMIUM
        try:
            return cls(key)
        except ValueError:
            if key:
                logger.warning("Unknown vehicle type %r, pricing as CAR", value)
            return cls.CAR


@dataclass(frozen=True)
class VehiclePricingConfig:
    base_fare: Decimal
    per_km_rate: Decimal
    per_minute_rate: Decimal
    average_speed_kmh: float

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if not value > 0:
                raise ValueError(f"{f.name} must be greater than zero, got {value!r}")

    @classmethod
    def from_dict(cls, data: Mapping) -> "VehiclePricingConfig":
        return cls(
            base_fare=Decimal(str(data["base_fare"])),
            per_km_rate=Decimal(str(data["per_km_rate"])),
            per_minute_rate=Decimal(str(data["per_minute_rate"])),
            average_speed_kmh=float(data["average_speed_kmh"]),
        )

    def to_dict(self) -> dict:
        return {
            "base_fare": float(self.base_fare),
            "per_km_rate": float(self.per_km_rate),
            "per_minute_rate": float(self.per_minute_rate),
            "average_speed_kmh": self.average_speed_kmh,
        }


DEFAULT_VEHICLE_RATES = {
    "BODA": {"base_fare": 1500, "per_km_rate": 350, "per_minute_rate": 35, "average_speed_kmh": 35},
    "BAJAJI": {"base_fare": 1800, "per_km_rate": 420, "per_minute_rate": 40, "average_speed_kmh": 28},
    "CAR": {"base_fare": 2000, "per_km_rate": 500, "per_minute_rate": 50, "average_speed_kmh": 30},
    "XL": {"base_fare": 2500, "per_km_rate": 650, "per_minute_rate": 60, "average_speed_kmh": 30},
    "PREMIUM": {"base_fare": 5000, "per_km_rate": 1200, "per_minute_rate": 80, "average_speed_kmh": 30},
}


def build_pricing_table(rows: Mapping) -> Mapping:
    """Build a read-only {VehicleType: VehiclePricingConfig} table from a
    settings-style dict keyed by vehicle name. CAR must be present since it is
    the fallback row."""
    table = {}
    for name, row in rows.items():
        try:
            vehicle = VehicleType(str(name).upper())
        except ValueError:
            raise ValueError(f"Unknown vehicle type in pricing table: {name!r}")
        table[vehicle] = VehiclePricingConfig.from_dict(row)

    if VehicleType.CAR not in table:
        raise ValueError("Pricing table must define a CAR row")
    return MappingProxyType(table)


DEFAULT_PRICING_TABLE = build_pricing_table(DEFAULT_VEHICLE_RATES)


def pricing_table_from_settings() -> Mapping:
    cfg = getattr(settings, "TRANSPORT_FARES", {}) or {}
    rows = cfg.get("VEHICLES")
    if not rows:
        return DEFAULT_PRICING_TABLE
    return build_pricing_table(rows)


def pricing_for(vehicle_type, table: Optional[Mapping] = None) -> VehiclePricingConfig:
    table = DEFAULT_PRICING_TABLE if table is None else table
    vehicle = VehicleType.parse(vehicle_type)
    return table.get(vehicle) or table[VehicleType.CAR]
